"""Command line entry point.

    python -m achievements create-db
    python -m achievements run [--timeout SECONDS] [--workers N]

Scheduling is external: cron (or any other clock) calls `run` once a day.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from achievements.config import configure_logging, settings
from achievements.extensions import Database
from achievements.repository import SchoolStore
from achievements.services.evaluation import run_badge_check

log = logging.getLogger("achievements")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="achievements", description="Student achievement (badge) engine")
    parser.add_argument("--database-url", default=settings.DATABASE_URL)
    parser.add_argument("--app-id", default=settings.APP_ID)
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("create-db", help="Create all tables")

    run = sub.add_parser("run", help="Evaluate and award badges for every student of the current year")
    run.add_argument("--workers", type=int, default=settings.WORKER_COUNT)
    run.add_argument("--timeout", type=float, default=settings.STUDENT_TIMEOUT_SECONDS,
                     help="Per-student timeout in seconds (0 disables)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    database = Database(args.database_url, timeout=settings.DB_TIMEOUT_SECONDS)
    try:
        if args.command == "create-db":
            database.create_all()
            log.info("Tables created on %s", args.database_url)
            return 0

        store = SchoolStore(database, app_id=args.app_id)
        summary = asyncio.run(run_badge_check(
            store,
            workers=args.workers,
            student_timeout=args.timeout,
            zone=settings.local_zone(),
        ))
        return 1 if summary.failed else 0
    except Exception:
        log.exception("Error running daily badge check")
        return 2
    finally:
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
