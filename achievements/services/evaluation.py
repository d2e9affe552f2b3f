"""Daily badge check.

For the current academic year, every student is evaluated independently:
snapshot -> rules -> dedup guard -> XP recompute -> one atomic commit.
Students run concurrently on a bounded pool; one student failing or timing
out never stops the others. Nothing is kept in memory between runs, so a
crashed run is recovered by simply running again.
"""
from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import datetime, timezone, tzinfo
from typing import Iterable, Optional

from achievements.config import Settings
from achievements.errors import AchievementsError, CommitError
from achievements.repository import SchoolStore
from achievements.schemas import BatchSummary, StudentResult
from achievements.services.aggregator import gather_snapshot
from achievements.services.awarding import filter_new_awards, total_xp
from achievements.services.rules import RULES, Rule, evaluate_rules

log = logging.getLogger(__name__)

DEFAULT_WORKERS = 8
DEFAULT_STUDENT_TIMEOUT = 60.0
# One thread per snapshot read.
READS_PER_STUDENT = 9


async def evaluate_student(
    store: SchoolStore,
    year_id: str,
    student_id: str,
    *,
    now: Optional[datetime] = None,
    zone: tzinfo = timezone.utc,
    rules: Iterable[Rule] = RULES,
    read_timeout: Optional[float] = None,
    executor: Optional[Executor] = None,
) -> StudentResult:
    """Evaluate one student and commit whatever is new.

    `read_timeout` bounds the snapshot reads only. Once the commit has been
    handed to the store it runs to completion, so the result always reports
    what was actually stored.
    """
    snapshot = await asyncio.wait_for(
        gather_snapshot(store, year_id, student_id, now=now, zone=zone, executor=executor),
        timeout=read_timeout,
    )
    candidates = evaluate_rules(snapshot, rules)
    accepted = filter_new_awards(candidates, snapshot.earned_badges)
    new_total = total_xp(snapshot.earned_badges, accepted)

    if accepted or new_total != snapshot.student.total_xp:
        loop = asyncio.get_running_loop()
        try:
            # earned_at is stamped by the store at commit time.
            await loop.run_in_executor(
                executor, functools.partial(store.commit_awards, year_id, student_id, accepted, new_total)
            )
        except Exception as exc:
            raise CommitError(student_id) from exc
        if accepted:
            log.info(
                "Awarded %d new badges to student %s: %s (total xp %d)",
                len(accepted), student_id, ", ".join(a.badge_id for a in accepted), new_total,
            )
        else:
            log.info("Corrected total xp for student %s to %d", student_id, new_total)

    return StudentResult(student_id=student_id, ok=True, awarded=accepted, total_xp=new_total)


async def _evaluate_isolated(
    store: SchoolStore,
    year_id: str,
    student_id: str,
    semaphore: asyncio.Semaphore,
    timeout: Optional[float],
    **kwargs,
) -> StudentResult:
    async with semaphore:
        # Threads of a student whose reads hang past the timeout are never reused by another student.
        executor = ThreadPoolExecutor(max_workers=READS_PER_STUDENT, thread_name_prefix=f"badges-{student_id}")
        try:
            return await evaluate_student(
                store, year_id, student_id, read_timeout=timeout, executor=executor, **kwargs
            )
        except asyncio.TimeoutError:
            log.warning("Reading records for student %s timed out after %ss", student_id, timeout)
            return StudentResult(student_id=student_id, ok=False, error="timed out")
        except AchievementsError as exc:
            log.error("Error checking badges for student %s: %s", student_id, exc, exc_info=exc.__cause__ or exc)
            return StudentResult(student_id=student_id, ok=False, error=str(exc))
        except Exception as exc:
            log.exception("Unexpected error checking badges for student %s", student_id)
            return StudentResult(student_id=student_id, ok=False, error=repr(exc))
        finally:
            executor.shutdown(wait=False, cancel_futures=True)


async def run_badge_check(
    store: SchoolStore,
    *,
    workers: int = DEFAULT_WORKERS,
    student_timeout: Optional[float] = DEFAULT_STUDENT_TIMEOUT,
    now: Optional[datetime] = None,
    zone: tzinfo = timezone.utc,
    rules: Iterable[Rule] = RULES,
) -> BatchSummary:
    log.info("Starting daily badge check for all students...")
    year_id = await asyncio.to_thread(store.current_academic_year)
    if year_id is None:
        log.warning("No current academic year found. Exiting.")
        return BatchSummary()
    log.info("Processing for academic year: %s", year_id)

    student_ids = await asyncio.to_thread(store.list_student_ids, year_id)
    if not student_ids:
        log.info("No students found for this year. Exiting.")
        return BatchSummary(academic_year_id=year_id)
    log.info("Found %d students to check.", len(student_ids))

    rules = tuple(rules)
    semaphore = asyncio.Semaphore(max(1, workers))
    results = await asyncio.gather(*(
        _evaluate_isolated(
            store, year_id, student_id, semaphore, student_timeout or None,
            now=now, zone=zone, rules=rules,
        )
        for student_id in student_ids
    ))

    summary = BatchSummary(academic_year_id=year_id, results=list(results))
    log.info(
        "Daily badge check finished: %d processed, %d succeeded, %d failed, %d badges awarded.",
        summary.processed, summary.succeeded, len(summary.failed), summary.awarded,
    )
    if summary.failed:
        log.warning("Students that failed: %s", ", ".join(summary.failed))
    return summary


async def run_badge_check_from_settings(store: SchoolStore, settings: Settings, **kwargs) -> BatchSummary:
    return await run_badge_check(
        store,
        workers=settings.WORKER_COUNT,
        student_timeout=settings.STUDENT_TIMEOUT_SECONDS,
        zone=settings.local_zone(),
        **kwargs,
    )
