from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import Column, String, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


class Database:
    """Engine plus session factory. Built once by the entry point and passed around."""

    def __init__(self, database_url: str, *, echo: bool = False, timeout: Optional[float] = None):
        connect_args = {}
        engine_args = {}
        if database_url.startswith("sqlite"):
            # Sessions are opened from worker threads.
            connect_args["check_same_thread"] = False
            if timeout:
                # Seconds a connection waits on a locked database before failing.
                connect_args["timeout"] = timeout
        elif timeout:
            engine_args["pool_timeout"] = timeout
        self.url = database_url
        self.engine = create_engine(
            database_url, future=True, echo=echo, connect_args=connect_args, **engine_args
        )
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False, future=True)

    @contextmanager
    def session(self) -> Iterator[Session]:
        with self.SessionLocal() as session:
            yield session

    def create_all(self) -> None:
        # Import for side effects so every table is registered on Base.metadata.
        from achievements import models  # noqa: F401

        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def new_id() -> str:
    return uuid.uuid4().hex


class YearScopedMixin:
    """Columns shared by every per-year collection."""

    app_id = Column(String(64), nullable=False, index=True)
    academic_year_id = Column(String(64), nullable=False, index=True)
