"""Builders for typed records and snapshots used by the rule tests."""
import itertools
from datetime import datetime, timedelta, timezone

from achievements.schemas import (
    AbsenceRecord,
    AnnouncementRecord,
    AssignmentRecord,
    ClassroomRecord,
    EarnedBadgeRecord,
    GradeRecord,
    StudentRecord,
    StudentSnapshot,
    SubmissionRecord,
    UserEventRecord,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

_ids = itertools.count(1)


def _next_id(prefix: str) -> str:
    return f"{prefix}-{next(_ids)}"


def ago(days: float = 0, hours: float = 0) -> datetime:
    return NOW - timedelta(days=days, hours=hours)


def grade(value, subject="Math", *, type="test", date=None, days_ago=1, id=None):
    return GradeRecord(
        id=id or _next_id("grade"),
        student_id="s1",
        subject=subject,
        type=type,
        grade=value,
        date=date or ago(days_ago),
    )


def absence(days_ago, status="unexcused", id=None):
    return AbsenceRecord(id=id or _next_id("absence"), student_id="s1", date=ago(days_ago), status=status)


def assignment(due, type="homework", classroom_id="c1", id=None):
    return AssignmentRecord(id=id or _next_id("assignment"), classroom_id=classroom_id, type=type, due_date=due)


def submission(assignment_id, submitted_at, id=None):
    return SubmissionRecord(
        id=id or _next_id("submission"), student_id="s1", assignment_id=assignment_id, submitted_at=submitted_at
    )


def classroom(id, subject):
    return ClassroomRecord(id=id, subject=subject)


def event(name, timestamp=None, details=None):
    return UserEventRecord(
        id=_next_id("event"), student_id="s1", event_name=name, timestamp=timestamp or NOW, details=details
    )


def announcement(created_at, id=None):
    return AnnouncementRecord(id=id or _next_id("announcement"), created_at=created_at)


def earned(badge_id, source=None, earned_at=None):
    return EarnedBadgeRecord(
        id=_next_id("earned"), badge_id=badge_id, source_document_id=source, earned_at=earned_at or ago(100)
    )


def snapshot(*, classroom_ids=(), total_xp=0, now=NOW, **collections) -> StudentSnapshot:
    return StudentSnapshot(
        academic_year_id="2023-2024",
        student=StudentRecord(id="s1", classroom_ids=tuple(classroom_ids), total_xp=total_xp),
        now=now,
        **{name: tuple(items) for name, items in collections.items()},
    )
