"""Immutable, typed views of the stored documents.

Rows are converted once, at the aggregation boundary; rule evaluators only
ever see these records, never ORM objects.
"""
from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops tzinfo) and normalise aware ones."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Record(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("*", mode="after")
    @classmethod
    def _datetimes_in_utc(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return as_utc(value)
        return value


class StudentRecord(Record):
    id: str
    classroom_ids: tuple[str, ...] = ()
    total_xp: int = 0

    @field_validator("classroom_ids", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return () if value is None else value


class GradeRecord(Record):
    id: str
    student_id: str
    subject: Optional[str] = None
    type: Optional[str] = None
    grade: Union[str, int, float, None] = None
    date: datetime

    @property
    def subject_key(self) -> Optional[str]:
        """Trimmed subject used for grouping; None when blank."""
        if not isinstance(self.subject, str):
            return None
        return self.subject.strip() or None


class AbsenceRecord(Record):
    id: str
    student_id: str
    date: datetime
    status: str = "unexcused"

    @property
    def is_justified(self) -> bool:
        return self.status == "justified"


class SubmissionRecord(Record):
    id: str
    student_id: str
    assignment_id: str
    submitted_at: Optional[datetime] = None


class AssignmentRecord(Record):
    id: str
    classroom_id: Optional[str] = None
    type: str = "homework"
    due_date: datetime


class ClassroomRecord(Record):
    id: str
    subject: Optional[str] = None
    grade_level: Optional[str] = None


class UserEventRecord(Record):
    id: str
    student_id: str
    event_name: str
    timestamp: Optional[datetime] = None
    details: Optional[dict[str, Any]] = None


class AnnouncementRecord(Record):
    id: str
    created_at: datetime


class EarnedBadgeRecord(Record):
    id: str
    badge_id: str
    earned_at: Optional[datetime] = None
    seen_by_user: bool = False
    source_document_id: Optional[str] = None
    details: Optional[str] = None


class StudentSnapshot(BaseModel):
    """Everything the rules may look at for one student, fetched in one fan-out."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    academic_year_id: str
    student: StudentRecord
    grades: tuple[GradeRecord, ...] = ()
    absences: tuple[AbsenceRecord, ...] = ()
    submissions: tuple[SubmissionRecord, ...] = ()
    assignments: tuple[AssignmentRecord, ...] = ()
    classrooms: tuple[ClassroomRecord, ...] = ()
    user_events: tuple[UserEventRecord, ...] = ()
    announcements: tuple[AnnouncementRecord, ...] = ()
    earned_badges: tuple[EarnedBadgeRecord, ...] = ()
    now: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    zone: tzinfo = timezone.utc

    def earned(self, badge_id: str) -> tuple[EarnedBadgeRecord, ...]:
        return tuple(b for b in self.earned_badges if b.badge_id == badge_id)
