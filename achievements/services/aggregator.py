from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor
from datetime import datetime, timezone, tzinfo
from typing import Optional

from pydantic import ValidationError

from achievements.errors import AggregationError
from achievements.repository import SchoolStore
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
    as_utc,
)

log = logging.getLogger(__name__)


async def gather_snapshot(
    store: SchoolStore,
    year_id: str,
    student_id: str,
    *,
    now: Optional[datetime] = None,
    zone: tzinfo = timezone.utc,
    executor: Optional[Executor] = None,
) -> StudentSnapshot:
    """Fetch every collection the rules need, concurrently, and freeze them into one snapshot.

    Assignments, classrooms and announcements are year-wide; the rest are filtered by student.
    Reads run on `executor` (the loop's default executor when None).
    Any failing read aborts the snapshot with AggregationError.
    """
    loop = asyncio.get_running_loop()

    def read(fn, *args):
        return loop.run_in_executor(executor, fn, *args)

    reads = (
        read(store.get_student, year_id, student_id),
        read(store.list_grades, year_id, student_id),
        read(store.list_absences, year_id, student_id),
        read(store.list_submissions, year_id, student_id),
        read(store.list_assignments, year_id),
        read(store.list_classrooms, year_id),
        read(store.list_user_events, year_id, student_id),
        read(store.list_announcements, year_id),
        read(store.list_earned_badges, year_id, student_id),
    )
    try:
        (
            student,
            grades,
            absences,
            submissions,
            assignments,
            classrooms,
            user_events,
            announcements,
            earned_badges,
        ) = await asyncio.gather(*reads)
    except Exception as exc:
        raise AggregationError(student_id) from exc

    if student is None:
        raise AggregationError(student_id, "student record not found")

    try:
        snapshot = StudentSnapshot(
            academic_year_id=year_id,
            student=StudentRecord.model_validate(student),
            grades=tuple(GradeRecord.model_validate(r) for r in grades),
            absences=tuple(AbsenceRecord.model_validate(r) for r in absences),
            submissions=tuple(SubmissionRecord.model_validate(r) for r in submissions),
            assignments=tuple(AssignmentRecord.model_validate(r) for r in assignments),
            classrooms=tuple(ClassroomRecord.model_validate(r) for r in classrooms),
            user_events=tuple(UserEventRecord.model_validate(r) for r in user_events),
            announcements=tuple(AnnouncementRecord.model_validate(r) for r in announcements),
            earned_badges=tuple(EarnedBadgeRecord.model_validate(r) for r in earned_badges),
            now=as_utc(now) if now else datetime.now(timezone.utc),
            zone=zone,
        )
    except ValidationError as exc:
        raise AggregationError(student_id, "malformed student records") from exc

    log.debug(
        "Snapshot for %s: %d grades, %d absences, %d submissions, %d events, %d earned badges",
        student_id, len(grades), len(absences), len(submissions), len(user_events), len(earned_badges),
    )
    return snapshot
