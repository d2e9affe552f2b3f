"""Data access for the badge engine.

`SchoolStore` is the explicitly constructed client the engine talks to. It
behaves like a document store with collection-scoped equality queries: every
per-year collection is filtered by (app_id, academic_year_id) and, where the
collection is per student, by student_id. Each call opens its own session so
calls can run concurrently from worker threads.

Example:
    store = SchoolStore(Database(settings.DATABASE_URL), app_id=settings.APP_ID)
    year = store.current_academic_year()
    for student_id in store.list_student_ids(year):
        grades = store.list_grades(year, student_id)
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from sqlalchemy import select, update

from achievements.extensions import Database
from achievements.models import (
    Absence,
    AcademicYear,
    Announcement,
    Assignment,
    Classroom,
    EarnedBadge,
    Grade,
    Student,
    Submission,
    UserEvent,
)
from achievements.schemas import CandidateAward


class SchoolStore:
    def __init__(self, database: Database, app_id: str = "default"):
        self.db = database
        self.app_id = app_id

    # ==================== YEARS & STUDENTS ====================

    def current_academic_year(self) -> Optional[str]:
        with self.db.session() as session:
            return session.execute(
                select(AcademicYear.id)
                .where(AcademicYear.app_id == self.app_id, AcademicYear.is_current.is_(True))
                .order_by(AcademicYear.created_at.desc())
                .limit(1)
            ).scalar_one_or_none()

    def list_student_ids(self, year_id: str) -> list[str]:
        with self.db.session() as session:
            return list(session.execute(
                select(Student.id)
                .where(Student.app_id == self.app_id, Student.academic_year_id == year_id)
                .order_by(Student.id)
            ).scalars())

    def get_student(self, year_id: str, student_id: str) -> Optional[Student]:
        with self.db.session() as session:
            return session.get(Student, (self.app_id, year_id, student_id))

    # ==================== PER-STUDENT COLLECTIONS ====================

    def _by_student(self, model, year_id: str, student_id: str) -> list[Any]:
        with self.db.session() as session:
            return list(session.execute(
                select(model).where(
                    model.app_id == self.app_id,
                    model.academic_year_id == year_id,
                    model.student_id == student_id,
                )
            ).scalars())

    def list_grades(self, year_id: str, student_id: str) -> list[Grade]:
        return self._by_student(Grade, year_id, student_id)

    def list_absences(self, year_id: str, student_id: str) -> list[Absence]:
        return self._by_student(Absence, year_id, student_id)

    def list_submissions(self, year_id: str, student_id: str) -> list[Submission]:
        return self._by_student(Submission, year_id, student_id)

    def list_user_events(self, year_id: str, student_id: str) -> list[UserEvent]:
        return self._by_student(UserEvent, year_id, student_id)

    def list_earned_badges(self, year_id: str, student_id: str) -> list[EarnedBadge]:
        return self._by_student(EarnedBadge, year_id, student_id)

    # ==================== YEAR-WIDE COLLECTIONS ====================

    def _by_year(self, model, year_id: str) -> list[Any]:
        with self.db.session() as session:
            return list(session.execute(
                select(model).where(model.app_id == self.app_id, model.academic_year_id == year_id)
            ).scalars())

    def list_assignments(self, year_id: str) -> list[Assignment]:
        return self._by_year(Assignment, year_id)

    def list_classrooms(self, year_id: str) -> list[Classroom]:
        return self._by_year(Classroom, year_id)

    def list_announcements(self, year_id: str) -> list[Announcement]:
        return self._by_year(Announcement, year_id)

    # ==================== WRITES ====================

    def commit_awards(
        self,
        year_id: str,
        student_id: str,
        awards: Sequence[CandidateAward],
        total_xp: int,
        *,
        earned_at: Optional[datetime] = None,
    ) -> list[str]:
        """Insert the awards and set total_xp in one transaction. Returns the new badge ids."""
        earned_at = earned_at or datetime.now(timezone.utc)
        with self.db.session() as session, session.begin():
            rows = [
                EarnedBadge(
                    app_id=self.app_id,
                    academic_year_id=year_id,
                    student_id=student_id,
                    badge_id=award.badge_id,
                    source_document_id=award.source_document_id,
                    details=award.details,
                    earned_at=earned_at,
                    seen_by_user=False,
                )
                for award in awards
            ]
            session.add_all(rows)
            result = session.execute(
                update(Student)
                .where(
                    Student.app_id == self.app_id,
                    Student.academic_year_id == year_id,
                    Student.id == student_id,
                )
                .values(total_xp=total_xp)
            )
            if result.rowcount != 1:
                raise LookupError(f"Student {student_id} not found in year {year_id}")
            session.flush()
            return [row.id for row in rows]

    def add_user_event(
        self,
        year_id: str,
        student_id: str,
        event_name: str,
        details: Optional[dict[str, Any]] = None,
        *,
        app_id: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> str:
        event = UserEvent(
            app_id=app_id or self.app_id,
            academic_year_id=year_id,
            student_id=student_id,
            event_name=event_name,
            details=details,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        with self.db.session() as session, session.begin():
            session.add(event)
            session.flush()
            return event.id
