from enum import Enum

from sqlalchemy import Column, DateTime, Index, String

from achievements.extensions import Base, YearScopedMixin, new_id


class AbsenceStatus(str, Enum):
    JUSTIFIED = "justified"
    UNEXCUSED = "unexcused"


class Absence(YearScopedMixin, Base):
    __tablename__ = "absences"
    id = Column(String(64), primary_key=True, default=new_id)
    student_id = Column(String(64), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    # Anything other than "justified" counts as unexcused.
    status = Column(String(32), nullable=False, default=AbsenceStatus.UNEXCUSED.value)

    __table_args__ = (
        Index("ix_absence_student", "app_id", "academic_year_id", "student_id"),
    )
