from sqlalchemy import Column, DateTime, Index, String

from achievements.extensions import Base, YearScopedMixin, new_id


class Assignment(YearScopedMixin, Base):
    __tablename__ = "assignments"
    id = Column(String(64), primary_key=True, default=new_id)
    classroom_id = Column(String(64), nullable=True, index=True)
    title = Column(String(255), nullable=True)
    type = Column(String(50), nullable=False, default="homework")  # homework|test|project|oral
    due_date = Column(DateTime(timezone=True), nullable=False)


class Submission(YearScopedMixin, Base):
    __tablename__ = "submissions"
    id = Column(String(64), primary_key=True, default=new_id)
    student_id = Column(String(64), nullable=False)
    assignment_id = Column(String(64), nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_submission_student", "app_id", "academic_year_id", "student_id"),
    )
