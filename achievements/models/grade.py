from sqlalchemy import Column, DateTime, Index, String

from achievements.extensions import Base, YearScopedMixin, new_id


class Grade(YearScopedMixin, Base):
    __tablename__ = "grades"
    id = Column(String(64), primary_key=True, default=new_id)
    student_id = Column(String(64), nullable=False)
    subject = Column(String(200), nullable=True)
    type = Column(String(50), nullable=True)  # participation|project|homework|test|oral
    # Entered by teachers as text, with either "," or "." as decimal separator.
    grade = Column(String(32), nullable=True)
    date = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_grade_student", "app_id", "academic_year_id", "student_id"),
    )
