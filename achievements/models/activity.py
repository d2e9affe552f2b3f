from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, String

from achievements.extensions import Base, YearScopedMixin, new_id


class UserEvent(YearScopedMixin, Base):
    __tablename__ = "user_events"
    id = Column(String(64), primary_key=True, default=new_id)
    student_id = Column(String(64), nullable=False)
    event_name = Column(String(100), nullable=False)  # visited_calendar|downloaded_material|read_announcement|...
    timestamp = Column(DateTime(timezone=True), nullable=True, default=lambda: datetime.now(timezone.utc))
    details = Column(JSON, nullable=True)

    __table_args__ = (
        Index("ix_user_event_student", "app_id", "academic_year_id", "student_id"),
    )


class Announcement(YearScopedMixin, Base):
    __tablename__ = "announcements"
    id = Column(String(64), primary_key=True, default=new_id)
    title = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
