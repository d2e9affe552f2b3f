from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, String

from achievements.extensions import Base, new_id


class AcademicYear(Base):
    __tablename__ = "academic_years"
    id = Column(String(64), primary_key=True, default=new_id)
    app_id = Column(String(64), nullable=False, index=True)
    label = Column(String(64), nullable=True)  # e.g. "2024-2025"
    is_current = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_academic_year_current", "app_id", "is_current"),
    )

    def __repr__(self):
        return f"<AcademicYear id={self.id} current={self.is_current}>"
