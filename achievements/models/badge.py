from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text, UniqueConstraint

from achievements.extensions import Base, YearScopedMixin, new_id


class EarnedBadge(YearScopedMixin, Base):
    """Append-only award record, one row per badge a student earned."""

    __tablename__ = "earned_badges"
    id = Column(String(64), primary_key=True, default=new_id)
    student_id = Column(String(64), nullable=False)
    badge_id = Column(String(64), nullable=False)
    earned_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    seen_by_user = Column(Boolean, nullable=False, default=False)  # owned by the UI
    source_document_id = Column(String(255), nullable=True)  # set for keyed badges
    details = Column(Text, nullable=True)

    __table_args__ = (
        # NULL source ids never collide, so this only constrains keyed awards.
        UniqueConstraint(
            "app_id", "academic_year_id", "student_id", "badge_id", "source_document_id",
            name="uq_earned_badge_key",
        ),
        Index("ix_earned_badge_student", "app_id", "academic_year_id", "student_id"),
        Index("ix_earned_badge_earned_at", "earned_at"),
    )
