from sqlalchemy import Column, String

from achievements.extensions import Base, YearScopedMixin, new_id


class Classroom(YearScopedMixin, Base):
    __tablename__ = "classrooms"
    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(200), nullable=True)
    subject = Column(String(200), nullable=True)
    grade_level = Column(String(50), nullable=True)
