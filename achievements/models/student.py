from sqlalchemy import JSON, Column, Integer, String
from sqlalchemy.ext.mutable import MutableList

from achievements.extensions import Base


class Student(Base):
    __tablename__ = "students"

    # Document ids are unique per (app, academic year).
    app_id = Column(String(64), primary_key=True)
    academic_year_id = Column(String(64), primary_key=True)
    id = Column(String(64), primary_key=True)

    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    classroom_ids = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
    # Derived; written only by the badge engine.
    total_xp = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<Student id={self.id} xp={self.total_xp}>"
