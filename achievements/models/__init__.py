# Re-export models so callers can keep using: from achievements.models import Student, Grade, ...
from .schedule import AcademicYear
from .student import Student
from .classroom import Classroom
from .grade import Grade
from .attendance import Absence, AbsenceStatus
from .assignment import Assignment, Submission
from .activity import Announcement, UserEvent
from .badge import EarnedBadge

__all__ = [
    # scoping
    "AcademicYear", "Student", "Classroom",
    # academic records
    "Grade", "Absence", "AbsenceStatus", "Assignment", "Submission",
    # activity
    "UserEvent", "Announcement",
    # awards
    "EarnedBadge",
]
