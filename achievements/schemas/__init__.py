from .badge import BadgeDefinition, BatchSummary, CandidateAward, DedupKind, StudentResult
from .events import LogEventRequest, LogEventResponse
from .records import (
    AbsenceRecord,
    AnnouncementRecord,
    AssignmentRecord,
    ClassroomRecord,
    EarnedBadgeRecord,
    GradeRecord,
    StudentRecord,
    StudentSnapshot,
    SubmissionRecord,
    UserEventRecord,
    as_utc,
)

__all__ = [
    "BadgeDefinition", "BatchSummary", "CandidateAward", "DedupKind", "StudentResult",
    "LogEventRequest", "LogEventResponse",
    "AbsenceRecord", "AnnouncementRecord", "AssignmentRecord", "ClassroomRecord",
    "EarnedBadgeRecord", "GradeRecord", "StudentRecord", "StudentSnapshot",
    "SubmissionRecord", "UserEventRecord", "as_utc",
]
