class AchievementsError(Exception):
    """Base class for errors raised by the badge engine."""


class AggregationError(AchievementsError):
    """One of the reads feeding a student's snapshot failed."""

    def __init__(self, student_id: str, message: str = "failed to load student records"):
        super().__init__(f"{message} (student={student_id})")
        self.student_id = student_id


class CommitError(AchievementsError):
    """The atomic award + XP write for a student failed and was rolled back."""

    def __init__(self, student_id: str, message: str = "failed to commit awards"):
        super().__init__(f"{message} (student={student_id})")
        self.student_id = student_id


class ActivityLogError(AchievementsError):
    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission-denied"
    INVALID_ARGUMENT = "invalid-argument"
    INTERNAL = "internal"

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message
