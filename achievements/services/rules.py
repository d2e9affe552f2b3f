"""Badge rules.

Every rule is a pure function ``(snapshot) -> list[CandidateAward]``. Rules
never touch the database and never decide idempotency on their own; whatever
they emit goes through ``awarding.filter_new_awards`` before it is committed.
The one exception is ``perfect_attendance_month``, whose re-award condition
depends on when the previous award was earned.

Grades are on a 0-20 scale. Grade values that do not parse are ignored by
every rule.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import timedelta
from typing import Callable, Iterable, Optional

from achievements.schemas import CandidateAward, GradeRecord, StudentSnapshot, SubmissionRecord
from achievements.services import catalog as badges
from achievements.services.grades import average, format_grade, normalize_grade, numeric_grades

Rule = Callable[[StudentSnapshot], list[CandidateAward]]

ON_TIME_LEAD = timedelta(hours=48)
EARLY_LEAD = timedelta(hours=24)
EARLY_BIRD_COUNT = 5
HAT_TRICK_WINDOW_DAYS = 30
ATTENDANCE_STREAK_DAYS = 30
IRON_WILL_DAYS = 90
PLANNER_RUN_DAYS = 5
EXPLORER_DOWNLOADS = 10
LIBRARIAN_DOWNLOADS = 20
ANNOUNCEMENT_LOOKBACK = timedelta(days=30)
ANNOUNCEMENT_READ_WINDOW = timedelta(hours=24)


# =============================================================================
# HELPERS
# =============================================================================


def grades_by_subject(grades: Iterable[GradeRecord]) -> dict[str, list[GradeRecord]]:
    """Group by trimmed subject; each group is sorted by date (id breaks ties)."""
    groups: dict[str, list[GradeRecord]] = defaultdict(list)
    for grade in grades:
        key = grade.subject_key
        if key:
            groups[key].append(grade)
    return {subject: sorted(items, key=lambda g: (g.date, g.id)) for subject, items in groups.items()}


def submission_lead_times(snapshot: StudentSnapshot) -> list[tuple[SubmissionRecord, timedelta]]:
    """How long before the due date each submission was made (negative when late)."""
    assignments = {a.id: a for a in snapshot.assignments}
    leads = []
    for submission in snapshot.submissions:
        assignment = assignments.get(submission.assignment_id)
        if assignment is None or submission.submitted_at is None:
            continue
        leads.append((submission, assignment.due_date - submission.submitted_at))
    return leads


def _days_since(snapshot: StudentSnapshot, moment) -> int:
    # Whole elapsed days, rounded down.
    return (snapshot.now - moment).days


def _grade_awards(
    snapshot: StudentSnapshot,
    badge_id: str,
    qualifies: Callable[[GradeRecord, float], bool],
    describe: Callable[[GradeRecord, float], str],
) -> list[CandidateAward]:
    awards = []
    for grade in snapshot.grades:
        value = normalize_grade(grade.grade)
        if value is not None and qualifies(grade, value):
            awards.append(CandidateAward(badge_id=badge_id, source_document_id=grade.id, details=describe(grade, value)))
    return awards


# =============================================================================
# THRESHOLD
# =============================================================================


def high_flyer(snapshot: StudentSnapshot) -> list[CandidateAward]:
    return _grade_awards(
        snapshot, badges.HIGH_FLYER,
        lambda g, v: v >= 19,
        lambda g, v: f"For a grade of {format_grade(v)} in {g.subject}",
    )


def flawless_victory(snapshot: StudentSnapshot) -> list[CandidateAward]:
    return _grade_awards(
        snapshot, badges.FLAWLESS_VICTORY,
        lambda g, v: v == 20,
        lambda g, v: f"For a perfect 20/20 in {g.subject}",
    )


def active_citizen(snapshot: StudentSnapshot) -> list[CandidateAward]:
    return _grade_awards(
        snapshot, badges.ACTIVE_CITIZEN,
        lambda g, v: g.type == "participation" and v > 18,
        lambda g, v: f"For outstanding participation in {g.subject}",
    )


def team_player(snapshot: StudentSnapshot) -> list[CandidateAward]:
    return _grade_awards(
        snapshot, badges.TEAM_PLAYER,
        lambda g, v: g.type == "project" and v > 17,
        lambda g, v: f"For the group project in {g.subject}",
    )


# =============================================================================
# TIMING
# =============================================================================


def on_time_submitter(snapshot: StudentSnapshot) -> list[CandidateAward]:
    return [
        CandidateAward(
            badge_id=badges.ON_TIME_SUBMITTER,
            source_document_id=submission.id,
            details="For handing in an assignment well before the deadline",
        )
        for submission, lead in submission_lead_times(snapshot)
        if lead >= ON_TIME_LEAD
    ]


def early_bird(snapshot: StudentSnapshot) -> list[CandidateAward]:
    early = sum(1 for _, lead in submission_lead_times(snapshot) if lead >= EARLY_LEAD)
    if early < EARLY_BIRD_COUNT:
        return []
    return [CandidateAward(
        badge_id=badges.EARLY_BIRD,
        details=f"Submitted {EARLY_BIRD_COUNT} assignments at least 24 hours early!",
    )]


# =============================================================================
# AGGREGATE
# =============================================================================


def subject_master(snapshot: StudentSnapshot) -> list[CandidateAward]:
    awards = []
    for subject, grades in grades_by_subject(snapshot.grades).items():
        values = numeric_grades(g.grade for g in grades)
        if len(values) < 3:
            continue
        avg = average(values)
        if avg > 18:
            awards.append(CandidateAward(
                badge_id=badges.SUBJECT_MASTER,
                source_document_id=subject,
                details=f"With an average of {avg:.2f} in {subject}",
            ))
    return awards


def consistent_performer(snapshot: StudentSnapshot) -> list[CandidateAward]:
    values = numeric_grades(g.grade for g in snapshot.grades)
    if len(values) < 5:
        return []
    avg = average(values)
    if avg <= 15:
        return []
    return [CandidateAward(badge_id=badges.CONSISTENT_PERFORMER, details=f"With an overall average of {avg:.2f}")]


# =============================================================================
# SEQUENCE
# =============================================================================


def comeback_king(snapshot: StudentSnapshot) -> list[CandidateAward]:
    awards = []
    for subject, grades in grades_by_subject(snapshot.grades).items():
        for previous, current in zip(grades, grades[1:]):
            before, after = normalize_grade(previous.grade), normalize_grade(current.grade)
            if before is None or after is None:
                continue
            if after >= before + 5:
                awards.append(CandidateAward(
                    badge_id=badges.COMEBACK_KING,
                    source_document_id=current.id,
                    details=f"From {format_grade(before)} to {format_grade(after)} in {subject}",
                ))
    return awards


def marathon_runner(snapshot: StudentSnapshot) -> list[CandidateAward]:
    awards = []
    for subject, grades in grades_by_subject(snapshot.grades).items():
        for i in range(2, len(grades)):
            window = [normalize_grade(g.grade) for g in grades[i - 2:i + 1]]
            if all(v is not None and v > 15 for v in window):
                awards.append(CandidateAward(
                    badge_id=badges.MARATHON_RUNNER,
                    source_document_id=grades[i].id,
                    details=f"For a run of 3 strong grades in {subject}",
                ))
    return awards


def knowledge_hat_trick(snapshot: StudentSnapshot) -> list[CandidateAward]:
    high = sorted(
        (g for g in snapshot.grades
         if g.subject_key and (normalize_grade(g.grade) or 0) >= 18),
        key=lambda g: (g.date, g.id),
    )
    for i in range(len(high) - 2):
        first = high[i]
        subjects = {first.subject_key: None}  # insertion-ordered set
        for later in high[i + 1:]:
            if (later.date - first.date).days > HAT_TRICK_WINDOW_DAYS:
                break
            subjects.setdefault(later.subject_key, None)
            if len(subjects) >= 3:
                return [CandidateAward(
                    badge_id=badges.KNOWLEDGE_HAT_TRICK,
                    details=f"In {', '.join(subjects)}",
                )]
    return []


# =============================================================================
# ATTENDANCE STREAKS
# =============================================================================


def perfect_attendance_month(snapshot: StudentSnapshot) -> list[CandidateAward]:
    previous = snapshot.earned(badges.PERFECT_ATTENDANCE_MONTH)
    last_awarded = max((b.earned_at for b in previous if b.earned_at), default=None)
    unexcused = [a for a in snapshot.absences if not a.is_justified]

    if not unexcused:
        if previous or not snapshot.grades:
            return []
        first_grade = min(g.date for g in snapshot.grades)
        if _days_since(snapshot, first_grade) > ATTENDANCE_STREAK_DAYS:
            return [CandidateAward(
                badge_id=badges.PERFECT_ATTENDANCE_MONTH,
                details="For perfect attendance since the start of the year!",
            )]
        return []

    latest = max(unexcused, key=lambda a: (a.date, a.id))
    if _days_since(snapshot, latest.date) <= ATTENDANCE_STREAK_DAYS:
        return []
    # Re-arm only once a newer unexcused absence has broken the previous streak.
    if previous and (last_awarded is None or last_awarded >= latest.date):
        return []
    return [CandidateAward(
        badge_id=badges.PERFECT_ATTENDANCE_MONTH,
        source_document_id=latest.id,
        details="For more than 30 days without an unexcused absence!",
    )]


def iron_will(snapshot: StudentSnapshot) -> list[CandidateAward]:
    if not snapshot.absences or any(not a.is_justified for a in snapshot.absences):
        return []
    first_absence = min(a.date for a in snapshot.absences)
    if _days_since(snapshot, first_absence) <= IRON_WILL_DAYS:
        return []
    return [CandidateAward(badge_id=badges.IRON_WILL, details="For a whole term without an unexcused absence.")]


# =============================================================================
# COMPLETION
# =============================================================================


def homework_hero(snapshot: StudentSnapshot) -> list[CandidateAward]:
    classrooms = {c.id: c for c in snapshot.classrooms}
    enrolled = set(snapshot.student.classroom_ids)
    groups: dict[str, tuple[str, str, list[str]]] = {}
    for assignment in snapshot.assignments:
        if assignment.type != "homework":
            continue
        if enrolled and assignment.classroom_id not in enrolled:
            continue
        classroom = classrooms.get(assignment.classroom_id)
        subject = (classroom.subject or "").strip() if classroom else ""
        if not subject:
            continue
        month = assignment.due_date.astimezone(snapshot.zone).strftime("%Y-%m")
        key = f"{subject}-{month}"
        groups.setdefault(key, (subject, month, []))[2].append(assignment.id)

    submitted = {s.assignment_id for s in snapshot.submissions}
    return [
        CandidateAward(
            badge_id=badges.HOMEWORK_HERO,
            source_document_id=key,
            details=f"For completing every homework in {subject} during {month}",
        )
        for key, (subject, month, required) in groups.items()
        if all(assignment_id in submitted for assignment_id in required)
    ]


# =============================================================================
# ACTIVITY
# =============================================================================


def planner(snapshot: StudentSnapshot) -> list[CandidateAward]:
    days = sorted({
        e.timestamp.astimezone(snapshot.zone).date()
        for e in snapshot.user_events
        if e.event_name == "visited_calendar" and e.timestamp
    })
    if len(days) < PLANNER_RUN_DAYS:
        return []
    run = 1
    for previous, current in zip(days, days[1:]):
        run = run + 1 if (current - previous).days == 1 else 1
        if run >= PLANNER_RUN_DAYS:
            return [CandidateAward(
                badge_id=badges.PLANNER,
                details="For checking the calendar 5 days in a row.",
            )]
    return []


def _download_count(snapshot: StudentSnapshot) -> int:
    return sum(1 for e in snapshot.user_events if e.event_name == "downloaded_material")


def explorer(snapshot: StudentSnapshot) -> list[CandidateAward]:
    count = _download_count(snapshot)
    if count < EXPLORER_DOWNLOADS:
        return []
    return [CandidateAward(badge_id=badges.EXPLORER, details=f"For downloading {count} course files.")]


def librarian(snapshot: StudentSnapshot) -> list[CandidateAward]:
    count = _download_count(snapshot)
    if count < LIBRARIAN_DOWNLOADS:
        return []
    return [CandidateAward(badge_id=badges.LIBRARIAN, details=f"For downloading {count} course files.")]


def _announcement_id(details: Optional[dict]) -> Optional[str]:
    if not details:
        return None
    value = details.get("announcementId") or details.get("announcement_id")
    return str(value) if value else None


def fully_informed(snapshot: StudentSnapshot) -> list[CandidateAward]:
    cutoff = snapshot.now - ANNOUNCEMENT_LOOKBACK
    recent = [a for a in snapshot.announcements if a.created_at > cutoff]
    if not recent:
        return []

    first_read = {}
    for event in snapshot.user_events:
        announcement_id = _announcement_id(event.details)
        if event.event_name != "read_announcement" or not event.timestamp or not announcement_id:
            continue
        seen = first_read.get(announcement_id)
        if seen is None or event.timestamp < seen:
            first_read[announcement_id] = event.timestamp

    for announcement in recent:
        read_at = first_read.get(announcement.id)
        if read_at is None or read_at >= announcement.created_at + ANNOUNCEMENT_READ_WINDOW:
            return []
    return [CandidateAward(
        badge_id=badges.FULLY_INFORMED,
        details="For reading every announcement of the last month on time.",
    )]


# =============================================================================
# REGISTRY
# =============================================================================

RULES: tuple[Rule, ...] = (
    high_flyer,
    flawless_victory,
    active_citizen,
    team_player,
    on_time_submitter,
    early_bird,
    subject_master,
    comeback_king,
    marathon_runner,
    knowledge_hat_trick,
    perfect_attendance_month,
    iron_will,
    consistent_performer,
    homework_hero,
    planner,
    explorer,
    librarian,
    fully_informed,
)


def evaluate_rules(snapshot: StudentSnapshot, rules: Iterable[Rule] = RULES) -> list[CandidateAward]:
    candidates: list[CandidateAward] = []
    for rule in rules:
        candidates.extend(rule(snapshot))
    return candidates
