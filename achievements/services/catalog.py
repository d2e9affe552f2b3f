from __future__ import annotations

from typing import Iterable, Mapping

from achievements.schemas import BadgeDefinition, DedupKind

HIGH_FLYER = "high_flyer"
FLAWLESS_VICTORY = "flawless_victory"
ACTIVE_CITIZEN = "active_citizen"
TEAM_PLAYER = "team_player"
ON_TIME_SUBMITTER = "on_time_submitter"
EARLY_BIRD = "early_bird"
SUBJECT_MASTER = "subject_master"
COMEBACK_KING = "comeback_king"
MARATHON_RUNNER = "marathon_runner"
KNOWLEDGE_HAT_TRICK = "knowledge_hat_trick"
PERFECT_ATTENDANCE_MONTH = "perfect_attendance_month"
IRON_WILL = "iron_will"
CONSISTENT_PERFORMER = "consistent_performer"
HOMEWORK_HERO = "homework_hero"
PLANNER = "planner"
EXPLORER = "explorer"
LIBRARIAN = "librarian"
FULLY_INFORMED = "fully_informed"

BADGE_CATALOG: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(id=HIGH_FLYER, title="High Flyer", xp=50, dedup=DedupKind.KEYED),
    BadgeDefinition(id=PERFECT_ATTENDANCE_MONTH, title="Always There!", xp=100, dedup=DedupKind.REARM),
    BadgeDefinition(id=SUBJECT_MASTER, title="Subject Master", xp=150, dedup=DedupKind.KEYED),
    BadgeDefinition(id=CONSISTENT_PERFORMER, title="Consistent Performer", xp=75),
    BadgeDefinition(id=COMEBACK_KING, title="The Big Comeback", xp=40, dedup=DedupKind.KEYED),
    BadgeDefinition(id=MARATHON_RUNNER, title="Marathon Runner", xp=60, dedup=DedupKind.KEYED),
    BadgeDefinition(id=TEAM_PLAYER, title="Team Player", xp=30, dedup=DedupKind.KEYED),
    BadgeDefinition(id=ACTIVE_CITIZEN, title="Active Citizen", xp=20, dedup=DedupKind.KEYED),
    BadgeDefinition(id=ON_TIME_SUBMITTER, title="Always On Time!", xp=10, dedup=DedupKind.KEYED),
    BadgeDefinition(id=EXPLORER, title="Explorer", xp=15),
    BadgeDefinition(id=FLAWLESS_VICTORY, title="Flawless Victory", xp=100, dedup=DedupKind.KEYED),
    BadgeDefinition(id=KNOWLEDGE_HAT_TRICK, title="Knowledge Hat-Trick", xp=80),
    BadgeDefinition(id=EARLY_BIRD, title="Early Bird", xp=25),
    BadgeDefinition(id=IRON_WILL, title="Iron Will", xp=200),
    BadgeDefinition(id=HOMEWORK_HERO, title="Homework Hero", xp=50, dedup=DedupKind.KEYED),
    BadgeDefinition(id=LIBRARIAN, title="Bookworm", xp=30),
    BadgeDefinition(id=PLANNER, title="Planner", xp=15),
    BadgeDefinition(id=FULLY_INFORMED, title="Fully Informed", xp=20),
)

CATALOG_BY_ID: Mapping[str, BadgeDefinition] = {b.id: b for b in BADGE_CATALOG}


def xp_map(catalog: Iterable[BadgeDefinition] = BADGE_CATALOG) -> dict[str, int]:
    return {b.id: b.xp for b in catalog}


def dedup_kind(badge_id: str, catalog: Mapping[str, BadgeDefinition] = CATALOG_BY_ID) -> DedupKind:
    definition = catalog.get(badge_id)
    # Unknown badges are treated as once-per-student.
    return definition.dedup if definition else DedupKind.SINGLETON
