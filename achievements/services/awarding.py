from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from achievements.schemas import CandidateAward, DedupKind, EarnedBadgeRecord
from achievements.services.catalog import CATALOG_BY_ID, dedup_kind, xp_map


def filter_new_awards(
    candidates: Iterable[CandidateAward],
    earned: Sequence[EarnedBadgeRecord],
    catalog=CATALOG_BY_ID,
) -> list[CandidateAward]:
    """
    Drop candidates the student already has.
    Singleton badges match on badge id, keyed badges on (badge id, source_document_id).
    Duplicates inside one run collapse to the first candidate. No queries are issued.
    """
    earned_badges = {b.badge_id for b in earned}
    earned_keys = {(b.badge_id, b.source_document_id) for b in earned}

    accepted: list[CandidateAward] = []
    taken_badges: set[str] = set()
    taken_keys: set[tuple[str, str | None]] = set()
    for candidate in candidates:
        kind = dedup_kind(candidate.badge_id, catalog)
        key = (candidate.badge_id, candidate.source_document_id)
        if kind is DedupKind.KEYED:
            if key in earned_keys or key in taken_keys:
                continue
        elif kind is DedupKind.SINGLETON:
            if candidate.badge_id in earned_badges or candidate.badge_id in taken_badges:
                continue
        elif candidate.badge_id in taken_badges:
            # REARM: the rule already checked history; one award per run.
            continue
        accepted.append(candidate)
        taken_badges.add(candidate.badge_id)
        taken_keys.add(key)
    return accepted


def total_xp(
    earned: Iterable[EarnedBadgeRecord],
    accepted: Iterable[CandidateAward] = (),
    xp_by_badge: Mapping[str, int] | None = None,
) -> int:
    """Recompute the XP total from scratch. Badges missing from the catalog are worth 0."""
    xp_by_badge = xp_map() if xp_by_badge is None else xp_by_badge
    return sum(xp_by_badge.get(b.badge_id, 0) for b in earned) + sum(
        xp_by_badge.get(a.badge_id, 0) for a in accepted
    )
