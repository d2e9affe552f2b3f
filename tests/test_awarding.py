from factories import earned

from achievements.schemas import CandidateAward
from achievements.services.awarding import filter_new_awards, total_xp
from achievements.services.catalog import BADGE_CATALOG, CATALOG_BY_ID, xp_map


def award(badge_id, source=None):
    return CandidateAward(badge_id=badge_id, source_document_id=source, details="")


def test_keyed_badges_match_on_source_document():
    existing = [earned("high_flyer", "g1")]
    candidates = [award("high_flyer", "g1"), award("high_flyer", "g2")]

    accepted = filter_new_awards(candidates, existing)

    assert [(a.badge_id, a.source_document_id) for a in accepted] == [("high_flyer", "g2")]


def test_singleton_badges_are_awarded_once():
    assert filter_new_awards([award("iron_will")], [earned("iron_will")]) == []
    assert filter_new_awards([award("iron_will")], [earned("high_flyer", "g1")]) == [award("iron_will")]


def test_duplicates_within_a_run_collapse():
    candidates = [
        award("explorer"),
        award("explorer"),
        award("subject_master", "Math"),
        award("subject_master", "Math"),
        award("subject_master", "Physics"),
    ]

    accepted = filter_new_awards(candidates, [])

    assert [(a.badge_id, a.source_document_id) for a in accepted] == [
        ("explorer", None),
        ("subject_master", "Math"),
        ("subject_master", "Physics"),
    ]


def test_rearm_badges_pass_through_history():
    existing = [earned("perfect_attendance_month", "abs-1")]
    candidates = [award("perfect_attendance_month", "abs-2"), award("perfect_attendance_month", "abs-3")]

    accepted = filter_new_awards(candidates, existing)

    assert [a.source_document_id for a in accepted] == ["abs-2"]


def test_unknown_badges_are_treated_as_singletons():
    assert filter_new_awards([award("legacy_badge", "x")], [earned("legacy_badge", "y")]) == []


def test_total_xp_sums_history_and_new_awards():
    existing = [earned("high_flyer", "g1"), earned("iron_will")]

    assert total_xp(existing, [award("explorer")]) == 50 + 200 + 15


def test_total_xp_ignores_badges_missing_from_catalog():
    assert total_xp([earned("retired_badge"), earned("high_flyer", "g1")]) == 50
    assert total_xp([], [award("high_flyer", "g1")], xp_by_badge={"high_flyer": 7}) == 7


def test_catalog_covers_every_badge_once():
    assert len(BADGE_CATALOG) == 18
    assert len(CATALOG_BY_ID) == 18
    assert all(xp > 0 for xp in xp_map().values())
