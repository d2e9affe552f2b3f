import pytest

from achievements.services.grades import average, normalize_grade, numeric_grades


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("18,5", 18.5),
        ("18.5", 18.5),
        (" 20 ", 20.0),
        ("7", 7.0),
        (17, 17.0),
        (19.25, 19.25),
    ],
)
def test_normalize_grade_parses_numbers(raw, expected):
    assert normalize_grade(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", "   ", None, "nan", "inf", True, "18,5,1"])
def test_normalize_grade_rejects_non_numeric(raw):
    assert normalize_grade(raw) is None


def test_comma_and_dot_agree():
    assert normalize_grade("18,5") == normalize_grade("18.5") == 18.5


def test_numeric_grades_skips_invalid_values():
    assert numeric_grades(["18", "abc", "12,5", None]) == [18.0, 12.5]
    assert average(numeric_grades(["abc", "10", "20"])) == 15.0
    assert average([]) is None
