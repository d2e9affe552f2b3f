from __future__ import annotations

import math
from typing import Any, Iterable, Optional


def normalize_grade(value: Any) -> Optional[float]:
    """Parse a grade entered as "18,5", "18.5" or 18.5. Returns None when it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", ".", 1)
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def numeric_grades(values: Iterable[Any]) -> list[float]:
    return [g for g in (normalize_grade(v) for v in values) if g is not None]


def average(values: list[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def format_grade(value: float) -> str:
    return f"{value:g}"
