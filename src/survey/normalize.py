"""Total coercion helpers for loosely-typed submission values.

None of these functions raise: garbage input degrades to the ``0`` / ``""``
sentinels so one bad answer never aborts a KPI computation.
"""
from __future__ import annotations

import math
import re
from typing import Any, Union

__all__ = ["MIN_SCORE", "MAX_SCORE", "parse_score", "parse_session_id", "parse_date"]

MIN_SCORE: float = 0.0
MAX_SCORE: float = 5.0

# Leading decimal prefix, e.g. "4.5/5" -> "4.5", " 3" -> "3", "1e1" -> "1e1".
_DECIMAL_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _to_number(value: Any) -> float:
    """Coerce *value* to a float, ``nan`` when it is not numeric."""

    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            # JSON integers are unbounded
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        match = _DECIMAL_PREFIX.match(value)
        if match is None:
            return math.nan
        try:
            return float(match.group(1))
        except ValueError:  # pragma: no cover – regex guarantees a float literal
            return math.nan
    return math.nan


def parse_score(value: Any) -> float:
    """Return *value* as a rating clamped into ``[0, 5]``.

    Empty, missing and non-numeric values all map to ``0``, which doubles as
    the "no answer" sentinel excluded from every average.
    """

    if value is None or value == "":
        return 0.0
    num = _to_number(value)
    if math.isnan(num):
        return 0.0
    return max(MIN_SCORE, min(MAX_SCORE, num))


def parse_session_id(value: Any) -> Union[int, float]:
    """Return *value* as a session number (no clamping, ``0`` when unknown)."""

    if value is None or value == "":
        return 0
    num = _to_number(value)
    if math.isnan(num) or math.isinf(num):
        return 0
    return int(num) if num.is_integer() else num


def parse_date(value: Any) -> str:
    """Normalise a submission timestamp to ``YYYY-MM-DD``.

    Accepts ISO timestamps (``2026-03-10T09:00:00``) and the
    ``DD/MM/YYYY [HH:MM]`` export format.  Any other shape is returned
    unchanged.
    """

    if not value:
        return ""
    text = str(value)

    if "T" in text:
        return text.split("T", 1)[0]

    date_part = text.split(" ")[0]
    pieces = date_part.split("/")
    if len(pieces) >= 3 and all(pieces[:3]):
        day, month, year = pieces[:3]
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    return text
