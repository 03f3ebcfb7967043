"""Small numeric helpers shared by the KPI aggregator."""
from __future__ import annotations

import math
from typing import Iterable, List

__all__ = [
    "EXCELLENT_SESSION_SCORE",
    "STRONG_RECOMMENDATION_SCORE",
    "mean",
    "stddev",
    "valid_scores",
]

# Composite mean at or above which a session counts as excellent
EXCELLENT_SESSION_SCORE: float = 4.0

# Recommendation rating counted as a strong recommendation
STRONG_RECOMMENDATION_SCORE: float = 4.0


def valid_scores(values: Iterable[float]) -> List[float]:
    """Drop the ``0`` "no answer" sentinel from *values*."""
    return [v for v in values if v > 0]


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, ``0.0`` for an empty sequence."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def stddev(values: Iterable[float]) -> float:
    """Population standard deviation (divides by N), ``0.0`` when empty."""
    items = list(values)
    if not items:
        return 0.0
    avg = sum(items) / len(items)
    return math.sqrt(sum((v - avg) ** 2 for v in items) / len(items))
