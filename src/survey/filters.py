"""Session and date-range filtering of canonical records."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional

from src.survey.records import CanonicalRecord

logger = logging.getLogger(__name__)

__all__ = ["FilterSpec", "parse_session_ids", "matches", "apply_filters"]

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def parse_session_ids(raw: Optional[str]) -> FrozenSet[int]:
    """Parse a comma-separated ``sessions`` parameter.

    Each entry is read as a leading integer (``"3"``, ``" 4 "``, ``"5abc"``);
    entries without one are dropped.
    """

    if not raw:
        return frozenset()
    ids = set()
    for chunk in raw.split(","):
        match = _INT_PREFIX.match(chunk)
        if match is None:
            logger.debug("Dropping non-numeric session id %r", chunk)
            continue
        ids.add(int(match.group(1)))
    return frozenset(ids)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """Active filter selection; an empty ``session_ids`` means every session."""

    session_ids: FrozenSet[int] = field(default_factory=frozenset)
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @classmethod
    def from_params(
        cls,
        sessions: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> "FilterSpec":
        """Build a spec from raw query-string values."""
        return cls(
            session_ids=parse_session_ids(sessions),
            start_date=_blank_to_none(start_date),
            end_date=_blank_to_none(end_date),
        )

    @property
    def is_empty(self) -> bool:
        return not self.session_ids and not self.start_date and not self.end_date


def matches(record: CanonicalRecord, spec: FilterSpec) -> bool:
    """Return ``True`` when *record* passes every predicate of *spec*.

    Unassigned records (session ``0``) pass any session selection and
    undated records pass any date bound.
    """

    session_ok = (
        not spec.session_ids
        or record.session_id in spec.session_ids
        or record.session_id == 0
    )
    start_ok = not spec.start_date or not record.date or record.date >= spec.start_date
    end_ok = not spec.end_date or not record.date or record.date <= spec.end_date
    return session_ok and start_ok and end_ok


def apply_filters(records: Iterable[CanonicalRecord], spec: FilterSpec) -> List[CanonicalRecord]:
    """Return the records of *records* that satisfy *spec*, order preserved."""
    selected = [r for r in records if matches(r, spec)]
    logger.debug("Filter %s kept %d record(s)", spec, len(selected))
    return selected
