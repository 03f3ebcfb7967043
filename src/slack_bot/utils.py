"""Utility helpers for Slack interactions."""
from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional

from src.survey.filters import FilterSpec

logger = logging.getLogger(__name__)

_SESSIONS_RE = re.compile(r"\bsessions?\s+([0-9][0-9,\s]*)", re.IGNORECASE)
_FROM_RE = re.compile(r"\b(?:from|since|du|depuis)\s+(\S+)", re.IGNORECASE)
_TO_RE = re.compile(r"\b(?:to|until|au|jusqu'au)\s+(\S+)", re.IGNORECASE)


def _valid_iso_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return len(value) == 10


def parse_kpi_command(
    text: str | None, logger: logging.Logger = logger
) -> tuple[FilterSpec, bool]:
    """Parse the KPI slash-command text into a :class:`FilterSpec`.

    Accepted syntax (every part optional, any order)::

        sessions 1,2,5 from 2026-01-01 to 2026-01-31

    Returns:
        A tuple ``(spec, is_valid)``.  ``is_valid`` is ``False`` when a date
        is not ``YYYY-MM-DD`` or the start date is after the end date; the
        spec is then empty.
    """

    text = (text or "").strip()
    if not text:
        return FilterSpec(), True

    sessions_match = _SESSIONS_RE.search(text)
    from_match = _FROM_RE.search(text)
    to_match = _TO_RE.search(text)

    sessions = sessions_match.group(1).replace(" ", "") if sessions_match else None
    start = from_match.group(1) if from_match else None
    end = to_match.group(1) if to_match else None

    for label, value in (("start", start), ("end", end)):
        if value is not None and not _valid_iso_date(value):
            logger.warning(f"Invalid {label} date '{value}' in KPI command.")
            return FilterSpec(), False

    if start and end and start > end:
        logger.warning(f"Start date '{start}' is after end date '{end}'.")
        return FilterSpec(), False

    return FilterSpec.from_params(sessions=sessions, start_date=start, end_date=end), True
