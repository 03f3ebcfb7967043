"""Tests for slack_bot.utils helper functions."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from src.slack_bot.utils import parse_kpi_command
from src.survey.filters import FilterSpec


@pytest.mark.parametrize("text", [None, "", "   "])
def test_empty_text_means_no_filter(text):
    spec, ok = parse_kpi_command(text)
    assert ok is True
    assert spec == FilterSpec()


def test_sessions_and_dates():
    spec, ok = parse_kpi_command("sessions 1, 2,5 from 2026-01-01 to 2026-01-31")

    assert ok is True
    assert spec.session_ids == frozenset({1, 2, 5})
    assert spec.start_date == "2026-01-01"
    assert spec.end_date == "2026-01-31"


def test_single_session_and_french_keywords():
    spec, ok = parse_kpi_command("session 3 du 2026-02-01 au 2026-02-10")

    assert ok is True
    assert spec.session_ids == frozenset({3})
    assert spec.start_date == "2026-02-01"
    assert spec.end_date == "2026-02-10"


def test_only_end_date():
    spec, ok = parse_kpi_command("until 2026-03-01")
    assert ok is True
    assert spec.start_date is None
    assert spec.end_date == "2026-03-01"


def test_invalid_date_rejected():
    logger = MagicMock()
    spec, ok = parse_kpi_command("from 01/02/2026", logger)

    assert ok is False
    assert spec == FilterSpec()
    logger.warning.assert_called_once()


def test_inverted_range_rejected():
    logger = MagicMock()
    _, ok = parse_kpi_command("from 2026-02-01 to 2026-01-01", logger)
    assert ok is False
    logger.warning.assert_called_once()
