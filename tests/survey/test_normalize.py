"""Tests for survey.normalize coercion helpers."""
from __future__ import annotations

import pytest

from src.survey.normalize import parse_date, parse_score, parse_session_id


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, 0.0),
        ("", 0.0),
        ("abc", 0.0),
        ("4", 4.0),
        ("4.5/5", 4.5),
        (" 3", 3.0),
        (7, 5.0),
        (-2, 0.0),
        ("12", 5.0),
        (2.25, 2.25),
        (float("nan"), 0.0),
        (True, 0.0),
        (10**400, 5.0),
        (-(10**400), 0.0),
        ("1" + "0" * 400, 5.0),
    ],
)
def test_parse_score(value, expected):
    assert parse_score(value) == expected


@pytest.mark.parametrize("value", ["3.7", "-1", "9", 4, 0, "x", "", 5.0, "1e1"])
def test_parse_score_idempotent_and_bounded(value):
    once = parse_score(value)
    assert 0 <= once <= 5
    assert parse_score(once) == once


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, 0),
        ("", 0),
        ("7", 7),
        (12, 12),
        ("-3", -3),
        ("2.5", 2.5),
        ("session", 0),
        ("42", 42),
        (10**400, 0),
        (-(10**400), 0),
    ],
)
def test_parse_session_id_not_clamped(value, expected):
    assert parse_session_id(value) == expected


def test_parse_session_id_returns_int_for_integral_values():
    assert isinstance(parse_session_id("3"), int)
    assert isinstance(parse_session_id(3.0), int)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2026-03-10T09:00:00", "2026-03-10"),
        ("2026-03-10T09:00:00.123+01:00", "2026-03-10"),
        ("10/03/2026 09:00", "2026-03-10"),
        ("1/3/2026", "2026-03-01"),
        ("", ""),
        (None, ""),
        ("hier", "hier"),
        ("10/03", "10/03"),
        ("//2026", "//2026"),
    ],
)
def test_parse_date(value, expected):
    assert parse_date(value) == expected
