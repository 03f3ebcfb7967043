"""Tests for survey.filters."""
from __future__ import annotations

from src.survey.filters import FilterSpec, apply_filters, matches, parse_session_ids
from src.survey.records import CanonicalRecord


def _rec(session_id=1, date="2026-01-10"):
    return CanonicalRecord(session_id=session_id, date=date, attentes=4)


def test_parse_session_ids_drops_garbage():
    assert parse_session_ids("1, 2,abc,,3x") == frozenset({1, 2, 3})
    assert parse_session_ids("") == frozenset()
    assert parse_session_ids(None) == frozenset()


def test_from_params_blank_dates_are_none():
    spec = FilterSpec.from_params(sessions="", start_date="  ", end_date=None)
    assert spec == FilterSpec()
    assert spec.is_empty


def test_empty_spec_keeps_everything():
    records = [_rec(1), _rec(7), _rec(0, "")]
    assert apply_filters(records, FilterSpec()) == records


def test_session_filter_membership():
    spec = FilterSpec(session_ids=frozenset({3, 4}))
    assert matches(_rec(3), spec)
    assert not matches(_rec(7), spec)


def test_unassigned_session_always_passes():
    spec = FilterSpec(session_ids=frozenset({99}))
    assert matches(_rec(0), spec)


def test_date_bounds_are_inclusive():
    spec = FilterSpec(start_date="2026-01-10", end_date="2026-01-12")
    assert matches(_rec(date="2026-01-10"), spec)
    assert matches(_rec(date="2026-01-12"), spec)
    assert not matches(_rec(date="2026-01-09"), spec)
    assert not matches(_rec(date="2026-01-13"), spec)


def test_undated_record_passes_any_bound():
    spec = FilterSpec(start_date="2030-01-01", end_date="2020-01-01")
    assert matches(_rec(date=""), spec)


def test_all_predicates_must_hold():
    spec = FilterSpec(session_ids=frozenset({1}), start_date="2026-02-01")
    records = [_rec(1, "2026-02-05"), _rec(1, "2026-01-05"), _rec(2, "2026-02-05")]
    assert apply_filters(records, spec) == [records[0]]
