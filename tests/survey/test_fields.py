"""Tests for survey.fields alias resolution."""
from __future__ import annotations

import pytest

from src.survey.fields import FIELD_ALIASES, resolve_field


def test_legacy_alias_wins_over_newer_name():
    raw = {"attentes_session": 3, "Satisfaction_attentes": 5}
    assert resolve_field(raw, "attentes") == 3


def test_falls_back_to_newer_name():
    raw = {"Satisfaction_attentes": "4"}
    assert resolve_field(raw, "attentes") == "4"


def test_empty_string_and_none_are_skipped():
    raw = {"attentes_session": "", "Satisfaction_attentes": None}
    assert resolve_field(raw, "attentes") is None

    raw = {"recommandation_session": "", "Recommandation": 4}
    assert resolve_field(raw, "recommandation") == 4


def test_zero_is_a_value():
    raw = {"attentes_session": 0, "Satisfaction_attentes": 5}
    assert resolve_field(raw, "attentes") == 0


def test_defi_pays_alias_order():
    assert FIELD_ALIASES["defiPays"][0] == "thematique_session_defi_pays"
    assert resolve_field({"Défi": 2, "Défi_pays": 4}, "defiPays") == 2
    assert resolve_field({"Difi": 1, "Difi_pays": 3}, "defiPays") == 3


def test_missing_everything_yields_none():
    assert resolve_field({}, "qualiteLogistique") is None


def test_unknown_metric_raises():
    with pytest.raises(KeyError):
        resolve_field({}, "nope")


def test_numeric_zero_session_does_not_fall_through():
    raw = {"numero_session": 0, "Session": 5}
    assert resolve_field(raw, "sessionId") == 0
