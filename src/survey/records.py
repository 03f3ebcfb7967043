"""Canonical survey records built from raw KoboToolbox submissions."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Tuple, Union

from src.survey.fields import resolve_field
from src.survey.normalize import parse_date, parse_score, parse_session_id

logger = logging.getLogger(__name__)

__all__ = [
    "CanonicalRecord",
    "COMPOSITE_FIELDS",
    "SCORE_FIELDS",
    "transform_submission",
    "transform_submissions",
]

# Metrics pooled into a session's composite score.
COMPOSITE_FIELDS: Tuple[str, ...] = (
    "attentes",
    "pertinence",
    "qualite_presentations",
    "satisfaction_intervenants",
    "utilite_connaissances",
    "qualite_moderation",
    "qualite_echanges",
    "qualite_logistique",
)

SCORE_FIELDS: Tuple[str, ...] = COMPOSITE_FIELDS + ("recommandation", "defi_pays")

# record attribute -> metric name used by the field resolver
_METRIC_NAMES = {
    "attentes": "attentes",
    "pertinence": "pertinence",
    "qualite_presentations": "qualitePresentations",
    "satisfaction_intervenants": "satisfactionIntervenants",
    "utilite_connaissances": "utiliteConnaissances",
    "qualite_moderation": "qualiteModeration",
    "qualite_echanges": "qualiteEchanges",
    "qualite_logistique": "qualiteLogistique",
    "recommandation": "recommandation",
    "defi_pays": "defiPays",
}


@dataclass(frozen=True, slots=True)
class CanonicalRecord:
    """One normalised survey response.

    Every score lies in ``[0, 5]``; ``0`` means the question was left blank
    or could not be parsed, and is never counted in an average.
    ``session_id == 0`` marks a response not attributed to any session and
    ``date == ""`` one without a usable submission time.
    """

    session_id: Union[int, float] = 0
    date: str = ""
    attentes: float = 0.0
    pertinence: float = 0.0
    qualite_presentations: float = 0.0
    satisfaction_intervenants: float = 0.0
    utilite_connaissances: float = 0.0
    qualite_moderation: float = 0.0
    qualite_echanges: float = 0.0
    qualite_logistique: float = 0.0
    recommandation: float = 0.0
    defi_pays: float = 0.0

    def composite_scores(self) -> List[float]:
        """Return the eight composite metric values (sentinels included)."""
        return [getattr(self, name) for name in COMPOSITE_FIELDS]


def transform_submission(raw: Mapping[str, Any]) -> CanonicalRecord:
    """Map a raw submission onto a :class:`CanonicalRecord`. Never raises."""

    if not isinstance(raw, Mapping):
        logger.debug("Ignoring non-mapping submission of type %s", type(raw).__name__)
        raw = {}

    scores = {
        attr: parse_score(resolve_field(raw, metric))
        for attr, metric in _METRIC_NAMES.items()
    }
    return CanonicalRecord(
        session_id=parse_session_id(resolve_field(raw, "sessionId")),
        date=parse_date(resolve_field(raw, "date")),
        **scores,
    )


def transform_submissions(raws: Iterable[Mapping[str, Any]]) -> List[CanonicalRecord]:
    """Transform every submission in *raws*, preserving order and count."""
    return [transform_submission(raw) for raw in raws]
