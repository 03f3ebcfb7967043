"""Data structures for the KPI reporting pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

SessionNumber = Union[int, float]


@dataclass(frozen=True, slots=True)
class SessionScore:
    session: SessionNumber
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"session": self.session, "score": self.score}


@dataclass(frozen=True, slots=True)
class SessionCount:
    session: SessionNumber
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"session": self.session, "count": self.count}


@dataclass(frozen=True, slots=True)
class DailyScore:
    date: str
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "score": self.score}


@dataclass(slots=True)
class KPIResult:
    """Snapshot of every KPI for one request.

    *Global* fields ignore the active filter; *filtered* fields are computed
    over the records that passed it.
    """

    # Global KPIs
    total_responses: int
    session_scores: List[SessionScore]
    session_counts: List[SessionCount]
    best_session: SessionScore
    worst_session: SessionScore
    global_stddev: float
    daily_scores: List[DailyScore]
    excellent_sessions: int

    # Filtered KPIs
    global_score: float
    recommandation: float
    attentes: float
    pertinence: float
    qualite_presentations: float
    satisfaction_intervenants: float
    utilite_connaissances: float
    qualite_moderation: float
    qualite_echanges: float
    qualite_logistique: float
    defi_pays: float
    strong_recommendation_pct: float
    defi_pays_pct: float

    # Metadata
    date_min_submission: str
    date_max_submission: str
    available_sessions: List[SessionNumber] = field(default_factory=list)
    filtered_responses: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON payload consumed by the dashboard."""
        return {
            "NOMBRE_REPONSES": self.total_responses,
            "SCORE_MOYEN_PAR_SESSION": [s.to_dict() for s in self.session_scores],
            "NOMBRE_REPONSES_PAR_SESSION": [c.to_dict() for c in self.session_counts],
            "MEILLEURE_SESSION": self.best_session.to_dict(),
            "PIRE_SESSION": self.worst_session.to_dict(),
            "ECART_TYPE_GLOBAL": self.global_stddev,
            "SCORE_GLOBAL_PAR_JOUR": [d.to_dict() for d in self.daily_scores],
            "SCORE_SESSIONS_EXCELLENTES": self.excellent_sessions,
            "SCORE_MOYEN_GLOBAL_FILTERED": self.global_score,
            "SCORE_RECOMMANDATION_FILTERED": self.recommandation,
            "SCORE_ATTENTES_FILTERED": self.attentes,
            "SCORE_THEMATIQUE_PERTINENCE_FILTERED": self.pertinence,
            "SCORE_QUALITE_PRESENTATIONS_FILTERED": self.qualite_presentations,
            "SCORE_INTERVENANTS_FILTERED": self.satisfaction_intervenants,
            "SCORE_UTILITE_CONNAISSANCES_FILTERED": self.utilite_connaissances,
            "SCORE_MODERATION_FILTERED": self.qualite_moderation,
            "SCORE_ECHANGES_FILTERED": self.qualite_echanges,
            "SCORE_LOGISTIQUE_FILTERED": self.qualite_logistique,
            "SCORE_DEFI_PAYS_FILTERED": self.defi_pays,
            "POURCENTAGE_RECOMMANDATION_FORTE_FILTERED": self.strong_recommendation_pct,
            "POURCENTAGE_DEFI_PAYS_FILTERED": self.defi_pays_pct,
            "DATE_MIN_SUBMISSION": self.date_min_submission,
            "DATE_MAX_SUBMISSION": self.date_max_submission,
            "SESSIONS_DISPONIBLES": list(self.available_sessions),
            "NOMBRE_REPONSES_FILTERED": self.filtered_responses,
        }
