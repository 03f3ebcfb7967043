"""Context dataclass for rendering KPI reports.

This module defines `ReportContext`, a typed container that holds all
values expected by the Jinja2 template located in
`src/reporting/templates/report.md.j2`.

Building the context is where the dashboard's presentation rules live:
score bands (Excellent / Satisfaisant / Insuffisant), the consensus label
derived from the global standard deviation, and a readable description of
the active filter. The template itself only formats.
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from datetime import datetime as _dt
from datetime import timezone as _tz
from typing import Any, Dict, List, Optional

from src.reporting import config
from src.reporting.models import KPIResult
from src.survey.filters import FilterSpec

__all__ = [
    "MetricLine",
    "ReportContext",
    "score_band",
    "consensus_label",
    "describe_filters",
    "build_report_context",
]

# (label, KPIResult attribute) in dashboard order
_METRIC_LABELS = (
    ("Satisfaction des attentes", "attentes"),
    ("Pertinence de la thématique", "pertinence"),
    ("Qualité des présentations", "qualite_presentations"),
    ("Satisfaction des intervenants", "satisfaction_intervenants"),
    ("Utilité des connaissances", "utilite_connaissances"),
    ("Qualité de la modération", "qualite_moderation"),
    ("Qualité des échanges", "qualite_echanges"),
    ("Qualité de la logistique", "qualite_logistique"),
    ("Recommandation", "recommandation"),
    ("Défi pays", "defi_pays"),
)


def score_band(score: float) -> str:
    """Return the dashboard band for a 0–5 *score*."""
    if score >= config.EXCELLENT_THRESHOLD:
        return "Excellent"
    if score >= config.SATISFACTORY_THRESHOLD:
        return "Satisfaisant"
    return "Insuffisant"


def consensus_label(std: float) -> str:
    """Qualitative agreement level for a standard deviation."""
    if std < config.CONSENSUS_STRONG_BELOW:
        return "Forte"
    if std < config.CONSENSUS_MEDIUM_BELOW:
        return "Moyenne"
    return "Faible"


def _fmt_session(session: Any) -> str:
    return f"Session {session}" if session else "—"


def describe_filters(spec: Optional[FilterSpec]) -> str:
    """Human-readable summary of *spec*."""
    if spec is None or spec.is_empty:
        return "Toutes les sessions, toutes les dates"

    parts: List[str] = []
    if spec.session_ids:
        ids = ", ".join(str(i) for i in sorted(spec.session_ids))
        parts.append(f"Sessions {ids}")
    else:
        parts.append("Toutes les sessions")

    if spec.start_date and spec.end_date:
        parts.append(f"du {spec.start_date} au {spec.end_date}")
    elif spec.start_date:
        parts.append(f"depuis le {spec.start_date}")
    elif spec.end_date:
        parts.append(f"jusqu'au {spec.end_date}")
    return ", ".join(parts)


@dataclass(slots=True)
class MetricLine:
    label: str
    score: float
    band: str


@dataclass(slots=True)
class ReportContext:
    """Container with all fields used by the KPI report template."""

    # Header & meta
    date: str
    filters: str

    # Global KPIs
    total_responses: int
    filtered_responses: int
    best_session: str
    best_score: float
    worst_session: str
    worst_score: float
    excellent_sessions: int
    session_total: int
    global_stddev: float
    consensus: str
    date_min: str
    date_max: str

    # Filtered KPIs
    global_score: float
    global_band: str
    strong_recommendation_pct: float
    defi_pays_pct: float
    metrics: List[MetricLine] = field(default_factory=list)

    # Tables
    session_rows: List[Dict[str, Any]] = field(default_factory=list)
    daily_rows: List[Dict[str, Any]] = field(default_factory=list)

    version: str = "1"

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` (recursively) for Jinja rendering."""
        return asdict(self)

    __call__ = to_dict


def build_report_context(
    result: KPIResult, spec: Optional[FilterSpec] = None
) -> ReportContext:
    """Convert a :class:`KPIResult` into :class:`ReportContext`.

    Pure: *result* is not mutated.
    """

    counts = {c.session: c.count for c in result.session_counts}
    session_rows = [
        {
            "session": s.session,
            "score": s.score,
            "count": counts.get(s.session, 0),
            "band": score_band(s.score),
        }
        for s in result.session_scores[: config.MAX_SESSION_ROWS]
    ]
    # Most recent days only
    recent_days = result.daily_scores[-config.MAX_DAILY_ROWS :] if config.MAX_DAILY_ROWS > 0 else []
    daily_rows = [{"date": d.date, "score": d.score} for d in recent_days]

    metrics = [
        MetricLine(label=label, score=getattr(result, attr), band=score_band(getattr(result, attr)))
        for label, attr in _METRIC_LABELS
    ]

    return ReportContext(
        date=_dt.now(tz=_tz.utc).strftime("%Y-%m-%d"),
        filters=describe_filters(spec),
        total_responses=result.total_responses,
        filtered_responses=result.filtered_responses,
        best_session=_fmt_session(result.best_session.session),
        best_score=result.best_session.score,
        worst_session=_fmt_session(result.worst_session.session),
        worst_score=result.worst_session.score,
        excellent_sessions=result.excellent_sessions,
        session_total=len(result.available_sessions),
        global_stddev=result.global_stddev,
        consensus=consensus_label(result.global_stddev),
        date_min=result.date_min_submission,
        date_max=result.date_max_submission,
        global_score=result.global_score,
        global_band=score_band(result.global_score),
        strong_recommendation_pct=result.strong_recommendation_pct,
        defi_pays_pct=result.defi_pays_pct,
        metrics=metrics,
        session_rows=session_rows,
        daily_rows=daily_rows,
        version=os.getenv("REPORT_VERSION", "0.1"),
    )
