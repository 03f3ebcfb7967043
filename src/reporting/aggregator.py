"""Aggregate canonical survey records into a :class:`KPIResult`."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date as _date
from datetime import datetime as _dt
from datetime import timezone as _tz
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from src.reporting.models import DailyScore, KPIResult, SessionCount, SessionScore
from src.survey.filters import FilterSpec, apply_filters
from src.survey.normalize import MAX_SCORE
from src.survey.records import CanonicalRecord
from src.survey.stats import (
    EXCELLENT_SESSION_SCORE,
    STRONG_RECOMMENDATION_SCORE,
    mean,
    stddev,
    valid_scores,
)

logger = logging.getLogger(__name__)

_NO_SESSION = SessionScore(session=0, score=0.0)


def _metric_mean(records: Sequence[CanonicalRecord], attr: str) -> float:
    return mean(valid_scores(getattr(r, attr) for r in records))


def _group_by_session(records: Sequence[CanonicalRecord]) -> Dict[int, List[CanonicalRecord]]:
    grouped: Dict[int, List[CanonicalRecord]] = defaultdict(list)
    for record in records:
        if record.session_id > 0:
            grouped[record.session_id].append(record)
    return grouped


def _composite_score(records: Sequence[CanonicalRecord]) -> float:
    """Mean of the eight composite metrics pooled over *records*."""
    pooled = [s for r in records for s in r.composite_scores()]
    return mean(valid_scores(pooled))


def _pick_session(
    scores: Sequence[SessionScore], better: Callable[[float, float], bool]
) -> SessionScore:
    """Scan *scores* in order, replacing the running pick only on strict improvement."""
    if not scores:
        return _NO_SESSION
    picked = scores[0]
    for candidate in scores[1:]:
        if better(candidate.score, picked.score):
            picked = candidate
    return picked


def _daily_attentes(records: Sequence[CanonicalRecord]) -> List[DailyScore]:
    by_date: Dict[str, List[float]] = defaultdict(list)
    for record in records:
        if record.date and record.attentes > 0:
            by_date[record.date].append(record.attentes)
    return [DailyScore(date=d, score=mean(by_date[d])) for d in sorted(by_date)]


def _date_range(records: Sequence[CanonicalRecord], today: str) -> Tuple[str, str]:
    """Return the earliest and latest parseable submission dates."""
    parsed: List[_date] = []
    for record in records:
        if not record.date:
            continue
        # Only YYYY-MM-DD; newer fromisoformat() also accepts compact forms.
        if len(record.date) != 10:
            logger.debug("Skipping non-canonical submission date %r", record.date)
            continue
        try:
            parsed.append(_date.fromisoformat(record.date))
        except ValueError:
            logger.debug("Skipping unparseable submission date %r", record.date)
    if not parsed:
        return today, today
    return min(parsed).isoformat(), max(parsed).isoformat()


def _strong_recommendation_pct(records: Sequence[CanonicalRecord]) -> float:
    answered = valid_scores(r.recommandation for r in records)
    if not answered:
        return 0.0
    strong = [s for s in answered if s >= STRONG_RECOMMENDATION_SCORE]
    return len(strong) / len(answered) * 100


def compute_kpis(
    records: Sequence[CanonicalRecord],
    spec: Optional[FilterSpec] = None,
    *,
    today: Optional[str] = None,
) -> KPIResult:
    """Compute global and filtered KPIs from canonical *records*.

    Global KPIs always use every record; filtered KPIs use the subset that
    passes *spec*. The function never raises on degenerate input: empty
    datasets yield zeroed KPIs.
    """

    spec = spec or FilterSpec()
    today = today or _dt.now(tz=_tz.utc).strftime("%Y-%m-%d")

    # ------------------------------------------------------------------
    # Global KPIs
    # ------------------------------------------------------------------
    by_session = _group_by_session(records)
    session_ids = sorted(by_session)

    ascending_scores = [
        SessionScore(session=sid, score=_composite_score(by_session[sid]))
        for sid in session_ids
    ]
    # sorted() is stable: equal scores keep ascending session order.
    session_scores = sorted(ascending_scores, key=lambda s: s.score, reverse=True)
    session_counts = sorted(
        (SessionCount(session=sid, count=len(by_session[sid])) for sid in session_ids),
        key=lambda c: c.count,
        reverse=True,
    )

    best = _pick_session(ascending_scores, lambda cand, cur: cand > cur)
    worst = _pick_session(ascending_scores, lambda cand, cur: cand < cur)

    excellent = sum(
        1 for s in session_scores if s.score >= EXCELLENT_SESSION_SCORE
    )
    date_min, date_max = _date_range(records, today)

    # ------------------------------------------------------------------
    # Filtered KPIs
    # ------------------------------------------------------------------
    filtered = apply_filters(records, spec)
    defi_pays = _metric_mean(filtered, "defi_pays")
    attentes = _metric_mean(filtered, "attentes")

    result = KPIResult(
        total_responses=len(records),
        session_scores=session_scores,
        session_counts=session_counts,
        best_session=best,
        worst_session=worst,
        global_stddev=stddev(valid_scores(r.attentes for r in records)),
        daily_scores=_daily_attentes(records),
        excellent_sessions=excellent,
        global_score=attentes,
        recommandation=_metric_mean(filtered, "recommandation"),
        attentes=attentes,
        pertinence=_metric_mean(filtered, "pertinence"),
        qualite_presentations=_metric_mean(filtered, "qualite_presentations"),
        satisfaction_intervenants=_metric_mean(filtered, "satisfaction_intervenants"),
        utilite_connaissances=_metric_mean(filtered, "utilite_connaissances"),
        qualite_moderation=_metric_mean(filtered, "qualite_moderation"),
        qualite_echanges=_metric_mean(filtered, "qualite_echanges"),
        qualite_logistique=_metric_mean(filtered, "qualite_logistique"),
        defi_pays=defi_pays,
        strong_recommendation_pct=_strong_recommendation_pct(filtered),
        defi_pays_pct=defi_pays / MAX_SCORE * 100,
        date_min_submission=date_min,
        date_max_submission=date_max,
        available_sessions=session_ids,
        filtered_responses=len(filtered),
    )

    logger.info(
        "Computed KPIs: responses=%d filtered=%d sessions=%d",
        result.total_responses,
        result.filtered_responses,
        len(session_ids),
    )
    return result
