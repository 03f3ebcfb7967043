"""Request-scoped KPI computation: fetch, normalise, aggregate."""
from __future__ import annotations

import logging
from typing import Optional

from src.kobo_client import KoboClient
from src.reporting.aggregator import compute_kpis
from src.reporting.models import KPIResult
from src.survey.filters import FilterSpec
from src.survey.records import transform_submissions

logger = logging.getLogger(__name__)


def build_kpi_result(
    spec: Optional[FilterSpec] = None,
    *,
    client: Optional[KoboClient] = None,
    today: Optional[str] = None,
) -> KPIResult:
    """Fetch every submission and compute a fresh :class:`KPIResult`.

    Only :class:`src.exceptions.FetchFailure` escapes; malformed submissions
    degrade the aggregates instead of failing the request.
    """

    client = client or KoboClient.from_env()
    raw_submissions = client.fetch_submissions()
    records = transform_submissions(raw_submissions)
    logger.debug("Normalised %d submission(s)", len(records))
    return compute_kpis(records, spec or FilterSpec(), today=today)
