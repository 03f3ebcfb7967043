"""Render KPI reports using Jinja2 templates."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader

from src.reporting.context import build_report_context
from src.reporting.models import KPIResult
from src.survey.filters import FilterSpec

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Slack markdown, not HTML: escaping would mangle apostrophes and accents.
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)

# Slack truncates long messages; above this the report is uploaded as a file.
MAX_MESSAGE_LEN = 2800


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_report(result: KPIResult, spec: Optional[FilterSpec] = None) -> str:
    """Render a Slack-friendly markdown report from a :class:`KPIResult`."""

    context = build_report_context(result, spec)
    template = _env.get_template("report.md.j2")
    return template.render(**context.to_dict())


def post_report_to_slack(
    *,
    result: KPIResult,
    client,
    channel: str,
    spec: Optional[FilterSpec] = None,
) -> None:
    """Send the KPI report to Slack *channel* using *client* (WebClient)."""

    report_text = render_report(result, spec)
    report_len = len(report_text)
    logger.debug("KPI report generated for channel=%s len=%d", channel, report_len)

    if report_len < MAX_MESSAGE_LEN:
        client.chat_postMessage(channel=channel, text=report_text)
        return

    logger.debug(
        "Uploading report as file (len=%d >= %d) via files_upload_v2",
        report_len,
        MAX_MESSAGE_LEN,
    )
    client.files_upload_v2(
        channel=channel,
        title="Indicateurs de qualité des sessions",
        content=report_text,
        filename=f"kpi_{result.date_max_submission}.md",
    )
