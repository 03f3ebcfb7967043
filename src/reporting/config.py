"""Configuration constants for the KPI pipeline."""
from __future__ import annotations

import os

# KoboToolbox form export returning every submission as a JSON array
KOBO_API_URL: str = os.getenv(
    "KOBO_API_URL", "https://kc.kobotoolbox.org/api/v1/data/3359402?format=json"
)

# Optional API token; public forms need none
KOBO_API_TOKEN: str = os.getenv("KOBO_API_TOKEN", "")

# Seconds before the submission fetch is abandoned
KOBO_TIMEOUT_SECONDS: float = float(os.getenv("KOBO_TIMEOUT_SECONDS", "30"))

# Report band thresholds (display only; the KPIs use fixed cut-offs)
EXCELLENT_THRESHOLD: float = float(os.getenv("REPORT_EXCELLENT_THRESHOLD", "4.0"))
SATISFACTORY_THRESHOLD: float = float(
    os.getenv("REPORT_SATISFACTORY_THRESHOLD", "3.0")
)

# Standard deviation bounds for the consensus label
CONSENSUS_STRONG_BELOW: float = 0.5
CONSENSUS_MEDIUM_BELOW: float = 1.0

# Rows shown in the report tables
MAX_DAILY_ROWS: int = int(os.getenv("REPORT_MAX_DAILY_ROWS", "14"))
MAX_SESSION_ROWS: int = int(os.getenv("REPORT_MAX_SESSION_ROWS", "10"))
