"""Flask JSON endpoint exposing the KPI snapshot to the dashboard.

``GET /api/kpi`` accepts the optional ``sessions`` (comma-separated ids),
``startDate`` and ``endDate`` (``YYYY-MM-DD``) query parameters and returns
the KPI payload.  Every call refetches the submissions, and responses carry
``Cache-Control: no-store`` so intermediaries never serve stale figures.
"""
from __future__ import annotations

import logging

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from src.exceptions import FetchFailure
from src.kpi_service import build_kpi_result
from src.survey.filters import FilterSpec

load_dotenv()

logger = logging.getLogger(__name__)

NO_STORE = "no-store, max-age=0"


def _error_response(details: str):
    response = jsonify({"error": "Failed to fetch KPI data", "details": details})
    response.status_code = 500
    response.headers["Cache-Control"] = NO_STORE
    return response


def create_app() -> Flask:
    """Build the Flask application."""

    app = Flask(__name__)

    @app.route("/api/kpi", methods=["GET"])
    def get_kpis():
        spec = FilterSpec.from_params(
            sessions=request.args.get("sessions"),
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
        )
        try:
            result = build_kpi_result(spec)
        except FetchFailure as exc:
            logger.error("Error fetching KPI data (status=%s): %s", exc.status, exc.message)
            return _error_response(exc.message)
        except Exception as exc:
            logger.error("Unexpected error computing KPI data: %s", exc, exc_info=True)
            return _error_response(str(exc) or type(exc).__name__)

        response = jsonify(result.to_dict())
        response.headers["Cache-Control"] = NO_STORE
        return response

    @app.route("/healthz", methods=["GET"])
    def healthz():
        return jsonify({"status": "ok"})

    return app
