"""Thin client for the KoboToolbox submission export.

One call, one GET: every KPI request observes the freshest data, so nothing
is cached between calls.

    from src.kobo_client import KoboClient

    submissions = KoboClient.from_env().fetch_submissions()
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from src.exceptions import FetchFailure
from src.reporting import config

logger = logging.getLogger(__name__)


def _build_retry_session() -> requests.Session:
    """Return a ``requests`` session retrying transient upstream failures."""

    session = requests.Session()
    retry = Retry(
        total=3,
        connect=3,
        read=3,
        status=3,
        backoff_factor=0.5,
        status_forcelist=(429, 502, 503, 504),
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class KoboClient:
    """Fetch raw submissions from a fixed KoboToolbox endpoint."""

    def __init__(
        self,
        api_url: str,
        *,
        timeout: float = 30.0,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url
        self.timeout = timeout
        self.token = token
        self._session = session

    @classmethod
    def from_env(cls) -> "KoboClient":
        """Build a client from :mod:`src.reporting.config`."""
        return cls(
            config.KOBO_API_URL,
            timeout=config.KOBO_TIMEOUT_SECONDS,
            token=config.KOBO_API_TOKEN or None,
        )

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = _build_retry_session()
        return self._session

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }
        if self.token:
            headers["Authorization"] = f"Token {self.token}"
        return headers

    def fetch_submissions(self) -> List[Dict[str, Any]]:
        """Return every submission of the form as a list of dicts.

        Raises
        ------
        FetchFailure
            On transport errors, non-2xx answers, undecodable bodies or a
            payload that is not a JSON array.
        """

        try:
            resp = self.session.get(
                self.api_url, headers=self._headers(), timeout=self.timeout
            )
        except requests.RequestException as exc:
            logger.error("KoboToolbox request failed: %s", exc)
            raise FetchFailure(f"Failed to reach KoboToolbox: {exc}") from exc

        if not resp.ok:
            logger.error("KoboToolbox API error: %s %s", resp.status_code, resp.text)
            raise FetchFailure(
                f"Failed to fetch data from KoboToolbox: {resp.status_code} {resp.text}",
                status=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise FetchFailure(
                "Invalid JSON received from KoboToolbox", status=resp.status_code
            ) from exc

        if not isinstance(payload, list):
            raise FetchFailure(
                "Invalid data format from KoboToolbox", status=resp.status_code
            )

        logger.debug("Fetched %d submission(s) from %s", len(payload), self.api_url)
        return payload
