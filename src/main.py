"""Application bootstrap for the Session KPI tracker.

``python -m src.main`` starts the Slack bot via Socket Mode;
``python -m src.main api`` serves the JSON endpoint with Flask's server.
Keeping the runtime bootstrap here (instead of in ``src/app.py``) ensures the
app modules can be safely imported by unit tests and tooling without
side-effects.
"""
from __future__ import annotations

import os
import sys
from contextlib import suppress


def run_slack() -> None:  # pragma: no cover – manual run path
    """Start the Slack bot in Socket Mode (blocks until interrupted)."""

    from slack_bolt.adapter.socket_mode import SocketModeHandler

    from src.app import app, logger, shutdown_executor

    app_token = os.getenv("SLACK_APP_TOKEN")
    if not app_token:
        logger.error(
            "Environment variable SLACK_APP_TOKEN is required to start the bot."
        )
        sys.exit(1)

    logger.info("Launching SocketModeHandler…")
    handler = SocketModeHandler(app, app_token)

    try:
        logger.info("Bot is ready to receive commands via Socket Mode.")
        handler.start()  # Blocking call
    except KeyboardInterrupt:  # pragma: no cover
        logger.info("Shutdown requested (KeyboardInterrupt). Exiting…")
    finally:
        with suppress(Exception):
            shutdown_executor()
        logger.info("Goodbye.")


def run_api() -> None:  # pragma: no cover – manual run path
    """Serve ``/api/kpi`` with the Flask development server."""

    import logging

    from src.api import create_app

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=os.environ.get("SLACK_LOG_LEVEL", "INFO"),
    )
    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "8000"))
    create_app().run(host=host, port=port)


def main(argv: list[str] | None = None) -> None:  # pragma: no cover – manual run path
    args = sys.argv[1:] if argv is None else argv
    mode = args[0] if args else "slack"
    if mode == "api":
        run_api()
    elif mode == "slack":
        run_slack()
    else:
        print(f"Unknown mode '{mode}'. Use 'slack' or 'api'.", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":  # pragma: no cover
    main()
