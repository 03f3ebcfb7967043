import atexit
import logging
import os

# Load environment variables
KPI_COMMAND = os.getenv("KPI_COMMAND", "/session-kpis")
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict

from dotenv import load_dotenv
from slack_bolt import Ack, App, Respond
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from src.exceptions import FetchFailure
from src.kpi_service import build_kpi_result
from src.reporting.render import post_report_to_slack
from src.slack_bot.utils import parse_kpi_command

# Load environment variables from .env file
load_dotenv()

# Set up logging
logging_level = os.environ.get("SLACK_LOG_LEVEL", "INFO")
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging_level
)
logger = logging.getLogger(__name__)

# Determine if token verification should be disabled (useful for CI/test mode)
_token_verification_enabled_env = os.getenv(
    "SLACK_BOLT_TOKEN_VERIFICATION_ENABLED", "true"
).lower()
# Treat any value other than explicit "false" (case-insensitive) as truthy
_token_verification_enabled = _token_verification_enabled_env != "false"

app = App(
    token=os.environ.get("SLACK_BOT_TOKEN"),
    process_before_response=True,
    token_verification_enabled=_token_verification_enabled,
)

# KPI requests fetch the whole submission set; keep them off Bolt's ack path.
executor = ThreadPoolExecutor(max_workers=4)


def shutdown_executor():
    """Gracefully shut down the thread pool executor."""
    logger.info("Shutting down thread pool executor...")
    executor.shutdown(wait=True)
    logger.info("Thread pool executor shut down gracefully.")


atexit.register(shutdown_executor)


# Log all incoming messages to help with debugging
@app.middleware
def log_request(logger, body, next):
    logger.debug(f"Received event: {body}")
    return next()


def _help_text() -> str:
    """Return a help message describing bot purpose and usage."""

    return (
        "*KPI-Bot – Indicateurs de qualité des sessions*\n\n"
        "This bot fetches the latest survey submissions and posts the session quality KPIs.\n\n"
        "*Core commands*\n"
        "• `@kpi-bot help` — show this message.\n"
        f"• `{KPI_COMMAND}` — KPIs over every session and date.\n"
        f"• `{KPI_COMMAND} [sessions <ids>] [from YYYY-MM-DD] [to YYYY-MM-DD]` — filtered KPIs.\n\n"
        "**Examples:**\n"
        f"• `{KPI_COMMAND} sessions 1,2` — only sessions 1 and 2 (unassigned responses are always kept).\n"
        f"• `{KPI_COMMAND} from 2026-01-01 to 2026-01-31` — January submissions.\n"
        "Global KPIs (ranking, best/worst session, consensus) always cover the full dataset."
    )


@app.event("app_mention")
def handle_app_mention(event, say, logger: logging.Logger):
    """Respond to `@kpi-bot help`; other mentions are ignored."""
    text = event.get("text", "").lower()
    if "help" in text:
        say(_help_text())
    else:
        logger.debug("Ignoring mention without help: %s", text)


def process_kpi_request(
    command: Dict[str, Any],
    client: WebClient,
    logger: logging.Logger,
    respond: Respond,
):
    """Compute the KPIs for *command* and post the report (background thread)."""
    user_id = command.get("user_id", "unknown")
    command_text = command.get("text", "")
    try:
        logger.info(
            f"Processing {KPI_COMMAND} from user '{user_id}' with text: '{command_text}'"
        )

        spec, is_valid = parse_kpi_command(command_text, logger)
        if not is_valid:
            respond(
                f"I'm sorry, I didn't understand that. Use `{KPI_COMMAND} [sessions 1,2] "
                "[from YYYY-MM-DD] [to YYYY-MM-DD]`."
            )
            return

        try:
            result = build_kpi_result(spec)
        except FetchFailure as exc:
            logger.error(
                "Failed to fetch submissions for %s (status=%s): %s",
                KPI_COMMAND,
                exc.status,
                exc.message,
            )
            respond(
                "Sorry, I couldn't fetch the survey submissions right now. Please try again in a moment."
            )
            return

        channel = command.get("channel_id") or user_id
        try:
            post_report_to_slack(result=result, client=client, channel=channel, spec=spec)
        except SlackApiError as exc:
            logger.error(
                "Failed to post KPI report to %s: %s",
                channel,
                exc.response.get("error", str(exc)),
            )
            respond("Sorry, I wasn't able to post the report in this channel.")
            return

        logger.info(
            f"Posted KPI report for '{user_id}' in '{channel}' "
            f"({result.filtered_responses}/{result.total_responses} responses)."
        )

    except Exception as e:
        logger.error(
            f"Error processing {KPI_COMMAND} request for user '{user_id}': {e}",
            exc_info=True,
        )
        respond(
            "Sorry, an unexpected error occurred while processing your request. Please try again."
        )


# ------------------------------------------------------------------
# Thread helper utilities
# ------------------------------------------------------------------


def _log_future_exception(fut: Future) -> None:  # noqa: WPS430 – small util
    """Logs any exception raised by a completed *Future*."""
    exc = fut.exception()
    if exc is not None:
        logger.exception("Background task raised an exception: %s", exc, exc_info=exc)


def submit_background(func, /, *args, **kwargs) -> Future:  # noqa: WPS110
    """Submit *func* to the shared thread pool with automatic error logging."""

    fut = executor.submit(func, *args, **kwargs)
    fut.add_done_callback(_log_future_exception)
    return fut


@app.command(KPI_COMMAND)
def handle_kpi_command(
    ack: Ack,
    command: Dict[str, Any],
    client: WebClient,
    logger: logging.Logger,
    respond: Respond,
):
    """Acknowledge the KPI slash command and compute the report in the background."""
    ack()
    try:
        submit_background(
            process_kpi_request,
            command=command,
            client=client,
            logger=logger,
            respond=respond,
        )
        logger.info(
            f"Submitted {KPI_COMMAND} request for user '{command['user_id']}' to thread pool."
        )

    except Exception as e:
        logger.error(
            f"Error submitting {KPI_COMMAND} for user '{command['user_id']}' to thread pool: {e}",
            exc_info=True,
        )
        respond("Sorry, there was an issue submitting your request. Please try again.")


# Error handler
@app.error
def custom_error_handler(error, body, logger):
    logger.exception(f"Error handling request: {error}")
    logger.debug(f"Request body: {body}")


# NOTE: Runtime startup lives in src/main.py to keep this module import-safe and testable.
