# tests/test_app.py
from unittest.mock import MagicMock, patch

from src.app import (
    _help_text,
    custom_error_handler,
    handle_app_mention,
    handle_kpi_command,
    log_request,
    process_kpi_request,
)
from src.exceptions import FetchFailure
from src.survey.filters import FilterSpec

# --- Basic Handlers and Middleware Tests --- #


@patch("src.app.logger")
def test_handle_app_mention_handler(mock_logger):
    """Test that the handle_app_mention handler responds with help."""
    mock_say = MagicMock()
    mock_event = {"user": "UAPPMENTION", "text": "@bot help"}
    handle_app_mention(event=mock_event, say=mock_say, logger=mock_logger)

    mock_say.assert_called_once_with(_help_text())
    mock_logger.debug.assert_not_called()


def test_handle_app_mention_without_help_is_ignored():
    mock_say = MagicMock()
    mock_logger = MagicMock()
    handle_app_mention(event={"text": "@bot hi"}, say=mock_say, logger=mock_logger)

    mock_say.assert_not_called()
    mock_logger.debug.assert_called_once()


@patch("src.app.logger")
def test_log_request_middleware(mock_app_logger):
    """Test that the log_request middleware logs the body and calls next."""
    mock_next = MagicMock()
    mock_body = {"event": {"type": "message"}}
    log_request(logger=mock_app_logger, body=mock_body, next=mock_next)
    mock_app_logger.debug.assert_called_once_with(f"Received event: {mock_body}")
    mock_next.assert_called_once()


@patch("src.app.logger")
def test_custom_error_handler(mock_app_logger):
    """Test that the custom_error_handler logs the error and body."""
    test_error = ValueError("Test error")
    mock_body = {"event": {"type": "app_mention"}}
    custom_error_handler(error=test_error, body=mock_body, logger=mock_app_logger)
    mock_app_logger.exception.assert_called_once_with(
        f"Error handling request: {test_error}"
    )
    mock_app_logger.debug.assert_called_once_with(f"Request body: {mock_body}")


# --- Tests for the KPI command handler --- #


@patch("src.app.executor")
@patch("src.app.logger")
def test_handle_kpi_command_submits_to_executor(mock_logger, mock_executor):
    """The slash command is acked and the worker submitted to the executor."""
    mock_ack = MagicMock()
    mock_respond = MagicMock()
    mock_client = MagicMock()
    command_payload = {"user_id": "U_TESTER"}

    handle_kpi_command(
        ack=mock_ack,
        command=command_payload,
        client=mock_client,
        logger=mock_logger,
        respond=mock_respond,
    )

    mock_ack.assert_called_once()
    mock_executor.submit.assert_called_once_with(
        process_kpi_request,
        command=command_payload,
        client=mock_client,
        logger=mock_logger,
        respond=mock_respond,
    )


@patch("src.app.post_report_to_slack")
@patch("src.app.build_kpi_result")
def test_process_kpi_request_posts_report(mock_build, mock_post):
    mock_client = MagicMock()
    mock_respond = MagicMock()
    command = {"user_id": "U1", "channel_id": "C1", "text": "sessions 2 from 2026-01-01"}

    process_kpi_request(
        command=command, client=mock_client, logger=MagicMock(), respond=mock_respond
    )

    expected_spec = FilterSpec(session_ids=frozenset({2}), start_date="2026-01-01")
    mock_build.assert_called_once_with(expected_spec)
    mock_post.assert_called_once_with(
        result=mock_build.return_value,
        client=mock_client,
        channel="C1",
        spec=expected_spec,
    )
    mock_respond.assert_not_called()


@patch("src.app.build_kpi_result")
def test_process_kpi_request_invalid_text(mock_build):
    mock_respond = MagicMock()
    process_kpi_request(
        command={"user_id": "U1", "text": "from yesterday"},
        client=MagicMock(),
        logger=MagicMock(),
        respond=mock_respond,
    )

    mock_build.assert_not_called()
    assert "didn't understand" in mock_respond.call_args[0][0]


@patch("src.app.post_report_to_slack")
@patch("src.app.build_kpi_result", side_effect=FetchFailure("boom", status=503))
def test_process_kpi_request_fetch_failure(mock_build, mock_post):
    mock_respond = MagicMock()
    process_kpi_request(
        command={"user_id": "U1", "channel_id": "C1", "text": ""},
        client=MagicMock(),
        logger=MagicMock(),
        respond=mock_respond,
    )

    mock_post.assert_not_called()
    assert "try again" in mock_respond.call_args[0][0]


@patch("src.app.post_report_to_slack", side_effect=RuntimeError("unexpected"))
@patch("src.app.build_kpi_result")
def test_process_kpi_request_unexpected_error(mock_build, mock_post):
    mock_respond = MagicMock()
    mock_logger = MagicMock()
    process_kpi_request(
        command={"user_id": "U1", "channel_id": "C1"},
        client=MagicMock(),
        logger=mock_logger,
        respond=mock_respond,
    )

    mock_logger.error.assert_called_once()
    assert "unexpected error" in mock_respond.call_args[0][0]
