"""
Unit tests for HTTP client logging helpers.
"""

import logging
import time
from unittest.mock import MagicMock

from http_service.errors import HttpStatusError
from http_service.utils.data_masker import MaskOptions
from http_service.utils.http_client_logging import (
    build_request_snapshot,
    calculate_duration_ms,
    log_request_debug,
    log_request_error,
    log_response_debug,
)


class TestHttpClientLogging:
    """Test cases for logging helpers."""

    def test_calculate_duration_ms(self):
        """Test duration is whole milliseconds."""
        duration = calculate_duration_ms(time.perf_counter() - 0.25)

        assert isinstance(duration, int)
        assert duration >= 250

    def test_build_request_snapshot(self):
        """Test the body is only included when asked for."""
        assert build_request_snapshot("get", "https://x/", {"a": 1}) == {
            "method": "get",
            "url": "https://x/",
            "options": {},
        }
        assert build_request_snapshot("put", "https://x/", None, {"timeout": 5}, True) == {
            "method": "put",
            "url": "https://x/",
            "body": None,
            "options": {"timeout": 5},
        }

    def test_log_request_debug_masks(self):
        """Test request snapshots are redacted before logging."""
        logger = MagicMock(spec=logging.Logger)
        options = MaskOptions(mask_properties=["authorization"])

        log_request_debug(
            logger,
            options,
            "get",
            "https://x/",
            options={"headers": {"authorization": "Bearer abc"}},
        )

        data = logger.debug.call_args.kwargs["extra"]["data"]
        assert data["options"]["headers"]["authorization"] == "**********"

    def test_log_response_debug(self):
        """Test response lines carry status and duration."""
        logger = MagicMock(spec=logging.Logger)

        log_response_debug(logger, "GET", "https://x/", 204, time.perf_counter())

        args, kwargs = logger.debug.call_args
        assert args[0] == "HTTP response"
        assert kwargs["extra"]["data"]["statusCode"] == 204

    def test_log_request_error(self):
        """Test failures log status, error text and the redacted body."""
        logger = MagicMock(spec=logging.Logger)
        error = HttpStatusError("HTTP 400", status_code=400, error_body={"token": "t", "why": "bad"})

        log_request_error(
            logger, MaskOptions(hide_properties=["token"]), "POST", "https://x/", error, time.perf_counter()
        )

        data = logger.error.call_args.kwargs["extra"]["data"]
        assert data["statusCode"] == 400
        assert data["error"] == "HttpStatusError: HTTP 400"
        assert data["errorBody"] == {"why": "bad"}

    def test_log_request_error_without_status(self):
        """Test plain exceptions log without status code."""
        logger = MagicMock(spec=logging.Logger)

        log_request_error(
            logger, MaskOptions(), "GET", "https://x/", RuntimeError("down"), time.perf_counter()
        )

        data = logger.error.call_args.kwargs["extra"]["data"]
        assert data["statusCode"] is None
        assert data["errorBody"] is None
