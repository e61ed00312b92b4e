"""
HTTP client logging utilities.

Builds the diagnostic payloads ``HttpService`` logs for every call. All
request and response data goes through ``mask_object`` first, so hidden and
masked fields never reach a log line.
"""

import time
from typing import Any, Dict, Optional, Union

from .data_masker import MaskOptions, mask_object


def calculate_duration_ms(start_time: float) -> int:
    """
    Milliseconds elapsed since ``start_time``.

    Args:
        start_time: Value from time.perf_counter()
    """
    return int((time.perf_counter() - start_time) * 1000)


def build_request_snapshot(
    method: str,
    url: str,
    body: Any = None,
    options: Optional[Dict[str, Any]] = None,
    include_body: bool = False,
) -> Dict[str, Any]:
    """
    Describe an outgoing call.

    Args:
        method: Client method name (get, post, put, delete, paginate)
        url: Absolute target URL
        body: JSON body (write verbs only)
        options: Transport pass-through options
        include_body: Whether the body belongs in the snapshot

    Returns:
        Snapshot dictionary (not yet redacted)
    """
    snapshot: Dict[str, Any] = {"method": method, "url": url}
    if include_body:
        snapshot["body"] = body
    snapshot["options"] = dict(options or {})
    return snapshot


def log_request_debug(
    logger: Any,
    mask_options: MaskOptions,
    method: str,
    url: str,
    body: Any = None,
    options: Optional[Dict[str, Any]] = None,
    include_body: bool = False,
) -> None:
    """Log the redacted snapshot of an outgoing call at debug level."""
    snapshot = build_request_snapshot(method, url, body, options, include_body)
    logger.debug("HTTP request", extra={"data": mask_object(snapshot, mask_options)})


def log_response_debug(
    logger: Any,
    method: str,
    url: str,
    status_code: int,
    start_time: float,
) -> None:
    """Log status and duration of a completed call at debug level."""
    logger.debug(
        "HTTP response",
        extra={
            "data": {
                "method": method,
                "url": url,
                "statusCode": status_code,
                "durationMs": calculate_duration_ms(start_time),
            }
        },
    )


def log_request_error(
    logger: Any,
    mask_options: MaskOptions,
    method: str,
    url: str,
    error: Exception,
    start_time: float,
) -> None:
    """
    Log a failed call at error level.

    The error body is redacted with the same rules as request data. Callers
    re-raise the error afterwards.
    """
    status_code: Optional[int] = getattr(error, "status_code", None)
    error_body: Union[Dict[str, Any], Any] = getattr(error, "error_body", None)
    logger.error(
        "HTTP request failed",
        extra={
            "data": {
                "method": method,
                "url": url,
                "statusCode": status_code,
                "durationMs": calculate_duration_ms(start_time),
                "error": f"{type(error).__name__}: {error}",
                "errorBody": mask_object(error_body, mask_options),
            }
        },
    )
