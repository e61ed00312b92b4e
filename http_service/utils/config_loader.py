"""
Configuration loader utility.

Loads client configuration from environment variables (and a ``.env`` file
when present).
"""

import os
from typing import Any, Dict, List

from dotenv import load_dotenv

from ..errors import ConfigurationError
from ..models.config import HttpServiceConfig, HttpServiceOptions
from ..resilience.policy import RetryPolicy

_LOG_LEVELS = ("debug", "info", "warn", "error")


def _split_names(value: str | None) -> List[str]:
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


def load_config() -> HttpServiceConfig:
    """
    Load configuration from environment variables with defaults.

    Required environment variables:
    - HTTP_SERVICE_BASE_URL

    Optional environment variables:
    - HTTP_SERVICE_TIMEOUT (seconds, default: 30)
    - HTTP_SERVICE_LOG_LEVEL (debug, info, warn, error; default: info)
    - HTTP_SERVICE_HIDE_PROPERTIES (comma-separated field names)
    - HTTP_SERVICE_MASK_PROPERTIES (comma-separated field names)
    - HTTP_SERVICE_RETRY_ATTEMPTS (> 1 enables a default RetryPolicy)

    Returns:
        HttpServiceConfig instance

    Raises:
        ConfigurationError: If a variable is missing or malformed
    """
    load_dotenv()

    base_url = os.environ.get("HTTP_SERVICE_BASE_URL") or ""
    if not base_url:
        raise ConfigurationError("HTTP_SERVICE_BASE_URL environment variable is required")

    options: Dict[str, Any] = {
        "hide_properties": _split_names(os.environ.get("HTTP_SERVICE_HIDE_PROPERTIES")),
        "mask_properties": _split_names(os.environ.get("HTTP_SERVICE_MASK_PROPERTIES")),
    }

    log_level = os.environ.get("HTTP_SERVICE_LOG_LEVEL", "info").lower()
    options["log_level"] = log_level if log_level in _LOG_LEVELS else "info"

    timeout = os.environ.get("HTTP_SERVICE_TIMEOUT")
    if timeout:
        try:
            options["timeout"] = float(timeout)
        except ValueError as e:
            raise ConfigurationError(f"HTTP_SERVICE_TIMEOUT must be a number, got {timeout!r}") from e

    retry_attempts = os.environ.get("HTTP_SERVICE_RETRY_ATTEMPTS")
    if retry_attempts:
        try:
            attempts = int(retry_attempts)
        except ValueError as e:
            raise ConfigurationError(
                f"HTTP_SERVICE_RETRY_ATTEMPTS must be an integer, got {retry_attempts!r}"
            ) from e
        if attempts > 1:
            options["resilience_policy"] = RetryPolicy(max_attempts=attempts)

    return HttpServiceConfig(base_url=base_url, options=HttpServiceOptions(**options))
