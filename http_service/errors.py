"""
Client exceptions and error handling.

This module defines custom exceptions raised by the http-service client.
"""

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .utils.transport import TransportResponse


class HttpServiceError(Exception):
    """Base exception for http-service errors."""

    def __init__(
        self, message: str, status_code: int | None = None, error_body: Any = None
    ):
        """
        Initialize http-service error.

        Args:
            message: Error message
            status_code: HTTP status code if applicable
            error_body: Decoded error response body, if any
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_body = error_body


class HttpStatusError(HttpServiceError):
    """Raised when the endpoint answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_body: Any = None,
        response: Optional["TransportResponse"] = None,
    ):
        super().__init__(message, status_code=status_code, error_body=error_body)
        self.response = response


class ConnectionError(HttpServiceError):
    """Raised when the request never produced a response (DNS, connect, timeout)."""

    pass


class ConfigurationError(HttpServiceError):
    """Raised when configuration is invalid."""

    pass


class BrokenCircuitError(HttpServiceError):
    """Raised by a circuit breaker policy while the circuit is open."""

    pass


class TokenAcquisitionError(HttpServiceError):
    """
    Carries a token callback failure through the resilience policy.

    Shipped policies neither retry nor count it; ``HttpService`` re-raises
    ``original`` so callers see the callback's own exception.
    """

    def __init__(self, original: BaseException):
        super().__init__(f"Bearer token acquisition failed: {original}")
        self.original = original
