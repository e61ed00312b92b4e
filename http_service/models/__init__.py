"""Pydantic models for http-service configuration and responses."""

from .config import CircuitBreakerConfig, HttpServiceConfig, HttpServiceOptions
from .pagination import Meta, PaginatedListResponse
from .response import HttpServiceResponse

__all__ = [
    "CircuitBreakerConfig",
    "HttpServiceConfig",
    "HttpServiceOptions",
    "HttpServiceResponse",
    "Meta",
    "PaginatedListResponse",
]
