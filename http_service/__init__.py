"""
http-service - async JSON HTTP client for a single base endpoint.

Handles bearer-token lifecycle (lazy fetch, caching, renewal on 401),
pluggable resilience policies around every call, and redacted diagnostic
logging.
"""

from .client import HttpService
from .errors import (
    BrokenCircuitError,
    ConfigurationError,
    ConnectionError,
    HttpServiceError,
    HttpStatusError,
    TokenAcquisitionError,
)
from .models.config import CircuitBreakerConfig, HttpServiceConfig, HttpServiceOptions
from .models.pagination import Meta, PaginatedListResponse
from .models.response import HttpServiceResponse
from .resilience import (
    CircuitBreakerPolicy,
    CircuitState,
    NoopPolicy,
    PolicyEvent,
    PolicyWrap,
    ResilienceExecutor,
    ResiliencePolicy,
    RetryPolicy,
    wrap,
)
from .services.interceptors import BearerAuthInterceptor, Interceptor
from .services.token_cache import BearerTokenCache, GetBearerTokenFn
from .utils.config_loader import load_config
from .utils.data_masker import MaskOptions, mask_object
from .utils.dto import dto_to_plain, plain_to_dto
from .utils.logger import get_logger
from .utils.pagination import LinkHeaderPaginator, PageNumberPaginator, PageRequest, Paginator

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "HttpService",
    "HttpServiceOptions",
    "HttpServiceConfig",
    "HttpServiceResponse",
    "CircuitBreakerConfig",
    "Meta",
    "PaginatedListResponse",
    "HttpServiceError",
    "HttpStatusError",
    "ConnectionError",
    "ConfigurationError",
    "BrokenCircuitError",
    "TokenAcquisitionError",
    "ResiliencePolicy",
    "ResilienceExecutor",
    "PolicyEvent",
    "NoopPolicy",
    "RetryPolicy",
    "PolicyWrap",
    "wrap",
    "CircuitBreakerPolicy",
    "CircuitState",
    "BearerTokenCache",
    "GetBearerTokenFn",
    "Interceptor",
    "BearerAuthInterceptor",
    "MaskOptions",
    "mask_object",
    "plain_to_dto",
    "dto_to_plain",
    "get_logger",
    "load_config",
    "Paginator",
    "PageRequest",
    "PageNumberPaginator",
    "LinkHeaderPaginator",
]
