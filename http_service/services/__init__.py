"""Token handling and request interceptors."""

from .interceptors import BearerAuthInterceptor, Interceptor
from .token_cache import BearerTokenCache, GetBearerTokenFn

__all__ = [
    "BearerAuthInterceptor",
    "BearerTokenCache",
    "GetBearerTokenFn",
    "Interceptor",
]
