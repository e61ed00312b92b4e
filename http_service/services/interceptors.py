"""
Request interceptors.

An interceptor is a two-stage hook around every transport send:

- ``prepare(request)`` returns the request to send (a copy, never mutated),
- ``handle(request, response)`` returns a replacement request to re-send once,
  or None to keep the response.
"""

import logging
from typing import Awaitable, Callable, Optional

from ..errors import TokenAcquisitionError
from ..utils.transport import TransportRequest, TransportResponse
from .token_cache import BearerTokenCache

logger = logging.getLogger(__name__)

UNAUTHORIZED = 401


class Interceptor:
    """Base interceptor: passes requests and responses through untouched."""

    async def prepare(self, request: TransportRequest) -> TransportRequest:
        return request

    async def handle(
        self, request: TransportRequest, response: TransportResponse
    ) -> Optional[TransportRequest]:
        return None


class BearerAuthInterceptor(Interceptor):
    """
    Attaches ``Authorization: Bearer <token>`` and renews the token on 401.

    Callback failures are raised as ``TokenAcquisitionError`` so that the
    surrounding policy does not retry them.
    """

    def __init__(self, token_cache: BearerTokenCache):
        """
        Initialize auth interceptor.

        Args:
            token_cache: Cache holding the bearer token
        """
        self.token_cache = token_cache

    @staticmethod
    def _auth_header(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    async def _acquire(fetch: Callable[[], Awaitable[str]]) -> str:
        try:
            return await fetch()
        except Exception as e:
            raise TokenAcquisitionError(e) from e

    async def prepare(self, request: TransportRequest) -> TransportRequest:
        """Attach the cached token, fetching it first if absent."""
        token = await self._acquire(self.token_cache.get_token)
        return request.with_headers(self._auth_header(token))

    async def handle(
        self, request: TransportRequest, response: TransportResponse
    ) -> Optional[TransportRequest]:
        """Refresh the token and ask for a single re-send when unauthorized."""
        if response.status_code != UNAUTHORIZED:
            return None

        logger.debug(
            "Unauthorized response, retrying with a fresh token",
            extra={"data": {"method": request.method, "url": str(request.url)}},
        )
        token = await self._acquire(self.token_cache.invalidate_and_refresh)
        return request.with_headers(self._auth_header(token))
