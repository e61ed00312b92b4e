"""
Bearer token cache.

Holds the single bearer token used by an ``HttpService`` instance. The token is
fetched lazily through a user-supplied async callback and replaced whenever
the endpoint rejects it.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..utils.jwt_tools import is_token_expired

logger = logging.getLogger(__name__)

GetBearerTokenFn = Callable[[], Awaitable[str]]


class BearerTokenCache:
    """
    Lazily fetched, instance-owned bearer token.

    Without ``coalesce`` two requests that find the cache empty at the same
    time both call the acquisition callback and the last write wins. With
    ``coalesce=True`` concurrent callers share one in-flight fetch.
    """

    def __init__(
        self,
        fetch_token: GetBearerTokenFn,
        coalesce: bool = False,
        refresh_expired: bool = False,
        expiry_leeway: float = 0.0,
    ):
        """
        Initialize the token cache.

        Args:
            fetch_token: Zero-argument async callback returning a token string
            coalesce: Share one in-flight fetch between concurrent callers
            refresh_expired: Treat cached JWTs whose ``exp`` has passed as absent
            expiry_leeway: Seconds before ``exp`` at which a JWT counts as expired
        """
        self._fetch_token = fetch_token
        self.coalesce = coalesce
        self.refresh_expired = refresh_expired
        self.expiry_leeway = expiry_leeway
        self._token: Optional[str] = None
        self._pending: Optional["asyncio.Future[str]"] = None

    @property
    def token(self) -> Optional[str]:
        """Currently cached token, if any."""
        return self._token

    def clear(self) -> None:
        """Drop the cached token so the next request fetches a new one."""
        self._token = None

    def _is_usable(self, token: Optional[str]) -> bool:
        if not token:
            return False
        if self.refresh_expired and is_token_expired(token, self.expiry_leeway):
            logger.debug("Cached bearer token expired, fetching a new one")
            return False
        return True

    async def get_token(self) -> str:
        """
        Return the cached token, fetching it first if absent.

        Returns:
            Bearer token string

        Raises:
            Exception: Whatever the acquisition callback raises
        """
        if self._is_usable(self._token):
            return self._token  # type: ignore[return-value]
        return await self._refresh()

    async def invalidate_and_refresh(self) -> str:
        """
        Fetch a new token unconditionally and overwrite the cache.

        Returns:
            The new bearer token

        Raises:
            Exception: Whatever the acquisition callback raises; the cache keeps its old value
        """
        logger.debug("Refreshing bearer token")
        return await self._refresh()

    async def _refresh(self) -> str:
        if not self.coalesce:
            return await self._fetch_and_store()

        if self._pending is None:
            pending = asyncio.ensure_future(self._fetch_and_store())
            pending.add_done_callback(self._clear_pending)
            self._pending = pending
        # shield: one cancelled caller must not cancel the fetch others await
        return await asyncio.shield(self._pending)

    async def _fetch_and_store(self) -> str:
        token = await self._fetch_token()
        self._token = token
        return token

    def _clear_pending(self, future: "asyncio.Future[str]") -> None:
        if self._pending is future:
            self._pending = None
