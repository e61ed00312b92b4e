"""
HTTP transport built on httpx.

The transport performs the actual network call for a prepared request and
returns the status code plus the decoded JSON body. It applies no auth, retry
or logging of its own; ``HttpService`` layers those on top.
"""

import asyncio
import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Union

import httpx

from ..errors import ConnectionError, HttpStatusError

DEFAULT_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


@dataclass(frozen=True)
class TransportRequest:
    """A single outbound request, copied rather than mutated by pipeline stages."""

    method: str
    url: Union[str, httpx.URL]
    headers: Dict[str, str] = field(default_factory=dict)
    json: Any = None
    options: Dict[str, Any] = field(default_factory=dict)

    def with_headers(self, headers: Dict[str, str]) -> "TransportRequest":
        """Return a copy with ``headers`` merged over the current ones."""
        return replace(self, headers={**self.headers, **headers})

    def with_url(self, url: Union[str, httpx.URL]) -> "TransportRequest":
        """Return a copy targeting ``url``."""
        return replace(self, url=url)


@dataclass(frozen=True)
class TransportResponse:
    """Status code, decoded body and headers of a completed call."""

    status_code: int
    body: Any
    headers: Dict[str, str] = field(default_factory=dict)
    links: Dict[str, Dict[str, str]] = field(default_factory=dict)
    url: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def decode_body(response: httpx.Response) -> Any:
    """
    Decode a response body as JSON.

    Empty bodies decode to ``None``. Error responses that are not JSON keep
    their text so the status error stays informative.

    Args:
        response: httpx response with its body already read

    Returns:
        Decoded JSON value, text, or None

    Raises:
        HttpStatusError: If a 2xx response carries a body that is not JSON
    """
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        if response.is_success:
            raise HttpStatusError(
                f"Invalid JSON in response body: {e}",
                status_code=response.status_code,
                error_body=response.text,
            ) from e
        return response.text


class HttpxTransport:
    """Transport backed by a lazily created ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client_options: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize transport.

        Args:
            base_url: Base URL every relative request resolves against
            headers: Default headers sent with every request
            timeout: Default timeout in seconds (None disables it)
            transport: Optional custom httpx transport (e.g. ``httpx.MockTransport``)
            client_options: Extra keyword arguments for ``httpx.AsyncClient``
        """
        self.base_url = base_url
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}
        self.timeout = timeout
        self.transport = transport
        self.client_options = dict(client_options or {})
        self.client: Optional[httpx.AsyncClient] = None

    def _initialize_client(self) -> httpx.AsyncClient:
        """Create the HTTP client if not already created."""
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
                transport=self.transport,
                **self.client_options,
            )
        return self.client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self.client:
            try:
                await self.client.aclose()
            except (RuntimeError, asyncio.CancelledError):
                # Event loop closed or cancelled - that's okay during teardown
                pass
            finally:
                self.client = None

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def send(self, request: TransportRequest) -> TransportResponse:
        """
        Send a request and decode the response.

        Non-2xx responses are returned, not raised, so callers can react to
        them (e.g. refresh a token on 401).

        Args:
            request: Prepared request

        Returns:
            TransportResponse with decoded body

        Raises:
            ConnectionError: If no response was received
            HttpStatusError: If a 2xx body is not valid JSON
        """
        client = self._initialize_client()
        kwargs = dict(request.options)
        if request.headers:
            kwargs["headers"] = request.headers
        if request.json is not None:
            kwargs["json"] = request.json

        try:
            response = await client.request(request.method, request.url, **kwargs)
        except httpx.RequestError as e:
            raise ConnectionError(f"Request failed: {str(e)}") from e

        return TransportResponse(
            status_code=response.status_code,
            body=decode_body(response),
            headers=dict(response.headers),
            links={
                str(rel): {str(k): str(v) for k, v in link.items()}
                for rel, link in response.links.items()
            },
            url=str(response.url),
        )
