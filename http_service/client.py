"""
HttpService: JSON HTTP client for a single base endpoint.

Every call goes through the same steps:

1. resolve the resilience policy (per-request override, client default, or
   execute-once) and the transport pass-through options,
2. log a redacted snapshot of the call at debug level,
3. make sure a bearer token is cached (when a token callback is configured),
4. run the send pipeline through the policy: ``prepare`` stages (attach the
   bearer token), transport send, ``handle`` stages (re-send once with a fresh
   token on 401), raise for non-2xx,
5. normalize the result into an ``HttpServiceResponse``, optionally coerced
   into a DTO.
"""

import time
from typing import Any, AsyncIterator, Dict, List, Optional, Type, TypeVar, Union

import httpx

from .errors import HttpStatusError, TokenAcquisitionError
from .models.config import HttpServiceConfig, HttpServiceOptions
from .models.response import HttpServiceResponse
from .resilience.executor import ResilienceExecutor
from .resilience.policy import ResiliencePolicy
from .services.interceptors import BearerAuthInterceptor, Interceptor
from .services.token_cache import BearerTokenCache, GetBearerTokenFn
from .utils.dto import dto_to_plain, plain_to_dto
from .utils.http_client_logging import log_request_debug, log_request_error, log_response_debug
from .utils.logger import get_logger
from .utils.pagination import PageNumberPaginator, Paginator
from .utils.transport import HttpxTransport, TransportRequest, TransportResponse

T = TypeVar("T")

PathLike = Union[str, httpx.URL]


class HttpService:
    """
    JSON HTTP client with bearer-token renewal, resilience policies and
    redacted diagnostic logging.

    Example:
        >>> async def fetch_token() -> str:
        ...     return "token"
        >>> service = HttpService(
        ...     "https://api.example.com/",
        ...     fetch_token,
        ...     HttpServiceOptions(resilience_policy=RetryPolicy(max_attempts=3)),
        ... )
        >>> response = await service.get("users/1", UserDto)
    """

    def __init__(
        self,
        base_url: str,
        get_auth_token: Optional[GetBearerTokenFn] = None,
        options: Optional[HttpServiceOptions] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL every path resolves against
            get_auth_token: Async callback returning a bearer token; None disables auth
            options: Client-wide options
        """
        self.base_url = base_url
        self.get_auth_token = get_auth_token
        self.options = options or HttpServiceOptions()
        self.logger = self.options.logger or get_logger(self.options.log_level)
        self.mask_options = self.options.mask_options

        self.transport = HttpxTransport(
            base_url,
            headers=self.options.headers,
            timeout=self.options.timeout,
            transport=self.options.transport,
            client_options=self.options.client_options,
        )
        self.default_headers = self.transport.headers

        self.token_cache: Optional[BearerTokenCache] = None
        self.interceptors: List[Interceptor] = []
        if get_auth_token is not None:
            self.token_cache = BearerTokenCache(
                get_auth_token,
                coalesce=self.options.coalesce_token_fetch,
                refresh_expired=self.options.refresh_expired_tokens,
            )
            self.interceptors.append(BearerAuthInterceptor(self.token_cache))
        self.interceptors.extend(self.options.interceptors)

        self.executor = ResilienceExecutor(
            default_policy=self.options.resilience_policy,
            logger=self.logger if self.options.log_resilience_events else None,
        )

    @classmethod
    def from_config(
        cls, config: HttpServiceConfig, get_auth_token: Optional[GetBearerTokenFn] = None
    ) -> "HttpService":
        """Create a client from a loaded HttpServiceConfig."""
        return cls(config.base_url, get_auth_token, config.options)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.transport.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def url_from_path(self, path: PathLike) -> httpx.URL:
        """Resolve ``path`` against the base URL (absolute URLs pass through)."""
        return httpx.URL(self.base_url).join(path)

    async def get(
        self,
        path: PathLike,
        dto: Optional[Type[T]] = None,
        *,
        resilience_policy: Optional[ResiliencePolicy] = None,
        **options: Any,
    ) -> HttpServiceResponse[Any]:
        """
        Make GET request.

        Args:
            path: Path relative to the base URL, or an absolute URL
            dto: Optional type the body is coerced into
            resilience_policy: Per-request policy overriding the client default
            **options: httpx request options (headers, params, timeout, ...)

        Returns:
            HttpServiceResponse with data and status code

        Raises:
            HttpStatusError: If the final response is not 2xx
            ConnectionError: If no response was received
        """
        return await self._request(
            "GET", path, dto=dto, resilience_policy=resilience_policy, **options
        )

    async def post(
        self,
        path: PathLike,
        json: Any = None,
        dto: Optional[Type[T]] = None,
        *,
        resilience_policy: Optional[ResiliencePolicy] = None,
        **options: Any,
    ) -> HttpServiceResponse[Any]:
        """
        Make POST request.

        Args:
            path: Path relative to the base URL, or an absolute URL
            json: Request body (dicts, lists or pydantic models)
            dto: Optional type the body is coerced into
            resilience_policy: Per-request policy overriding the client default
            **options: httpx request options

        Returns:
            HttpServiceResponse with data and status code
        """
        return await self._request(
            "POST",
            path,
            json=json,
            dto=dto,
            resilience_policy=resilience_policy,
            include_body=True,
            **options,
        )

    async def put(
        self,
        path: PathLike,
        json: Any = None,
        dto: Optional[Type[T]] = None,
        *,
        resilience_policy: Optional[ResiliencePolicy] = None,
        **options: Any,
    ) -> HttpServiceResponse[Any]:
        """
        Make PUT request.

        Args:
            path: Path relative to the base URL, or an absolute URL
            json: Request body (dicts, lists or pydantic models)
            dto: Optional type the body is coerced into
            resilience_policy: Per-request policy overriding the client default
            **options: httpx request options

        Returns:
            HttpServiceResponse with data and status code
        """
        return await self._request(
            "PUT",
            path,
            json=json,
            dto=dto,
            resilience_policy=resilience_policy,
            include_body=True,
            **options,
        )

    async def delete(
        self,
        path: PathLike,
        dto: Optional[Type[T]] = None,
        *,
        resilience_policy: Optional[ResiliencePolicy] = None,
        **options: Any,
    ) -> HttpServiceResponse[Any]:
        """
        Make DELETE request.

        Args:
            path: Path relative to the base URL, or an absolute URL
            dto: Optional type the body is coerced into
            resilience_policy: Per-request policy overriding the client default
            **options: httpx request options

        Returns:
            HttpServiceResponse with data and status code
        """
        return await self._request(
            "DELETE", path, dto=dto, resilience_policy=resilience_policy, **options
        )

    async def paginate(
        self,
        path: PathLike,
        dto: Optional[Type[T]] = None,
        *,
        paginator: Optional[Paginator] = None,
        max_pages: Optional[int] = None,
        resilience_policy: Optional[ResiliencePolicy] = None,
        **options: Any,
    ) -> AsyncIterator[Any]:
        """
        Iterate over the items of a paginated collection.

        Pages are fetched lazily, one GET per page, each through the same auth
        and resilience handling as ``get``. A page is fully read before its
        items are yielded, so leaving the loop early holds no connection open.
        The iterator is forward-only and cannot be restarted.

        Args:
            path: Collection path
            dto: Optional type each item is coerced into
            paginator: Pagination strategy (default: PageNumberPaginator)
            max_pages: Stop after this many pages
            resilience_policy: Per-request policy used for every page
            **options: httpx request options; ``params`` are sent with every page

        Yields:
            Items across all pages
        """
        paginator = paginator or PageNumberPaginator()
        url = self.url_from_path(path)
        policy = self.executor.resolve_policy(resilience_policy)
        transport_options = dict(options)
        params = dict(transport_options.pop("params", None) or {})
        log_request_debug(self.logger, self.mask_options, "paginate", str(url), options=options)

        page_request = paginator.first_page(url, params)
        pages = 0
        while page_request is not None:
            page_options = dict(transport_options)
            if page_request.params:
                page_options["params"] = page_request.params
            request = self._build_request("GET", page_request.url, None, page_options)
            response = await self._execute(request, policy)
            pages += 1

            items = paginator.items(response)
            for item in plain_to_dto(items, dto):
                yield item

            if max_pages is not None and pages >= max_pages:
                return
            page_request = paginator.next_page(page_request, response, items)

    def make_response(
        self, response: TransportResponse, dto: Optional[Type[T]] = None
    ) -> HttpServiceResponse[Any]:
        """
        Normalize a transport response.

        Raises:
            pydantic.ValidationError: If the body does not fit ``dto``
        """
        return HttpServiceResponse(
            data=plain_to_dto(response.body, dto),
            status_code=response.status_code,
            headers=response.headers,
        )

    async def _request(
        self,
        method: str,
        path: PathLike,
        json: Any = None,
        dto: Optional[Type[T]] = None,
        resilience_policy: Optional[ResiliencePolicy] = None,
        include_body: bool = False,
        **options: Any,
    ) -> HttpServiceResponse[Any]:
        url = self.url_from_path(path)
        body = dto_to_plain(json)
        policy = self.executor.resolve_policy(resilience_policy)
        log_request_debug(
            self.logger, self.mask_options, method.lower(), str(url), body, options, include_body
        )

        request = self._build_request(method, url, body, options)
        response = await self._execute(request, policy)
        return self.make_response(response, dto)

    @staticmethod
    def _build_request(
        method: str, url: PathLike, body: Any, options: Dict[str, Any]
    ) -> TransportRequest:
        transport_options = dict(options)
        headers = dict(transport_options.pop("headers", None) or {})
        return TransportRequest(
            method=method, url=url, headers=headers, json=body, options=transport_options
        )

    async def _execute(
        self, request: TransportRequest, policy: ResiliencePolicy
    ) -> TransportResponse:
        """Run the send pipeline through ``policy``, logging the outcome."""
        start_time = time.perf_counter()
        url = str(request.url)
        try:
            if self.token_cache is not None:
                # acquisition failures surface here, outside the policy's retries
                await self.token_cache.get_token()
            response = await self.executor.execute(lambda: self._send(request), policy)
        except TokenAcquisitionError as error:
            log_request_error(
                self.logger, self.mask_options, request.method, url, error.original, start_time
            )
            raise error.original
        except Exception as error:
            log_request_error(
                self.logger, self.mask_options, request.method, url, error, start_time
            )
            raise

        log_response_debug(self.logger, request.method, url, response.status_code, start_time)
        return response

    async def _send(self, request: TransportRequest) -> TransportResponse:
        """One attempt: prepare stages, send, handle stages, status check."""
        prepared = request
        for interceptor in self.interceptors:
            prepared = await interceptor.prepare(prepared)

        response = await self.transport.send(prepared)

        for interceptor in self.interceptors:
            retry_request = await interceptor.handle(prepared, response)
            if retry_request is not None:
                # at most one substitution per attempt
                response = await self.transport.send(retry_request)
                break

        if not response.is_success:
            raise HttpStatusError(
                f"HTTP {response.status_code} for {request.method} {request.url}",
                status_code=response.status_code,
                error_body=response.body,
                response=response,
            )
        return response
