"""
Pagination utilities.

``HttpService.paginate`` asks a ``Paginator`` where the first page lives,
which items a page holds, and where the next page lives. Two strategies ship:

- ``PageNumberPaginator``: ``page`` / ``page_size`` query params, reading
  ``{"meta": {...}, "data": [...]}`` envelopes or bare lists,
- ``LinkHeaderPaginator``: follows ``Link: <...>; rel="next"`` headers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Union

import httpx

from ..models.pagination import Meta
from .transport import TransportResponse

DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class PageRequest:
    """Where to fetch one page from."""

    url: Union[str, httpx.URL]
    params: Dict[str, Any] = field(default_factory=dict)


class Paginator(Protocol):
    """Strategy deciding how pages are requested and read."""

    def first_page(self, url: httpx.URL, params: Dict[str, Any]) -> PageRequest: ...

    def items(self, response: TransportResponse) -> List[Any]: ...

    def next_page(
        self, request: PageRequest, response: TransportResponse, items: List[Any]
    ) -> Optional[PageRequest]: ...


def extract_items(body: Any) -> List[Any]:
    """
    Pull the item list out of a page body.

    Args:
        body: Decoded page body (list, ``{"data": [...]}`` envelope or None)

    Returns:
        Items of the page, empty when the body holds none
    """
    if isinstance(body, list):
        return body
    if isinstance(body, dict) and isinstance(body.get("data"), list):
        return body["data"]
    return []


class PageNumberPaginator:
    """Page-number pagination using ``page`` and ``page_size`` query params."""

    def __init__(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_param: str = "page",
        size_param: str = "page_size",
        start_page: int = 1,
    ):
        self.page_size = max(1, page_size)
        self.page_param = page_param
        self.size_param = size_param
        self.start_page = start_page

    def first_page(self, url: httpx.URL, params: Dict[str, Any]) -> PageRequest:
        return PageRequest(
            url=url,
            params={**params, self.page_param: self.start_page, self.size_param: self.page_size},
        )

    def items(self, response: TransportResponse) -> List[Any]:
        return extract_items(response.body)

    def next_page(
        self, request: PageRequest, response: TransportResponse, items: List[Any]
    ) -> Optional[PageRequest]:
        body = response.body
        if isinstance(body, dict) and isinstance(body.get("meta"), dict):
            meta = Meta.model_validate(body["meta"])
            if not meta.has_next or not items:
                return None
            next_page = meta.current_page + 1
        else:
            if len(items) < self.page_size:
                return None
            next_page = int(request.params.get(self.page_param, self.start_page)) + 1

        return PageRequest(url=request.url, params={**request.params, self.page_param: next_page})


class LinkHeaderPaginator:
    """Follows RFC 8288 ``rel="next"`` links until none is left."""

    def first_page(self, url: httpx.URL, params: Dict[str, Any]) -> PageRequest:
        return PageRequest(url=url, params=dict(params))

    def items(self, response: TransportResponse) -> List[Any]:
        return extract_items(response.body)

    def next_page(
        self, request: PageRequest, response: TransportResponse, items: List[Any]
    ) -> Optional[PageRequest]:
        link = response.links.get("next", {}).get("url")
        if not link:
            return None
        # the next link already carries its query string
        base = httpx.URL(response.url) if response.url else httpx.URL(str(request.url))
        return PageRequest(url=base.join(link), params={})
