"""
Unit tests for pagination utilities and HttpService.paginate.
"""

from unittest.mock import AsyncMock

import httpx
import pytest
from pydantic import BaseModel
from tenacity import wait_none

from http_service import (
    HttpStatusError,
    LinkHeaderPaginator,
    PageNumberPaginator,
    PaginatedListResponse,
    RetryPolicy,
)
from http_service.models.pagination import Meta
from http_service.utils.pagination import PageRequest, extract_items
from http_service.utils.transport import TransportResponse


class Item(BaseModel):
    id: int


def page(items, current_page, page_size, total_items):
    return httpx.Response(
        200,
        json={
            "meta": {
                "totalItems": total_items,
                "currentPage": current_page,
                "pageSize": page_size,
                "type": "item",
            },
            "data": items,
        },
    )


async def collect(iterator):
    return [item async for item in iterator]


class TestPaginationModels:
    """Page envelope models and item extraction."""

    def test_meta_totals(self):
        """Meta carries counts and derives page totals."""
        meta = Meta(totalItems=45, currentPage=2, pageSize=20, type="user")

        assert meta.total_items == 45
        assert meta.type == "user"
        assert meta.total_pages == 3
        assert meta.has_next is True

    def test_meta_last_page(self):
        """The last page reports no next page."""
        meta = Meta(totalItems=45, currentPage=3, pageSize=20)

        assert meta.has_next is False

    @pytest.mark.asyncio
    async def test_single_page_as_dto(self, make_service, recorder):
        """A whole page can be fetched as a typed envelope."""
        recorder.queue(page([{"id": 1}, {"id": 2}], 1, 2, 10))
        service = make_service()

        response = await service.get("items", PaginatedListResponse[Item])

        assert response.data.meta.total_items == 10
        assert response.data.meta.has_next is True
        assert response.data.data == [Item(id=1), Item(id=2)]

    def test_extract_items(self):
        """Bare lists and data envelopes both yield items."""
        assert extract_items([1, 2]) == [1, 2]
        assert extract_items({"data": [3]}) == [3]
        assert extract_items({"items": [3]}) == []
        assert extract_items(None) == []


class TestPageNumberPaginator:
    """Page-number strategy."""

    def test_first_page_keeps_caller_params(self):
        """Caller params travel along with page and size."""
        paginator = PageNumberPaginator(page_size=50)

        first = paginator.first_page(httpx.URL("https://api.example.com/items"), {"q": "x"})

        assert first.params == {"q": "x", "page": 1, "page_size": 50}

    def test_next_page_from_meta(self):
        """Meta decides whether another page exists."""
        paginator = PageNumberPaginator(page_size=2)
        request = PageRequest(url="https://api.example.com/items", params={"page": 1, "page_size": 2})
        body = {"meta": {"totalItems": 3, "currentPage": 1, "pageSize": 2}, "data": [1, 2]}

        following = paginator.next_page(request, TransportResponse(200, body), [1, 2])

        assert following.params["page"] == 2

    def test_short_bare_page_ends(self):
        """A bare list shorter than the page size is the last page."""
        paginator = PageNumberPaginator(page_size=3)
        request = PageRequest(url="https://api.example.com/items", params={"page": 4})

        assert paginator.next_page(request, TransportResponse(200, [1]), [1]) is None

    def test_custom_param_names(self):
        """Param names are configurable."""
        paginator = PageNumberPaginator(page_size=10, page_param="p", size_param="limit", start_page=0)

        first = paginator.first_page(httpx.URL("https://api.example.com/items"), {})

        assert first.params == {"p": 0, "limit": 10}


class TestHttpServicePaginate:
    """HttpService.paginate end to end."""

    @pytest.mark.asyncio
    async def test_meta_envelope_pages(self, make_service, recorder):
        """Pages are fetched until meta says there is no next page."""
        recorder.queue(
            page([{"id": 1}, {"id": 2}], 1, 2, 3),
            page([{"id": 3}], 2, 2, 3),
        )
        service = make_service()

        items = await collect(
            service.paginate("items", paginator=PageNumberPaginator(page_size=2), params={"q": "x"})
        )

        assert items == [{"id": 1}, {"id": 2}, {"id": 3}]
        assert recorder.call_count == 2
        first, second = recorder.requests
        assert first.url.params["page"] == "1"
        assert first.url.params["page_size"] == "2"
        assert first.url.params["q"] == "x"
        assert second.url.params["page"] == "2"
        assert second.url.params["q"] == "x"

    @pytest.mark.asyncio
    async def test_bare_list_pages(self, make_service, recorder):
        """Bare list pages stop once a page comes back short."""
        recorder.queue(
            httpx.Response(200, json=[{"id": 1}, {"id": 2}]),
            httpx.Response(200, json=[{"id": 3}]),
        )
        service = make_service()

        items = await collect(service.paginate("items", paginator=PageNumberPaginator(page_size=2)))

        assert [item["id"] for item in items] == [1, 2, 3]
        assert recorder.call_count == 2

    @pytest.mark.asyncio
    async def test_empty_first_page(self, make_service, recorder):
        """An empty collection yields nothing after one request."""
        recorder.queue(page([], 1, 20, 0))
        service = make_service()

        assert await collect(service.paginate("items")) == []
        assert recorder.call_count == 1

    @pytest.mark.asyncio
    async def test_link_header_pages(self, make_service, recorder):
        """Link headers are followed, relative targets resolved against the page URL."""
        recorder.queue(
            httpx.Response(
                200,
                json=[{"id": 1}],
                headers={"Link": '<https://api.example.com/items?cursor=abc>; rel="next"'},
            ),
            httpx.Response(200, json=[{"id": 2}], headers={"Link": '</items?cursor=def>; rel="next"'}),
            httpx.Response(200, json=[{"id": 3}]),
        )
        service = make_service()

        items = await collect(service.paginate("items", paginator=LinkHeaderPaginator()))

        assert [item["id"] for item in items] == [1, 2, 3]
        urls = [str(request.url) for request in recorder.requests]
        assert urls == [
            "https://api.example.com/items",
            "https://api.example.com/items?cursor=abc",
            "https://api.example.com/items?cursor=def",
        ]

    @pytest.mark.asyncio
    async def test_items_coerced_into_dto(self, make_service, recorder):
        """Each item is coerced into the DTO."""
        recorder.queue(page([{"id": 1}], 1, 20, 1))
        service = make_service()

        items = await collect(service.paginate("items", Item))

        assert items == [Item(id=1)]

    @pytest.mark.asyncio
    async def test_early_exit_fetches_no_more_pages(self, make_service, recorder):
        """Leaving the loop stops fetching."""
        recorder.queue(page([{"id": 1}, {"id": 2}], 1, 2, 10))
        service = make_service()

        iterator = service.paginate("items", paginator=PageNumberPaginator(page_size=2))
        async for item in iterator:
            assert item == {"id": 1}
            break
        await iterator.aclose()

        assert recorder.call_count == 1

    @pytest.mark.asyncio
    async def test_max_pages(self, make_service, recorder):
        """max_pages caps the number of requests."""
        recorder.queue(
            page([{"id": 1}], 1, 1, 5),
            page([{"id": 2}], 2, 1, 5),
        )
        service = make_service()

        items = await collect(
            service.paginate("items", paginator=PageNumberPaginator(page_size=1), max_pages=2)
        )

        assert items == [{"id": 1}, {"id": 2}]
        assert recorder.call_count == 2

    @pytest.mark.asyncio
    async def test_pages_use_auth_and_policy(self, make_service, recorder):
        """Every page runs through token renewal and the resilience policy."""
        recorder.queue(
            page([{"id": 1}], 1, 1, 2),
            httpx.Response(401),
            httpx.Response(500),
            page([{"id": 2}], 2, 1, 2),
        )
        get_auth_token = AsyncMock(side_effect=["t1", "t2"])
        service = make_service(get_auth_token)
        policy = RetryPolicy(max_attempts=2, wait=wait_none())

        items = await collect(
            service.paginate(
                "items", paginator=PageNumberPaginator(page_size=1), resilience_policy=policy
            )
        )

        assert items == [{"id": 1}, {"id": 2}]
        assert recorder.call_count == 4
        assert recorder.requests[3].headers["authorization"] == "Bearer t2"
        assert recorder.requests[3].url.params["page"] == "2"

    @pytest.mark.asyncio
    async def test_page_error_propagates(self, make_service, recorder):
        """A failing page ends iteration with the error."""
        recorder.queue(page([{"id": 1}], 1, 1, 2), httpx.Response(503))
        service = make_service()
        seen = []

        with pytest.raises(HttpStatusError):
            async for item in service.paginate("items", paginator=PageNumberPaginator(page_size=1)):
                seen.append(item)

        assert seen == [{"id": 1}]
