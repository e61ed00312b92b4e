"""
Pagination types.

Page envelopes follow the ``{"meta": {...}, "data": [...]}`` convention read
by ``PageNumberPaginator``.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Meta(BaseModel):
    """
    Pagination metadata of one page.

    Fields:
        total_items: Total number of items across all pages
        current_page: Current page number (1-based)
        page_size: Number of items per page
        type: Resource type identifier (e.g. 'item', 'user')
    """

    model_config = ConfigDict(populate_by_name=True)

    total_items: int = Field(..., alias="totalItems", description="Total number of items")
    current_page: int = Field(..., alias="currentPage", description="Current page number (1-based)")
    page_size: int = Field(..., alias="pageSize", description="Number of items per page")
    type: Optional[str] = Field(default=None, description="Resource type identifier")

    @property
    def total_pages(self) -> int:
        if self.page_size < 1:
            return 0
        return -(-self.total_items // self.page_size)

    @property
    def has_next(self) -> bool:
        return self.current_page * self.page_size < self.total_items


class PaginatedListResponse(BaseModel, Generic[T]):
    """
    Paginated list response.

    Fields:
        meta: Pagination metadata
        data: Items of the current page
    """

    model_config = ConfigDict(populate_by_name=True)

    meta: Meta = Field(..., description="Pagination metadata")
    data: List[T] = Field(..., description="Items of the current page")
