from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from app.utils.pagination import Page

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """One page of results plus the total count of the filtered set."""

    items: list[T] = Field(default_factory=list)
    total_count: int = Field(..., description="Matching rows across all pages")
    page: int = Field(..., description="1-based page number")
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_page(cls, page: Page, items: list | None = None):
        return cls(
            items=page.items if items is None else items,
            total_count=page.total_count,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages,
            has_next=page.has_next,
            has_previous=page.has_previous,
        )


class OperationResult(BaseModel):
    """Generic success flag for idempotent mutations."""

    success: bool = True
    message: str | None = None
