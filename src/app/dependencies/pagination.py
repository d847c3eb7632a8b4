from typing import Annotated

from fastapi import Query

from app.config import get_settings
from app.utils.pagination import PageRequest, SortSpec


def get_page_request(
    page: Annotated[int, Query(description="1-based page number; values below 1 are treated as 1")] = 1,
    page_size: Annotated[int | None, Query(description="Rows per page (server default when omitted)")] = None,
    search: Annotated[str | None, Query(description="Case-insensitive substring to match")] = None,
    search_fields: Annotated[str | None, Query(description="Comma separated field names to search (all when omitted)")] = None,
) -> PageRequest:
    settings = get_settings()
    fields = [name.strip() for name in search_fields.split(",") if name.strip()] if search_fields else None
    return PageRequest(
        page=page,
        page_size=page_size or settings.default_page_size,
        search_term=search,
        search_fields=fields,
    ).normalized(settings.max_page_size)


def get_sort_spec(
    sort: Annotated[str | None, Query(description="Column to sort by")] = None,
    ascending: Annotated[bool, Query(description="Sort direction")] = True,
) -> SortSpec | None:
    if not sort:
        return None
    return SortSpec(column=sort, ascending=ascending)
