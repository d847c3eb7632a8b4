"""
Paginated search helpers shared by every listing.

Turns ``(page, page_size, search_term, search_fields)`` into one bounded page
plus the total count of the filtered, unpaged set. Ordering always ends with
the row id so equal sort keys come back in the same order on every request.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from sqlalchemy import or_
from sqlalchemy.orm import Query

from app.errors import InvalidOperationError
from app.utils.helpers import contains_ci, escape_like

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 1000  # hard ceiling; services apply the configured max_page_size first


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search_term: str | None = None
    search_fields: Sequence[str] | None = None

    def normalized(self, max_page_size: int = MAX_PAGE_SIZE) -> PageRequest:
        """Clamp page to >= 1 and page_size to [1, max_page_size]; blank search terms become None."""
        term = (self.search_term or "").strip() or None
        fields = [f.strip() for f in self.search_fields if f and f.strip()] if self.search_fields else None
        return replace(
            self,
            page=max(1, int(self.page or 1)),
            page_size=min(max(1, int(self.page_size or DEFAULT_PAGE_SIZE)), max_page_size),
            search_term=term,
            search_fields=fields or None,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class SortSpec:
    column: str | None = None
    ascending: bool = True


@dataclass
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        if self.total_count == 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def _resolve_search_fields(request: PageRequest, searchable: Mapping[str, Any]) -> list[str]:
    if not request.search_fields:
        return list(searchable)
    unknown = [name for name in request.search_fields if name not in searchable]
    if unknown:
        raise InvalidOperationError(f"cannot search on field(s): {', '.join(unknown)}")
    return list(request.search_fields)


def _resolve_sort_column(sort: SortSpec | None, sortable: Mapping[str, Any]):
    if sort is None or not sort.column:
        return None
    if sort.column not in sortable:
        raise InvalidOperationError(f"cannot sort on column: {sort.column}")
    return sortable[sort.column]


def paginate_query(
    query: Query,
    request: PageRequest,
    *,
    searchable: Mapping[str, Any],
    id_column,
    sortable: Mapping[str, Any] | None = None,
    sort: SortSpec | None = None,
    default_order: Sequence[Any] = (),
) -> Page:
    """Apply search, count, ordering and offset/limit to a SQLAlchemy ``Query``.

    ``id_column`` may be a single column or a tuple of columns (composite keys
    of join rows); it is appended to every ORDER BY as the stable tie-break.
    """
    request = request.normalized()

    if request.search_term:
        pattern = f"%{escape_like(request.search_term.lower())}%"
        fields = _resolve_search_fields(request, searchable)
        query = query.filter(or_(*[searchable[name].ilike(pattern, escape="\\") for name in fields]))

    total_count = query.order_by(None).count()

    sort_column = _resolve_sort_column(sort, sortable or {})
    if sort_column is not None:
        order = [sort_column.asc() if sort.ascending else sort_column.desc()]
    else:
        order = list(default_order)
    id_columns = id_column if isinstance(id_column, (list, tuple)) else (id_column,)
    order.extend(column.asc() for column in id_columns)

    items = query.order_by(*order).offset(request.offset).limit(request.page_size).all()
    return Page(items=list(items), total_count=total_count, page=request.page, page_size=request.page_size)


def _sort_value(value):
    # None sorts before everything else, like NULLS FIRST
    return (value is not None, value)


def paginate_sequence(
    items: Sequence[T],
    request: PageRequest,
    *,
    searchable: Mapping[str, Callable[[T], Any]],
    id_getter: Callable[[T], int],
    sortable: Mapping[str, Callable[[T], Any]] | None = None,
    sort: SortSpec | None = None,
    default_sort: Callable[[T], Any] | None = None,
) -> Page[T]:
    """Same contract as ``paginate_query`` for rows that are already in memory."""
    request = request.normalized()
    rows = list(items)

    if request.search_term:
        fields = _resolve_search_fields(request, searchable)
        getters = [searchable[name] for name in fields]
        rows = [row for row in rows if any(contains_ci(getter(row), request.search_term) for getter in getters)]

    total_count = len(rows)

    # Python's sort is stable (also with reverse=True), so sorting by id first
    # keeps id as the tie-break under whatever key is applied next.
    rows.sort(key=id_getter)
    key_getter = _resolve_sort_column(sort, sortable or {})
    if key_getter is not None:
        rows.sort(key=lambda row: _sort_value(key_getter(row)), reverse=not sort.ascending)
    elif default_sort is not None:
        rows.sort(key=lambda row: _sort_value(default_sort(row)))

    window = rows[request.offset : request.offset + request.page_size]
    return Page(items=window, total_count=total_count, page=request.page, page_size=request.page_size)
