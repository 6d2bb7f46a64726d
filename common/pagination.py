"""
common.pagination
~~~~~~~~~~~~~~~~~
Page slicing and the ``{"data": [...], "pagination": {...}}`` envelope shared
by every paginated registry endpoint.

An out-of-range page is not an error: it yields an empty slice while the
totals still describe the full result set.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from django.conf import settings


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def page_params(query_params: Mapping[str, Any]) -> tuple[int, int]:
    """
    Read ``page`` and ``limit`` from request query parameters.

    Missing or malformed values fall back to page 1 and
    ``settings.LISTING_PAGE_SIZE``; ``limit`` is capped at
    ``settings.LISTING_MAX_PAGE_SIZE``.
    """
    page = _positive_int(query_params.get("page"), 1)
    limit = _positive_int(query_params.get("limit"), settings.LISTING_PAGE_SIZE)
    return page, min(limit, settings.LISTING_MAX_PAGE_SIZE)


def query_flag(query_params: Mapping[str, Any], name: str) -> bool:
    """True when *name* is given as ``1``, ``true`` or ``yes`` (any case)."""
    return str(query_params.get(name, "")).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Page:
    """One page of records plus the server-authoritative totals."""

    items: list = field(default_factory=list)
    current_page: int = 1
    total_count: int = 0
    limit: int = 20

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.limit) if self.limit else 0

    @property
    def start_index(self) -> int:
        return (self.current_page - 1) * self.limit + 1

    @property
    def end_index(self) -> int:
        return min(self.current_page * self.limit, self.total_count)

    def pagination(self) -> dict:
        """Wire representation of the pagination metadata."""
        return {
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "total_count": self.total_count,
            "limit": self.limit,
            "has_next_page": self.current_page < self.total_pages,
            "has_prev_page": self.current_page > 1,
            "start_index": self.start_index,
            "end_index": self.end_index,
        }

    def envelope(self, data: list) -> dict:
        """Wrap already-serialized *data* in the paginated response envelope."""
        return {"data": data, "pagination": self.pagination()}


def paginate(queryset, *, page: int = 1, limit: int | None = None) -> Page:
    """Slice *queryset* to the requested page and count the full result set."""
    limit = limit or settings.LISTING_PAGE_SIZE
    total_count = queryset.count()
    offset = (page - 1) * limit
    items = list(queryset[offset:offset + limit]) if offset < total_count else []
    return Page(items=items, current_page=page, total_count=total_count, limit=limit)
