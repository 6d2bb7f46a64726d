"""
apps.listing.statistics
~~~~~~~~~~~~~~~~~~~~~~~
Summary counts for the children list.

Two scopes are kept apart on purpose:

``PageStatistics.page``
    Counted here, from the records of the page being displayed only.
``PageStatistics.totals``
    The server's pagination metadata, passed through untouched.  Nothing in
    this module recomputes or extrapolates a global figure.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Mapping

from .normalizer import extract_list


def _get(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _as_int(raw: Any, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class PaginationInfo:
    current_page: int = 1
    total_pages: int = 0
    total_count: int = 0

    @classmethod
    def from_payload(cls, payload: Any) -> "PaginationInfo":
        """Read pagination metadata from a mapping, or from an envelope holding one."""
        if payload is None:
            return cls()
        inner = _get(payload, "pagination")
        source = inner if inner is not None else payload
        return cls(
            current_page=_as_int(_get(source, "current_page"), 1),
            total_pages=_as_int(_get(source, "total_pages"), 0),
            total_count=_as_int(_get(source, "total_count"), 0),
        )


@dataclass(frozen=True)
class PageCounts:
    records: int = 0
    sponsored: int = 0
    unsponsored: int = 0
    unique_schools: int = 0


@dataclass(frozen=True)
class PageStatistics:
    page: PageCounts = field(default_factory=PageCounts)
    totals: PaginationInfo = field(default_factory=PaginationInfo)

    def as_dict(self) -> dict:
        return asdict(self)


def school_name(child: Any) -> str | None:
    school = _get(child, "school")
    if school is None:
        return None
    return _get(school, "name")


def count_page(children: Iterable[Any]) -> PageCounts:
    records = list(children)
    sponsored = sum(1 for child in records if _get(child, "is_sponsored"))
    schools = {name for name in map(school_name, records) if name is not None}
    return PageCounts(
        records=len(records),
        sponsored=sponsored,
        unsponsored=len(records) - sponsored,
        unique_schools=len(schools),
    )


def compute_page_statistics(children: Any, pagination: Any = None) -> PageStatistics:
    """
    Statistics for the current page.

    *children* may be a list of serialized children (or model instances) or
    a paginated envelope; *pagination* defaults to the envelope's own
    ``pagination`` block when *children* is one.
    """
    if pagination is None and isinstance(children, Mapping):
        pagination = children.get("pagination")
    return PageStatistics(
        page=count_page(extract_list(children)),
        totals=PaginationInfo.from_payload(pagination),
    )
