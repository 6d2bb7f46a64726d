"""
apps.listing.screen
~~~~~~~~~~~~~~~~~~~
Assembles the children list view model from one page of children, the
lookup lists and the current :class:`~apps.listing.filters.FilterState`.

Used by both the JSON overview endpoint and the HTML screen, so the two
always agree on chips, counts and the empty state.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .empty_state import EmptyState, build_empty_state
from .filters import FilterState
from .normalizer import extract_list, proxies_from, schools_from, sponsors_from
from .presenters import FilterChip, present_active_filters
from .statistics import PageStatistics, compute_page_statistics


@dataclass(frozen=True)
class SelectOption:
    value: str
    label: str
    sublabel: str = ""


@dataclass(frozen=True)
class ChildrenScreen:
    state: FilterState
    children: list
    pagination: dict
    statistics: PageStatistics
    chips: list[FilterChip] = field(default_factory=list)
    empty_state: EmptyState | None = None
    school_options: list[SelectOption] = field(default_factory=list)
    sponsor_options: list[SelectOption] = field(default_factory=list)
    proxy_options: list[SelectOption] = field(default_factory=list)

    @property
    def has_active_filters(self) -> bool:
        return self.state.has_active_filters

    @property
    def active_filter_count(self) -> int:
        return self.state.active_filter_count

    def as_dict(self) -> dict:
        return {
            "children": self.children,
            "pagination": self.pagination,
            "statistics": self.statistics.as_dict(),
            "has_active_filters": self.has_active_filters,
            "active_filter_count": self.active_filter_count,
            "active_filters": [chip.as_dict() for chip in self.chips],
            "empty_state": self.empty_state.as_dict() if self.empty_state else None,
        }


def select_options(schools: Any, sponsors: Any, proxies: Any) -> dict[str, list[SelectOption]]:
    """Option lists for the school / sponsor / proxy filter selects."""
    return {
        "school_options": [SelectOption("all", "All Schools")] + [
            SelectOption(str(s.id), s.name, s.location) for s in schools_from(schools)
        ],
        "sponsor_options": [SelectOption("all", "All"), SelectOption("none", "No Sponsor")] + [
            SelectOption(str(s.id), s.full_name, f"via {s.proxy.full_name}" if s.proxy else "")
            for s in sponsors_from(sponsors)
        ],
        "proxy_options": [
            SelectOption("all", "All"),
            SelectOption("none", "No Proxy"),
            SelectOption("direct", "Direct Contact"),
        ] + [SelectOption(str(p.id), p.full_name, p.role) for p in proxies_from(proxies)],
    }


def build_children_screen(
    state: FilterState,
    children_payload: Any,
    *,
    schools: Any = None,
    sponsors: Any = None,
    proxies: Any = None,
    base_url: str,
    add_url: str,
) -> ChildrenScreen:
    """
    Build the view model.

    *children_payload* is the paginated children envelope; the lookup
    arguments may be bare lists or envelopes.  *base_url* is the list's own
    URL, used for the clear-filters action.
    """
    children = extract_list(children_payload)
    pagination = children_payload.get("pagination", {}) if isinstance(children_payload, dict) else {}
    empty_state = None
    if not children:
        empty_state = build_empty_state(
            state.has_active_filters, clear_url=base_url, add_url=add_url
        )
    return ChildrenScreen(
        state=state,
        children=children,
        pagination=pagination,
        statistics=compute_page_statistics(children, pagination),
        chips=present_active_filters(state, schools, sponsors, proxies),
        empty_state=empty_state,
        **select_options(schools, sponsors, proxies),
    )
