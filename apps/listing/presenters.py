"""
apps.listing.presenters
~~~~~~~~~~~~~~~~~~~~~~~
Active-filter chips for the children list.

Reference filters (school, sponsor, proxy) are resolved to readable labels
against the lookup lists the screen already loaded.  Those lists can be
partial (they are paginated), so a miss falls back to echoing the id
instead of failing.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .filters import FilterState, RefKind, SponsorshipStatus
from .normalizer import find_by_id, proxies_from, schools_from, sponsors_from

TITLES = {
    "search": "Search",
    "sponsorship": "Status",
    "gender": "Gender",
    "school": "School",
    "sponsor": "Sponsor",
    "proxy": "Proxy",
}


@dataclass(frozen=True)
class FilterChip:
    dimension: str
    title: str
    label: str
    remove_query: str

    def as_dict(self) -> dict:
        return asdict(self)


def school_label(state: FilterState, schools) -> str:
    school = find_by_id(schools, state.school.id)
    return school.label if school else f"School ID: {state.school.id}"


def sponsor_label(state: FilterState, sponsors) -> str:
    if state.sponsor.kind is RefKind.NONE:
        return "No Sponsor"
    sponsor = find_by_id(sponsors, state.sponsor.id)
    return sponsor.label if sponsor else f"Sponsor ID: {state.sponsor.id}"


def proxy_label(state: FilterState, proxies) -> str:
    if state.proxy.kind is RefKind.NONE:
        return "No Proxy"
    if state.proxy.kind is RefKind.DIRECT:
        return "Direct Contact"
    proxy = find_by_id(proxies, state.proxy.id)
    return proxy.label if proxy else f"Proxy ID: {state.proxy.id}"


def present_active_filters(
    state: FilterState,
    schools: Any = None,
    sponsors: Any = None,
    proxies: Any = None,
) -> list[FilterChip]:
    """
    One removable chip per active dimension, in display order.

    *schools*, *sponsors* and *proxies* may be bare lists or paginated
    envelopes; they go through the normalizer first.  Returns ``[]`` when
    no filter is active.
    """
    if not state.has_active_filters:
        return []

    labels = {
        "search": lambda: f'"{state.search}"',
        "sponsorship": lambda: (
            "Sponsored" if state.sponsorship is SponsorshipStatus.SPONSORED else "Needs Sponsor"
        ),
        "gender": lambda: state.gender,
        "school": lambda: school_label(state, schools_from(schools)),
        "sponsor": lambda: sponsor_label(state, sponsors_from(sponsors)),
        "proxy": lambda: proxy_label(state, proxies_from(proxies)),
    }

    return [
        FilterChip(
            dimension=dimension,
            title=TITLES[dimension],
            label=labels[dimension](),
            remove_query=state.without(dimension).querystring(),
        )
        for dimension in state.active_dimensions
    ]
