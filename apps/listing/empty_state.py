"""
apps.listing.empty_state
~~~~~~~~~~~~~~~~~~~~~~~~
What the children list shows when the current page has no records.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field

TITLE = "No children found"
FILTERED_MESSAGE = "Try adjusting your search terms to see more results."
FIRST_RUN_MESSAGE = "Get started by adding your first child to the system."


@dataclass(frozen=True)
class EmptyStateAction:
    kind: str
    label: str
    url: str


@dataclass(frozen=True)
class EmptyState:
    filtered: bool
    title: str
    message: str
    actions: list[EmptyStateAction] = field(default_factory=list)

    def as_dict(self) -> dict:
        return asdict(self)


def build_empty_state(has_active_filters: bool, *, clear_url: str, add_url: str) -> EmptyState:
    # Nothing matched the filters vs. nothing registered yet.
    if has_active_filters:
        return EmptyState(
            filtered=True,
            title=TITLE,
            message=FILTERED_MESSAGE,
            actions=[
                EmptyStateAction(kind="clear_filters", label="Clear Filters", url=clear_url),
                EmptyStateAction(kind="add_record", label="Add New Child", url=add_url),
            ],
        )
    return EmptyState(
        filtered=False,
        title=TITLE,
        message=FIRST_RUN_MESSAGE,
        actions=[EmptyStateAction(kind="add_record", label="Add First Child", url=add_url)],
    )
