"""
apps.listing.filters
~~~~~~~~~~~~~~~~~~~~
Filter state of the children list.

Six independent dimensions: free-text search, sponsorship status, gender,
school, sponsor and proxy.  The three reference dimensions hold a
:class:`RefFilter` rather than raw strings; the ``"all"`` / ``"none"`` /
``"direct"`` tokens only exist at the query-string boundary
(:meth:`FilterState.from_params` and :meth:`FilterState.to_params`).
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Mapping
from urllib.parse import urlencode

from .normalizer import coerce_id

ALL = "all"
NONE = "none"
DIRECT = "direct"

#: Order in which dimensions are presented and counted.
DIMENSIONS = ("search", "sponsorship", "gender", "school", "sponsor", "proxy")

#: Query-string parameter for each dimension.
PARAM_NAMES = {
    "search": "search",
    "sponsorship": "sponsored",
    "gender": "gender",
    "school": "school",
    "sponsor": "sponsor",
    "proxy": "proxy",
}


class SponsorshipStatus(str, enum.Enum):
    ALL = "all"
    SPONSORED = "sponsored"
    UNSPONSORED = "unsponsored"

    @classmethod
    def parse(cls, raw: Any) -> "SponsorshipStatus":
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.ALL


class RefKind(enum.Enum):
    ANY = "any"
    NONE = "none"
    DIRECT = "direct"
    BY_ID = "by_id"


@dataclass(frozen=True)
class RefFilter:
    """Filter on a referenced record: unset, explicitly none, direct, or by id."""

    kind: RefKind = RefKind.ANY
    id: int | None = None

    @classmethod
    def by_id(cls, ident: int) -> "RefFilter":
        return cls(RefKind.BY_ID, ident)

    @classmethod
    def parse(cls, raw: Any, *, allow: frozenset = frozenset()) -> "RefFilter":
        """
        Parse a query-string token.

        *allow* lists which of :attr:`RefKind.NONE` / :attr:`RefKind.DIRECT`
        the dimension accepts.  Unknown or disallowed tokens parse to
        :attr:`RefKind.ANY`.
        """
        if raw is None:
            return cls()
        token = str(raw).strip().lower()
        if token == NONE and RefKind.NONE in allow:
            return cls(RefKind.NONE)
        if token == DIRECT and RefKind.DIRECT in allow:
            return cls(RefKind.DIRECT)
        ident = coerce_id(token)
        if ident is not None:
            return cls.by_id(ident)
        return cls()

    @property
    def is_active(self) -> bool:
        return self.kind is not RefKind.ANY

    def to_param(self) -> str:
        if self.kind is RefKind.BY_ID:
            return str(self.id)
        if self.kind is RefKind.ANY:
            return ALL
        return self.kind.value


SCHOOL_KINDS = frozenset()
SPONSOR_KINDS = frozenset({RefKind.NONE})
PROXY_KINDS = frozenset({RefKind.NONE, RefKind.DIRECT})


@dataclass(frozen=True)
class FilterState:
    search: str = ""
    sponsorship: SponsorshipStatus = SponsorshipStatus.ALL
    gender: str | None = None
    school: RefFilter = field(default_factory=RefFilter)
    sponsor: RefFilter = field(default_factory=RefFilter)
    proxy: RefFilter = field(default_factory=RefFilter)

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "FilterState":
        """Build a state from request query parameters (a ``QueryDict`` or dict)."""
        gender = str(params.get(PARAM_NAMES["gender"]) or "").strip()
        return cls(
            search=str(params.get(PARAM_NAMES["search"]) or ""),
            sponsorship=SponsorshipStatus.parse(params.get(PARAM_NAMES["sponsorship"])),
            gender=gender if gender and gender.lower() != ALL else None,
            school=RefFilter.parse(params.get(PARAM_NAMES["school"]), allow=SCHOOL_KINDS),
            sponsor=RefFilter.parse(params.get(PARAM_NAMES["sponsor"]), allow=SPONSOR_KINDS),
            proxy=RefFilter.parse(params.get(PARAM_NAMES["proxy"]), allow=PROXY_KINDS),
        )

    @property
    def search_text(self) -> str:
        return self.search.strip()

    def is_dimension_active(self, dimension: str) -> bool:
        if dimension == "search":
            return self.search_text != ""
        if dimension == "sponsorship":
            return self.sponsorship is not SponsorshipStatus.ALL
        if dimension == "gender":
            return self.gender is not None
        return getattr(self, dimension).is_active

    @property
    def active_dimensions(self) -> list[str]:
        return [d for d in DIMENSIONS if self.is_dimension_active(d)]

    @property
    def has_active_filters(self) -> bool:
        return any(self.is_dimension_active(d) for d in DIMENSIONS)

    @property
    def active_filter_count(self) -> int:
        return len(self.active_dimensions)

    def cleared(self) -> "FilterState":
        return FilterState()

    def without(self, dimension: str) -> "FilterState":
        """Copy of this state with *dimension* reset to its inactive value."""
        if dimension not in DIMENSIONS:
            raise KeyError(dimension)
        return replace(self, **{dimension: getattr(FilterState(), dimension)})

    def to_params(self) -> dict[str, str]:
        """Query parameters for the active dimensions only."""
        values = {
            "search": self.search_text,
            "sponsorship": self.sponsorship.value,
            "gender": self.gender or ALL,
            "school": self.school.to_param(),
            "sponsor": self.sponsor.to_param(),
            "proxy": self.proxy.to_param(),
        }
        return {PARAM_NAMES[d]: values[d] for d in self.active_dimensions}

    def querystring(self, **extra: Any) -> str:
        params = self.to_params()
        params.update({k: str(v) for k, v in extra.items() if v is not None})
        return urlencode(params)
