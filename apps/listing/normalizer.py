"""
apps.listing.normalizer
~~~~~~~~~~~~~~~~~~~~~~~
Turns list-ish payloads into plain lists, and lookup records into typed
options with integer ids.

Registry endpoints answer either with a bare list (schools) or with a
paginated envelope (``{"data": [...], "pagination": {...}}``); other
clients wrap lists under ``results`` or ``items``.  Everything downstream
of :func:`extract_list` only ever sees a list.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import structlog

logger = structlog.get_logger(__name__)

#: Envelope keys, in order of precedence.
ENVELOPE_KEYS = ("data", "results", "items")

_MISSING = object()


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name, _MISSING)
    return getattr(value, name, _MISSING)


def extract_list(value: Any, default: list | None = None) -> list:
    """
    Return the list carried by *value*.

    Precedence:

    1. *value* is already a list – returned as-is (same object).
    2. a ``data`` list.
    3. a ``results`` list.
    4. an ``items`` list.
    5. otherwise *default* (a new empty list when not given).

    Mappings are read by key, other objects by attribute.  ``None`` and
    any shape without a list yield the default; nothing is raised.
    """
    fallback = [] if default is None else default
    if value is None:
        return fallback
    if isinstance(value, list):
        return value

    for key in ENVELOPE_KEYS:
        candidate = _field(value, key)
        if isinstance(candidate, list):
            return candidate

    if value:
        logger.warning("unexpected_response_shape", value_type=type(value).__name__)
    return fallback


def coerce_id(raw: Any) -> int | None:
    """Integer id from an int or a digit string; ``None`` for anything else."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


def _text(record: Any, name: str) -> str:
    value = _field(record, name)
    return "" if value is _MISSING or value is None else str(value)


# ---------------------------------------------------------------------------
# Typed lookup options
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SchoolOption:
    id: int
    name: str
    location: str

    @property
    def label(self) -> str:
        return f"{self.name} - {self.location}"


@dataclass(frozen=True)
class ProxyOption:
    id: int
    full_name: str
    role: str

    @property
    def label(self) -> str:
        return f"{self.full_name} ({self.role})"


@dataclass(frozen=True)
class SponsorOption:
    id: int
    full_name: str
    proxy: ProxyOption | None = None

    @property
    def label(self) -> str:
        return self.full_name


def _proxy_from(record: Any) -> ProxyOption | None:
    if record is None or record is _MISSING:
        return None
    ident = coerce_id(_field(record, "id"))
    if ident is None:
        return None
    return ProxyOption(id=ident, full_name=_text(record, "full_name"), role=_text(record, "role"))


def schools_from(payload: Any) -> list[SchoolOption]:
    """Normalise a schools payload; records without an integer id are dropped."""
    options = []
    for record in extract_list(payload):
        ident = coerce_id(_field(record, "id"))
        if ident is not None:
            options.append(
                SchoolOption(id=ident, name=_text(record, "name"), location=_text(record, "location"))
            )
    return options


def sponsors_from(payload: Any) -> list[SponsorOption]:
    options = []
    for record in extract_list(payload):
        ident = coerce_id(_field(record, "id"))
        if ident is not None:
            options.append(
                SponsorOption(
                    id=ident,
                    full_name=_text(record, "full_name"),
                    proxy=_proxy_from(_field(record, "proxy")),
                )
            )
    return options


def proxies_from(payload: Any) -> list[ProxyOption]:
    return [option for option in map(_proxy_from, extract_list(payload)) if option is not None]


def find_by_id(options: Iterable, ident: int):
    """First option whose ``id`` equals *ident*, or ``None``."""
    return next((option for option in options if option.id == ident), None)
