"""
apps.registry.services.proxies
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Business logic for proxies.
"""
from __future__ import annotations

import structlog
from django.db import IntegrityError
from django.db.models import Count, Q

from apps.registry.models import Proxy
from common.exceptions import ConflictError, NotFoundError
from common.pagination import Page, paginate

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = {"full_name", "role", "contact", "email", "phone", "description"}
SEARCH_FIELDS = ("full_name", "role", "email", "phone", "contact", "description")


def _with_counts(qs):
    return qs.annotate(sponsor_count=Count("sponsors"))


def list_proxies(*, search: str = "", page: int = 1, limit: int | None = None) -> Page:
    """Proxies ordered by name, optionally searched across their text fields."""
    qs = _with_counts(Proxy.objects.all())
    search = search.strip()
    if search:
        query = Q()
        for name in SEARCH_FIELDS:
            query |= Q(**{f"{name}__icontains": search})
        qs = qs.filter(query)
    return paginate(qs.order_by("full_name", "id"), page=page, limit=limit)


def get_proxy(proxy_id: str | int) -> Proxy:
    try:
        return _with_counts(Proxy.objects.prefetch_related("sponsors")).get(pk=int(proxy_id))
    except (Proxy.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Proxy '{proxy_id}' not found.")


def create_proxy(*, full_name: str, role: str, **details) -> Proxy:
    if details.get("email"):
        details["email"] = details["email"].strip().lower()
    try:
        proxy = Proxy.objects.create(full_name=full_name.strip(), role=role.strip(), **details)
    except IntegrityError as exc:
        raise ConflictError("A proxy with this name already exists.") from exc
    logger.info("proxy_created", proxy_id=proxy.id, role=proxy.role)
    return get_proxy(proxy.id)


def update_proxy(proxy_id: str | int, *, data: dict) -> Proxy:
    proxy = get_proxy(proxy_id)
    for field, value in data.items():
        if field not in UPDATABLE_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip().lower() if field == "email" else value.strip()
        setattr(proxy, field, value)
    try:
        proxy.save()
    except IntegrityError as exc:
        raise ConflictError("A proxy with this name already exists.") from exc
    logger.info("proxy_updated", proxy_id=proxy.id)
    return get_proxy(proxy.id)


def delete_proxy(proxy_id: str | int) -> None:
    """Delete a proxy that no sponsor relies on any more."""
    proxy = get_proxy(proxy_id)
    if proxy.sponsor_count:
        raise ConflictError(
            f"Proxy '{proxy.full_name}' still represents {proxy.sponsor_count} sponsor(s)."
        )
    proxy.delete()
    logger.info("proxy_deleted", proxy_id=int(proxy_id))
