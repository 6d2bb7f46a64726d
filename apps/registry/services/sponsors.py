"""
apps.registry.services.sponsors
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Business logic for sponsors.
"""
from __future__ import annotations

import structlog
from django.db.models import Exists, OuterRef, Prefetch, Q

from apps.registry.models import Proxy, Sponsor, Sponsorship
from common.exceptions import ConflictError, NotFoundError, ValidationError
from common.pagination import Page, paginate

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = {"full_name", "contact", "email", "phone", "proxy_id"}

#: Values accepted by the ``proxy`` query parameter of the sponsors list.
PROXY_FILTERS = {"all", "with_proxy", "without_proxy"}
#: Values accepted by the ``sponsorship`` query parameter.
SPONSORSHIP_FILTERS = {"all", "active", "inactive"}


def _base_queryset():
    active = Sponsorship.objects.filter(is_active=True).select_related("child__school")
    return Sponsor.objects.select_related("proxy").prefetch_related(
        Prefetch("sponsorships", queryset=active, to_attr="active_sponsorships")
    )


def list_sponsors(
    *,
    search: str = "",
    proxy: str = "all",
    sponsorship: str = "all",
    page: int = 1,
    limit: int | None = None,
) -> Page:
    """Sponsors ordered by name, with search and proxy / sponsorship filters."""
    qs = _base_queryset()

    search = search.strip()
    if search:
        qs = qs.filter(
            Q(full_name__icontains=search)
            | Q(email__icontains=search)
            | Q(phone__icontains=search)
            | Q(contact__icontains=search)
            | Q(proxy__full_name__icontains=search)
        )

    if proxy == "with_proxy":
        qs = qs.filter(proxy__isnull=False)
    elif proxy == "without_proxy":
        qs = qs.filter(proxy__isnull=True)

    has_active = Exists(Sponsorship.objects.filter(sponsor=OuterRef("pk"), is_active=True))
    if sponsorship == "active":
        qs = qs.filter(has_active)
    elif sponsorship == "inactive":
        qs = qs.filter(~has_active)

    return paginate(qs.order_by("full_name", "id"), page=page, limit=limit)


def get_sponsor(sponsor_id: str | int) -> Sponsor:
    try:
        return _base_queryset().get(pk=int(sponsor_id))
    except (Sponsor.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Sponsor '{sponsor_id}' not found.")


def _check_proxy(proxy_id) -> None:
    if proxy_id is not None and not Proxy.objects.filter(pk=proxy_id).exists():
        raise ValidationError(f"Proxy '{proxy_id}' does not exist.", code="invalid_proxy")


def create_sponsor(*, full_name: str, proxy_id: int | None = None, **details) -> Sponsor:
    _check_proxy(proxy_id)
    if details.get("email"):
        details["email"] = details["email"].strip().lower()
    sponsor = Sponsor.objects.create(full_name=full_name.strip(), proxy_id=proxy_id, **details)
    logger.info("sponsor_created", sponsor_id=sponsor.id, proxy_id=proxy_id)
    return get_sponsor(sponsor.id)


def update_sponsor(sponsor_id: str | int, *, data: dict) -> Sponsor:
    sponsor = get_sponsor(sponsor_id)
    if "proxy_id" in data:
        _check_proxy(data["proxy_id"])
    for field, value in data.items():
        if field not in UPDATABLE_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip().lower() if field == "email" else value.strip()
        setattr(sponsor, field, value)
    sponsor.save()
    logger.info("sponsor_updated", sponsor_id=sponsor.id)
    return get_sponsor(sponsor.id)


def delete_sponsor(sponsor_id: str | int) -> None:
    sponsor = get_sponsor(sponsor_id)
    if sponsor.active_sponsorships:
        raise ConflictError(
            f"Sponsor '{sponsor.full_name}' still has "
            f"{len(sponsor.active_sponsorships)} active sponsorship(s)."
        )
    sponsor.delete()
    logger.info("sponsor_deleted", sponsor_id=int(sponsor_id))
