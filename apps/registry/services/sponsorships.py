"""
apps.registry.services.sponsorships
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Linking sponsors to children.  Every change here recomputes
``Child.is_sponsored``.
"""
from __future__ import annotations

from decimal import Decimal

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.registry.models import Child, Sponsorship
from common.exceptions import ConflictError, NotFoundError
from common.pagination import Page, paginate

from .children import get_child
from .sponsors import get_sponsor

logger = structlog.get_logger(__name__)

#: Values accepted by the ``status`` query parameter of the sponsorships list.
STATUS_FILTERS = {"all", "active", "ended"}


def refresh_sponsored_flag(child: Child) -> bool:
    """Set ``child.is_sponsored`` from its active sponsorships and persist it."""
    sponsored = child.sponsorships.filter(is_active=True).exists()
    if child.is_sponsored != sponsored:
        child.is_sponsored = sponsored
        child.save(update_fields=["is_sponsored", "updated_at"])
    return sponsored


def add_sponsor(
    *,
    child_id: str | int,
    sponsor_id: str | int,
    monthly_amount: Decimal | None = None,
    payment_method: str = "",
    notes: str = "",
) -> Sponsorship:
    child = get_child(child_id)
    sponsor = get_sponsor(sponsor_id)

    if child.sponsorships.filter(sponsor=sponsor, is_active=True).exists():
        raise ConflictError(f"{sponsor.full_name} already sponsors {child.full_name}.")

    try:
        with transaction.atomic():
            sponsorship = Sponsorship.objects.create(
                child=child,
                sponsor=sponsor,
                monthly_amount=monthly_amount,
                payment_method=payment_method,
                notes=notes,
            )
            refresh_sponsored_flag(child)
    except IntegrityError as exc:
        raise ConflictError(f"{sponsor.full_name} already sponsors {child.full_name}.") from exc

    logger.info("sponsorship_started", child_id=child.id, sponsor_id=sponsor.id)
    return sponsorship


def end_sponsorship(*, child_id: str | int, sponsor_id: str | int) -> Child:
    child = get_child(child_id)
    with transaction.atomic():
        ended = child.sponsorships.filter(sponsor_id=sponsor_id, is_active=True).update(
            is_active=False,
            end_date=timezone.localdate(),
        )
        if not ended:
            raise NotFoundError(
                f"No active sponsorship between child '{child_id}' and sponsor '{sponsor_id}'."
            )
        refresh_sponsored_flag(child)

    logger.info("sponsorship_ended", child_id=child.id, sponsor_id=int(sponsor_id))
    return get_child(child.id)


def list_sponsorships(*, status: str = "all", page: int = 1, limit: int | None = None) -> Page:
    """Sponsorships with their child and sponsor, most recent first."""
    qs = Sponsorship.objects.select_related("child__school", "sponsor__proxy")
    if status == "active":
        qs = qs.filter(is_active=True)
    elif status == "ended":
        qs = qs.filter(is_active=False)
    return paginate(qs.order_by("-created_at", "-id"), page=page, limit=limit)
