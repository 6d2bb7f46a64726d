"""
apps.registry.services.children
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Business logic for children, including the server-side half of the
children list filters.
"""
from __future__ import annotations

import structlog
from django.db.models import Exists, OuterRef, Prefetch, Q, QuerySet
from django.utils import timezone

from apps.listing.filters import FilterState, RefKind, SponsorshipStatus
from apps.registry.models import Child, ChildPhoto, School, Sponsorship
from common.exceptions import NotFoundError, ValidationError
from common.pagination import Page, paginate

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = {
    "first_name",
    "last_name",
    "date_of_birth",
    "gender",
    "school_id",
    "class_name",
    "father_full_name",
    "father_address",
    "father_contact",
    "mother_full_name",
    "mother_address",
    "mother_contact",
    "story",
    "comment",
}


def _base_queryset() -> QuerySet:
    active = Sponsorship.objects.filter(is_active=True).select_related("sponsor__proxy")
    profile = ChildPhoto.objects.filter(is_profile=True).only("id", "child_id")
    return Child.objects.select_related("school").prefetch_related(
        Prefetch("sponsorships", queryset=active, to_attr="active_sponsorships"),
        Prefetch("photos", queryset=profile, to_attr="profile_photos"),
    )


def _active_sponsorships(**lookups) -> Exists:
    return Exists(
        Sponsorship.objects.filter(child=OuterRef("pk"), is_active=True, **lookups)
    )


def apply_filters(qs: QuerySet, state: FilterState) -> QuerySet:
    """
    Narrow a ``Child`` queryset to the records matching *state*.

    search
        Case-insensitive substring of first name, last name or school name.
    sponsor
        ``none`` – no active sponsorship; id – actively sponsored by that sponsor.
    proxy
        ``none`` – no active sponsorship through a proxied sponsor;
        ``direct`` – at least one active sponsor without a proxy;
        id – at least one active sponsor represented by that proxy.
    """
    term = state.search_text
    if term:
        qs = qs.filter(
            Q(first_name__icontains=term)
            | Q(last_name__icontains=term)
            | Q(school__name__icontains=term)
        )

    if state.sponsorship is SponsorshipStatus.SPONSORED:
        qs = qs.filter(is_sponsored=True)
    elif state.sponsorship is SponsorshipStatus.UNSPONSORED:
        qs = qs.filter(is_sponsored=False)

    if state.gender:
        qs = qs.filter(gender__iexact=state.gender)

    if state.school.kind is RefKind.BY_ID:
        qs = qs.filter(school_id=state.school.id)

    if state.sponsor.kind is RefKind.NONE:
        qs = qs.filter(~_active_sponsorships())
    elif state.sponsor.kind is RefKind.BY_ID:
        qs = qs.filter(_active_sponsorships(sponsor_id=state.sponsor.id))

    if state.proxy.kind is RefKind.NONE:
        qs = qs.filter(~_active_sponsorships(sponsor__proxy__isnull=False))
    elif state.proxy.kind is RefKind.DIRECT:
        qs = qs.filter(_active_sponsorships(sponsor__proxy__isnull=True))
    elif state.proxy.kind is RefKind.BY_ID:
        qs = qs.filter(_active_sponsorships(sponsor__proxy_id=state.proxy.id))

    return qs


def list_children(
    state: FilterState | None = None,
    *,
    include_archived: bool = False,
    page: int = 1,
    limit: int | None = None,
) -> Page:
    """One page of children matching *state*, newest registrations first."""
    qs = _base_queryset()
    if not include_archived:
        qs = qs.filter(is_archived=False)
    qs = apply_filters(qs, state or FilterState())
    return paginate(qs.order_by("-created_at", "-id"), page=page, limit=limit)


def get_child(child_id: str | int) -> Child:
    try:
        return _base_queryset().get(pk=int(child_id))
    except (Child.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Child '{child_id}' not found.")


def _check_school(school_id) -> None:
    if not School.objects.filter(pk=school_id).exists():
        raise ValidationError(f"School '{school_id}' does not exist.", code="invalid_school")


def create_child(*, school_id: int, **fields) -> Child:
    _check_school(school_id)
    now = timezone.now()
    child = Child.objects.create(
        school_id=school_id,
        date_entered_register=now,
        last_profile_update=now,
        **fields,
    )
    logger.info("child_created", child_id=child.id, school_id=school_id)
    return get_child(child.id)


def update_child(child_id: str | int, *, data: dict) -> Child:
    child = get_child(child_id)
    if "school_id" in data:
        _check_school(data["school_id"])
    for field, value in data.items():
        if field in UPDATABLE_FIELDS:
            setattr(child, field, value)
    child.last_profile_update = timezone.now()
    child.save()
    logger.info("child_updated", child_id=child.id)
    return get_child(child.id)


def archive_child(child_id: str | int) -> Child:
    """Archive instead of deleting; sponsorship history stays intact."""
    child = get_child(child_id)
    if not child.is_archived:
        child.is_archived = True
        child.archived_at = timezone.now()
        child.save(update_fields=["is_archived", "archived_at", "updated_at"])
        logger.info("child_archived", child_id=child.id)
    return child
