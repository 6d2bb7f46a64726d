"""
apps.registry.services.schools
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Business logic for schools.
"""
from __future__ import annotations

import structlog
from django.db import IntegrityError

from apps.registry.models import School
from common.exceptions import ConflictError, NotFoundError

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = {"name", "location", "is_active"}


def list_schools(*, include_inactive: bool = False) -> list[School]:
    """Active schools ordered by name (the full list, not paginated)."""
    qs = School.objects.all()
    if not include_inactive:
        qs = qs.filter(is_active=True)
    return list(qs.order_by("name"))


def get_school(school_id: str | int) -> School:
    try:
        return School.objects.get(pk=int(school_id))
    except (School.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"School '{school_id}' not found.")


def create_school(*, name: str, location: str) -> School:
    try:
        school = School.objects.create(name=name.strip(), location=location.strip())
    except IntegrityError as exc:
        raise ConflictError(f"A school named '{name}' already exists.") from exc
    logger.info("school_created", school_id=school.id, name=school.name)
    return school


def update_school(school_id: str | int, *, data: dict) -> School:
    school = get_school(school_id)
    for field, value in data.items():
        if field in UPDATABLE_FIELDS:
            setattr(school, field, value.strip() if isinstance(value, str) else value)
    try:
        school.save()
    except IntegrityError as exc:
        raise ConflictError(f"A school named '{school.name}' already exists.") from exc
    logger.info("school_updated", school_id=school.id)
    return school


def deactivate_school(school_id: str | int) -> None:
    """Soft-delete: children keep their school, it just leaves the pick lists."""
    school = get_school(school_id)
    school.is_active = False
    school.save(update_fields=["is_active", "updated_at"])
    logger.info("school_deactivated", school_id=school.id)
