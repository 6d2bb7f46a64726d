"""
apps.registry.services.photos
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Photos of children.  Images arrive base64-encoded (without the
``data:...;base64,`` prefix) and are stored inline.

After every upload or delete the child's newest remaining photo becomes its
profile photo, and ``Child.last_profile_update`` is bumped.
"""
from __future__ import annotations

import base64
import binascii

import structlog
from django.db import transaction
from django.utils import timezone

from apps.registry.models import Child, ChildPhoto
from common.exceptions import NotFoundError, ValidationError

from .children import get_child

logger = structlog.get_logger(__name__)

#: Largest accepted image, in bytes.
MAX_FILE_SIZE = 5 * 1024 * 1024
#: Largest accepted base64 payload (5 MB of binary encodes to ~6.7 MB).
MAX_BASE64_LENGTH = 7_000_000


def validate_image(photo_base64: str, mime_type: str, file_size: int | None = None) -> bytes:
    """Check an upload and return the decoded image bytes."""
    if not mime_type or not mime_type.startswith("image/"):
        raise ValidationError("Invalid image MIME type.", code="invalid_image")
    if len(photo_base64) > MAX_BASE64_LENGTH:
        raise ValidationError("Image too large. Maximum size is 5MB.", code="image_too_large")
    if file_size and file_size > MAX_FILE_SIZE:
        raise ValidationError("Image file size exceeds 5MB limit.", code="image_too_large")
    try:
        return base64.b64decode(photo_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("Invalid base64 image data.", code="invalid_image") from exc


def refresh_profile_photo(child: Child) -> ChildPhoto | None:
    """Flag the child's newest photo as its profile photo; returns it, or ``None``."""
    latest = child.photos.order_by("-uploaded_at", "-id").only("id").first()
    child.photos.update(is_profile=False)
    if latest is not None:
        child.photos.filter(pk=latest.pk).update(is_profile=True)
    child.last_profile_update = timezone.now()
    child.save(update_fields=["last_profile_update", "updated_at"])
    return latest


def list_photos(child_id: str | int) -> list[ChildPhoto]:
    """Photos of a child, newest first."""
    child = get_child(child_id)
    return list(child.photos.order_by("-uploaded_at", "-id"))


def get_photo(photo_id: str | int) -> ChildPhoto:
    try:
        return ChildPhoto.objects.select_related("child").get(pk=int(photo_id))
    except (ChildPhoto.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Photo '{photo_id}' not found.")


def add_photo(
    *,
    child_id: str | int,
    photo_base64: str,
    mime_type: str,
    file_name: str = "",
    file_size: int | None = None,
    description: str = "",
) -> ChildPhoto:
    """Store a new photo; it becomes the child's profile photo."""
    child = get_child(child_id)
    validate_image(photo_base64, mime_type, file_size)

    with transaction.atomic():
        photo = ChildPhoto.objects.create(
            child=child,
            photo_base64=photo_base64,
            mime_type=mime_type,
            file_name=(file_name or "").strip(),
            file_size=file_size or None,
            description=(description or "").strip(),
        )
        refresh_profile_photo(child)

    logger.info("photo_added", child_id=child.id, photo_id=photo.id, mime_type=mime_type)
    return get_photo(photo.id)


def update_photo(photo_id: str | int, *, description: str) -> ChildPhoto:
    photo = get_photo(photo_id)
    photo.description = (description or "").strip()
    photo.save(update_fields=["description"])
    logger.info("photo_updated", photo_id=photo.id)
    return photo


def delete_photo(photo_id: str | int) -> bool:
    """Delete a photo and promote the next newest.  Returns whether it was the profile photo."""
    photo = get_photo(photo_id)
    was_profile = photo.is_profile
    child = photo.child
    with transaction.atomic():
        photo.delete()
        refresh_profile_photo(child)
    logger.info("photo_deleted", photo_id=int(photo_id), child_id=child.id, was_profile=was_profile)
    return was_profile
