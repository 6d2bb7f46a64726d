"""
apps.registry.models
~~~~~~~~~~~~~~~~~~~~
Models for the sponsorship registry.

Models
------
School
    Where a child is enrolled.  Soft-deleted through ``is_active``.
Proxy
    Intermediary contact (priest, nun, community leader) through whom a
    sponsor reaches a child's community.
Sponsor
    Person or entity supporting one or more children, optionally via a Proxy.
Child
    A registered child.  ``is_sponsored`` mirrors whether the child has at
    least one active :class:`Sponsorship`.
Sponsorship
    Link between a child and a sponsor over a period of time.
ChildPhoto
    Uploaded photo of a child; the latest upload is the profile photo.
"""
from django.db import models
from django.db.models import Q
from django.utils import timezone


class School(models.Model):
    name = models.CharField(max_length=255, unique=True)
    location = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "School"
        verbose_name_plural = "Schools"

    def __str__(self) -> str:
        return f"{self.name} - {self.location}"


class Proxy(models.Model):
    full_name = models.CharField(max_length=255, unique=True)
    role = models.CharField(
        max_length=100,
        help_text="How the proxy relates to the community, e.g. 'Priest'.",
    )
    contact = models.CharField(max_length=255, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["full_name"]
        verbose_name = "Proxy"
        verbose_name_plural = "Proxies"

    def __str__(self) -> str:
        return f"{self.full_name} ({self.role})"


class Sponsor(models.Model):
    full_name = models.CharField(max_length=255)
    contact = models.CharField(max_length=255, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    proxy = models.ForeignKey(
        Proxy,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sponsors",
        help_text="Leave empty when the sponsor is in direct contact.",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["full_name"]
        verbose_name = "Sponsor"
        verbose_name_plural = "Sponsors"

    def __str__(self) -> str:
        return self.full_name


class Child(models.Model):
    """
    A child in the register.

    Fields
    ------
    school
        Current school.  ``PROTECT`` so a school with enrolled children
        cannot be hard-deleted; schools are retired with ``is_active``.
    is_sponsored
        Denormalised flag kept in sync by
        :func:`apps.registry.services.sponsorships.refresh_sponsored_flag`.
    is_archived / archived_at
        Archived children drop out of the default listing but keep their
        sponsorship history.
    """

    class Gender(models.TextChoices):
        MALE = "male", "Male"
        FEMALE = "female", "Female"

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=10, choices=Gender.choices)
    school = models.ForeignKey(School, on_delete=models.PROTECT, related_name="children")
    class_name = models.CharField(max_length=50, blank=True, default="")

    father_full_name = models.CharField(max_length=255, blank=True, default="")
    father_address = models.CharField(max_length=255, blank=True, default="")
    father_contact = models.CharField(max_length=100, blank=True, default="")
    mother_full_name = models.CharField(max_length=255, blank=True, default="")
    mother_address = models.CharField(max_length=255, blank=True, default="")
    mother_contact = models.CharField(max_length=100, blank=True, default="")

    story = models.TextField(blank=True, default="")
    comment = models.TextField(blank=True, default="")

    is_sponsored = models.BooleanField(default=False)
    date_entered_register = models.DateTimeField(default=timezone.now)
    last_profile_update = models.DateTimeField(default=timezone.now)
    is_archived = models.BooleanField(default=False)
    archived_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Child"
        verbose_name_plural = "Children"
        indexes = [
            models.Index(fields=["is_archived", "is_sponsored"], name="child_archived_sponsored_idx"),
        ]

    def __str__(self) -> str:
        return f"#{self.id} {self.first_name} {self.last_name}" if self.id else self.full_name

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def age(self, today=None) -> int:
        today = today or timezone.localdate()
        born = self.date_of_birth
        return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


class Sponsorship(models.Model):
    child = models.ForeignKey(Child, on_delete=models.CASCADE, related_name="sponsorships")
    sponsor = models.ForeignKey(Sponsor, on_delete=models.CASCADE, related_name="sponsorships")
    start_date = models.DateField(default=timezone.localdate)
    end_date = models.DateField(null=True, blank=True)
    monthly_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    payment_method = models.CharField(max_length=50, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date", "-id"]
        verbose_name = "Sponsorship"
        verbose_name_plural = "Sponsorships"
        constraints = [
            models.UniqueConstraint(
                fields=["child", "sponsor"],
                condition=Q(is_active=True),
                name="unique_active_sponsorship",
                violation_error_message="This sponsor already sponsors this child.",
            ),
        ]

    def __str__(self) -> str:
        status = "active" if self.is_active else "ended"
        return f"{self.sponsor} -> {self.child} [{status}]"


class ChildPhoto(models.Model):
    """
    A photo of a child, stored inline as base64.

    The most recently uploaded photo is the child's profile photo
    (``is_profile``); see :mod:`apps.registry.services.photos`.
    """

    child = models.ForeignKey(Child, on_delete=models.CASCADE, related_name="photos")
    photo_base64 = models.TextField()
    mime_type = models.CharField(max_length=100)
    file_name = models.CharField(max_length=255, blank=True, default="")
    file_size = models.PositiveIntegerField(null=True, blank=True)
    description = models.TextField(blank=True, default="")
    is_profile = models.BooleanField(default=False)
    uploaded_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-uploaded_at", "-id"]
        verbose_name = "Child Photo"
        verbose_name_plural = "Child Photos"

    def __str__(self) -> str:
        return f"Photo #{self.id} of {self.child}"

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.photo_base64}"
