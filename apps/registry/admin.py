"""
apps.registry.admin
~~~~~~~~~~~~~~~~~~~
Django admin registrations for the registry.
"""
from django.contrib import admin

from .models import Child, ChildPhoto, Proxy, School, Sponsor, Sponsorship


class IdFirstMixin:
    """Show the numeric id at the top of detail forms."""

    def get_fields(self, request, obj=None):
        fields = super().get_fields(request, obj)
        if obj and "id" in fields:
            fields = list(fields)
            fields.remove("id")
            fields.insert(0, "id")
        return fields


@admin.register(School)
class SchoolAdmin(IdFirstMixin, admin.ModelAdmin):
    list_display = ["id", "name", "location", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["name", "location"]
    readonly_fields = ["id", "created_at", "updated_at"]


@admin.register(Proxy)
class ProxyAdmin(IdFirstMixin, admin.ModelAdmin):
    list_display = ["id", "full_name", "role", "contact"]
    list_filter = ["role"]
    search_fields = ["full_name", "role", "email", "phone"]
    readonly_fields = ["id", "created_at", "updated_at"]


class SponsoredChildInline(admin.TabularInline):
    model = Sponsorship
    extra = 0
    fields = ["child", "start_date", "end_date", "monthly_amount", "is_active"]
    raw_id_fields = ["child"]


class ChildSponsorInline(admin.TabularInline):
    model = Sponsorship
    extra = 0
    fields = ["sponsor", "start_date", "end_date", "monthly_amount", "is_active"]
    raw_id_fields = ["sponsor"]


class ChildPhotoInline(admin.TabularInline):
    model = ChildPhoto
    extra = 0
    fields = ["file_name", "mime_type", "file_size", "description", "is_profile", "uploaded_at"]
    readonly_fields = ["file_name", "mime_type", "file_size", "is_profile", "uploaded_at"]
    can_delete = False


@admin.register(Sponsor)
class SponsorAdmin(IdFirstMixin, admin.ModelAdmin):
    list_display = ["id", "full_name", "proxy", "email", "phone"]
    list_filter = [("proxy", admin.EmptyFieldListFilter)]
    search_fields = ["full_name", "email", "phone", "proxy__full_name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [SponsoredChildInline]


@admin.register(Child)
class ChildAdmin(IdFirstMixin, admin.ModelAdmin):
    list_display = ["id", "first_name", "last_name", "gender", "school", "is_sponsored", "is_archived"]
    list_filter = ["is_sponsored", "gender", "is_archived", "school"]
    search_fields = ["first_name", "last_name", "school__name"]
    # Maintained by the sponsorship services, not edited by hand.
    readonly_fields = ["id", "is_sponsored", "created_at", "updated_at"]
    inlines = [ChildSponsorInline, ChildPhotoInline]
