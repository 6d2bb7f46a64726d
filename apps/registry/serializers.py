"""
apps.registry.serializers
~~~~~~~~~~~~~~~~~~~~~~~~~
I/O-only serializers for the registry API.
No business logic; shape validation only.
"""
from rest_framework import serializers

from .models import Child, ChildPhoto, Proxy, School, Sponsor, Sponsorship


# ---------------------------------------------------------------------------
# Schools
# ---------------------------------------------------------------------------

class SchoolSerializer(serializers.ModelSerializer):
    class Meta:
        model = School
        fields = ["id", "name", "location", "is_active", "created_at", "updated_at"]
        read_only_fields = fields


class SchoolWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    location = serializers.CharField(max_length=255)
    is_active = serializers.BooleanField(required=False)


# ---------------------------------------------------------------------------
# Proxies
# ---------------------------------------------------------------------------

class ProxySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Proxy
        fields = ["id", "full_name", "role"]
        read_only_fields = fields


class ProxySerializer(serializers.ModelSerializer):
    sponsor_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Proxy
        fields = [
            "id",
            "full_name",
            "role",
            "contact",
            "email",
            "phone",
            "description",
            "sponsor_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProxyWriteSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255)
    role = serializers.CharField(max_length=100)
    contact = serializers.CharField(max_length=255, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)


# ---------------------------------------------------------------------------
# Sponsors
# ---------------------------------------------------------------------------

class SponsoredChildSerializer(serializers.Serializer):
    """A child as seen from one of its sponsors."""

    id = serializers.IntegerField(source="child.id")
    first_name = serializers.CharField(source="child.first_name")
    last_name = serializers.CharField(source="child.last_name")
    school_name = serializers.CharField(source="child.school.name")
    start_date = serializers.DateField()


class SponsorSerializer(serializers.ModelSerializer):
    proxy = ProxySummarySerializer(read_only=True, allow_null=True)
    children = SponsoredChildSerializer(source="active_sponsorships", many=True, read_only=True)

    class Meta:
        model = Sponsor
        fields = [
            "id",
            "full_name",
            "contact",
            "email",
            "phone",
            "proxy",
            "children",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SponsorWriteSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255)
    contact = serializers.CharField(max_length=255, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    proxy_id = serializers.IntegerField(required=False, allow_null=True)


# ---------------------------------------------------------------------------
# Children
# ---------------------------------------------------------------------------

class SchoolSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = School
        fields = ["id", "name", "location"]
        read_only_fields = fields


class ChildSponsorSerializer(serializers.Serializer):
    """An active sponsor as seen from the sponsored child."""

    id = serializers.IntegerField(source="sponsor.id")
    full_name = serializers.CharField(source="sponsor.full_name")
    proxy = ProxySummarySerializer(source="sponsor.proxy", read_only=True, allow_null=True)
    start_date = serializers.DateField()
    monthly_amount = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)


class ChildSerializer(serializers.ModelSerializer):
    school = SchoolSummarySerializer(read_only=True)
    sponsors = ChildSponsorSerializer(source="active_sponsorships", many=True, read_only=True)
    age = serializers.SerializerMethodField()
    profile_photo_id = serializers.SerializerMethodField()

    class Meta:
        model = Child
        fields = [
            "id",
            "first_name",
            "last_name",
            "date_of_birth",
            "age",
            "gender",
            "school",
            "class_name",
            "father_full_name",
            "father_address",
            "father_contact",
            "mother_full_name",
            "mother_address",
            "mother_contact",
            "story",
            "comment",
            "is_sponsored",
            "sponsors",
            "profile_photo_id",
            "date_entered_register",
            "last_profile_update",
            "is_archived",
            "archived_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_age(self, obj: Child) -> int:
        return obj.age()

    def get_profile_photo_id(self, obj: Child) -> int | None:
        photos = getattr(obj, "profile_photos", None) or []
        return photos[0].id if photos else None


class ChildWriteSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    date_of_birth = serializers.DateField()
    gender = serializers.ChoiceField(choices=Child.Gender.choices)
    school_id = serializers.IntegerField()
    class_name = serializers.CharField(max_length=50, required=False, allow_blank=True)
    father_full_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    father_address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    father_contact = serializers.CharField(max_length=100, required=False, allow_blank=True)
    mother_full_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    mother_address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    mother_contact = serializers.CharField(max_length=100, required=False, allow_blank=True)
    story = serializers.CharField(required=False, allow_blank=True)
    comment = serializers.CharField(required=False, allow_blank=True)


class SponsorshipCreateSerializer(serializers.Serializer):
    """Validates POST /children/{id}/sponsors/ request body."""

    sponsor_id = serializers.IntegerField()
    monthly_amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True, min_value=0
    )
    payment_method = serializers.CharField(max_length=50, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


# ---------------------------------------------------------------------------
# Sponsorships
# ---------------------------------------------------------------------------

class SponsorshipChildSerializer(serializers.ModelSerializer):
    school = SchoolSummarySerializer(read_only=True)

    class Meta:
        model = Child
        fields = ["id", "first_name", "last_name", "school"]
        read_only_fields = fields


class SponsorshipSponsorSerializer(serializers.ModelSerializer):
    proxy = ProxySummarySerializer(read_only=True, allow_null=True)

    class Meta:
        model = Sponsor
        fields = ["id", "full_name", "proxy"]
        read_only_fields = fields


class SponsorshipSerializer(serializers.ModelSerializer):
    child = SponsorshipChildSerializer(read_only=True)
    sponsor = SponsorshipSponsorSerializer(read_only=True)

    class Meta:
        model = Sponsorship
        fields = [
            "id",
            "child",
            "sponsor",
            "start_date",
            "end_date",
            "monthly_amount",
            "payment_method",
            "notes",
            "is_active",
            "created_at",
        ]
        read_only_fields = fields


# ---------------------------------------------------------------------------
# Photos
# ---------------------------------------------------------------------------

class ChildPhotoSerializer(serializers.ModelSerializer):
    """Photo metadata; the image itself only when ``include_base64`` is set in the context."""

    child_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = ChildPhoto
        fields = [
            "id",
            "child_id",
            "mime_type",
            "file_name",
            "file_size",
            "description",
            "uploaded_at",
            "is_profile",
        ]
        read_only_fields = fields

    def to_representation(self, instance: ChildPhoto) -> dict:
        data = super().to_representation(instance)
        if self.context.get("include_base64"):
            data["photo_base64"] = instance.photo_base64
            data["data_url"] = instance.data_url
        return data


class ChildPhotoCreateSerializer(serializers.Serializer):
    """Validates POST /children/{id}/photos/ request body."""

    photo_base64 = serializers.CharField(trim_whitespace=True)
    mime_type = serializers.CharField(max_length=100)
    file_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    file_size = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    description = serializers.CharField(required=False, allow_blank=True)


class ChildPhotoUpdateSerializer(serializers.Serializer):
    description = serializers.CharField(allow_blank=True)
