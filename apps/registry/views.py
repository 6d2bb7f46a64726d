"""
apps.registry.views
~~~~~~~~~~~~~~~~~~~
Thin DRF API views for the registry.  All business logic is delegated to
:mod:`apps.registry.services`.

Endpoints
---------
GET/POST           /schools/                       – list (bare list) / create
GET/PATCH/DELETE   /schools/{id}/                  – detail / update / deactivate
GET/POST           /proxies/                       – paginated list / create
GET/PATCH/DELETE   /proxies/{id}/
GET/POST           /sponsors/                      – paginated list / create
GET/PATCH/DELETE   /sponsors/{id}/
GET/POST           /children/                      – paginated, filtered list / create
GET/PATCH/DELETE   /children/{id}/                 – delete archives the child
POST               /children/{id}/sponsors/        – start a sponsorship
DELETE             /children/{id}/sponsors/{sid}/  – end a sponsorship
GET                /sponsorships/                  – paginated list of all sponsorships
GET/POST           /children/{id}/photos/          – list photos / upload a photo
GET/PATCH/DELETE   /photos/{id}/                   – raw image / edit description / delete
"""
from __future__ import annotations

from django.http import HttpResponse
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.listing.filters import FilterState
from apps.registry.services import children, photos, proxies, schools, sponsors, sponsorships
from common.pagination import page_params, query_flag
from .serializers import (
    ChildPhotoCreateSerializer,
    ChildPhotoSerializer,
    ChildPhotoUpdateSerializer,
    ChildSerializer,
    ChildWriteSerializer,
    ProxySerializer,
    ProxyWriteSerializer,
    SchoolSerializer,
    SchoolWriteSerializer,
    SponsorSerializer,
    SponsorshipCreateSerializer,
    SponsorshipSerializer,
    SponsorWriteSerializer,
)

PAGE_PARAMETERS = [
    OpenApiParameter("page", int, description="1-based page number."),
    OpenApiParameter("limit", int, description="Page size (max 100)."),
]

CHILD_FILTER_PARAMETERS = PAGE_PARAMETERS + [
    OpenApiParameter("search", str, description="Matches first name, last name or school name."),
    OpenApiParameter("sponsored", str, enum=["all", "sponsored", "unsponsored"]),
    OpenApiParameter("gender", str, description="'all' or a gender value."),
    OpenApiParameter("school", str, description="'all' or a school id."),
    OpenApiParameter("sponsor", str, description="'all', 'none' or a sponsor id."),
    OpenApiParameter("proxy", str, description="'all', 'none', 'direct' or a proxy id."),
    OpenApiParameter("include_archived", bool),
]


def _flag(request: Request, name: str) -> bool:
    return query_flag(request.query_params, name)


# ---------------------------------------------------------------------------
# Schools
# ---------------------------------------------------------------------------

class SchoolListCreateView(APIView):
    """GET /schools/  –  POST /schools/"""

    @extend_schema(
        summary="List Schools",
        parameters=[OpenApiParameter("include_inactive", bool)],
        responses={200: SchoolSerializer(many=True)},
        tags=["Schools"],
    )
    def get(self, request: Request) -> Response:
        records = schools.list_schools(include_inactive=_flag(request, "include_inactive"))
        return Response(SchoolSerializer(records, many=True).data)

    @extend_schema(
        summary="Create School",
        request=SchoolWriteSerializer,
        responses={
            201: SchoolSerializer,
            409: OpenApiResponse(description="A school with that name already exists."),
        },
        tags=["Schools"],
    )
    def post(self, request: Request) -> Response:
        serializer = SchoolWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vd = serializer.validated_data
        school = schools.create_school(name=vd["name"], location=vd["location"])
        return Response(SchoolSerializer(school).data, status=status.HTTP_201_CREATED)


class SchoolDetailView(APIView):
    """GET / PATCH / DELETE /schools/{id}/"""

    @extend_schema(summary="Get School", responses={200: SchoolSerializer}, tags=["Schools"])
    def get(self, request: Request, pk: int) -> Response:
        return Response(SchoolSerializer(schools.get_school(pk)).data)

    @extend_schema(
        summary="Update School",
        request=SchoolWriteSerializer,
        responses={200: SchoolSerializer},
        tags=["Schools"],
    )
    def patch(self, request: Request, pk: int) -> Response:
        serializer = SchoolWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        school = schools.update_school(pk, data=serializer.validated_data)
        return Response(SchoolSerializer(school).data)

    @extend_schema(summary="Deactivate School", responses={204: None}, tags=["Schools"])
    def delete(self, request: Request, pk: int) -> Response:
        schools.deactivate_school(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Proxies
# ---------------------------------------------------------------------------

class ProxyListCreateView(APIView):
    """GET /proxies/  –  POST /proxies/"""

    @extend_schema(
        summary="List Proxies",
        parameters=PAGE_PARAMETERS + [OpenApiParameter("search", str)],
        responses={200: OpenApiResponse(description="Paginated envelope of proxies.")},
        tags=["Proxies"],
    )
    def get(self, request: Request) -> Response:
        page, limit = page_params(request.query_params)
        result = proxies.list_proxies(
            search=request.query_params.get("search", ""), page=page, limit=limit
        )
        return Response(result.envelope(ProxySerializer(result.items, many=True).data))

    @extend_schema(
        summary="Create Proxy",
        request=ProxyWriteSerializer,
        responses={
            201: ProxySerializer,
            409: OpenApiResponse(description="A proxy with that name already exists."),
        },
        tags=["Proxies"],
    )
    def post(self, request: Request) -> Response:
        serializer = ProxyWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        proxy = proxies.create_proxy(**serializer.validated_data)
        return Response(ProxySerializer(proxy).data, status=status.HTTP_201_CREATED)


class ProxyDetailView(APIView):
    """GET / PATCH / DELETE /proxies/{id}/"""

    @extend_schema(summary="Get Proxy", responses={200: ProxySerializer}, tags=["Proxies"])
    def get(self, request: Request, pk: int) -> Response:
        return Response(ProxySerializer(proxies.get_proxy(pk)).data)

    @extend_schema(
        summary="Update Proxy",
        request=ProxyWriteSerializer,
        responses={200: ProxySerializer},
        tags=["Proxies"],
    )
    def patch(self, request: Request, pk: int) -> Response:
        serializer = ProxyWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        proxy = proxies.update_proxy(pk, data=serializer.validated_data)
        return Response(ProxySerializer(proxy).data)

    @extend_schema(
        summary="Delete Proxy",
        responses={
            204: None,
            409: OpenApiResponse(description="Sponsors are still linked to this proxy."),
        },
        tags=["Proxies"],
    )
    def delete(self, request: Request, pk: int) -> Response:
        proxies.delete_proxy(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Sponsors
# ---------------------------------------------------------------------------

class SponsorListCreateView(APIView):
    """GET /sponsors/  –  POST /sponsors/"""

    @extend_schema(
        summary="List Sponsors",
        parameters=PAGE_PARAMETERS + [
            OpenApiParameter("search", str),
            OpenApiParameter("proxy", str, enum=sorted(sponsors.PROXY_FILTERS)),
            OpenApiParameter("sponsorship", str, enum=sorted(sponsors.SPONSORSHIP_FILTERS)),
        ],
        responses={200: OpenApiResponse(description="Paginated envelope of sponsors.")},
        tags=["Sponsors"],
    )
    def get(self, request: Request) -> Response:
        page, limit = page_params(request.query_params)
        params = request.query_params
        result = sponsors.list_sponsors(
            search=params.get("search", ""),
            proxy=params.get("proxy", "all"),
            sponsorship=params.get("sponsorship", "all"),
            page=page,
            limit=limit,
        )
        return Response(result.envelope(SponsorSerializer(result.items, many=True).data))

    @extend_schema(
        summary="Create Sponsor",
        request=SponsorWriteSerializer,
        responses={
            201: SponsorSerializer,
            422: OpenApiResponse(description="The referenced proxy does not exist."),
        },
        tags=["Sponsors"],
    )
    def post(self, request: Request) -> Response:
        serializer = SponsorWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sponsor = sponsors.create_sponsor(**serializer.validated_data)
        return Response(SponsorSerializer(sponsor).data, status=status.HTTP_201_CREATED)


class SponsorDetailView(APIView):
    """GET / PATCH / DELETE /sponsors/{id}/"""

    @extend_schema(summary="Get Sponsor", responses={200: SponsorSerializer}, tags=["Sponsors"])
    def get(self, request: Request, pk: int) -> Response:
        return Response(SponsorSerializer(sponsors.get_sponsor(pk)).data)

    @extend_schema(
        summary="Update Sponsor",
        request=SponsorWriteSerializer,
        responses={200: SponsorSerializer},
        tags=["Sponsors"],
    )
    def patch(self, request: Request, pk: int) -> Response:
        serializer = SponsorWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        sponsor = sponsors.update_sponsor(pk, data=serializer.validated_data)
        return Response(SponsorSerializer(sponsor).data)

    @extend_schema(
        summary="Delete Sponsor",
        responses={
            204: None,
            409: OpenApiResponse(description="The sponsor still has active sponsorships."),
        },
        tags=["Sponsors"],
    )
    def delete(self, request: Request, pk: int) -> Response:
        sponsors.delete_sponsor(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Children
# ---------------------------------------------------------------------------

class ChildListCreateView(APIView):
    """GET /children/  –  POST /children/"""

    @extend_schema(
        summary="List Children",
        parameters=CHILD_FILTER_PARAMETERS,
        responses={200: OpenApiResponse(description="Paginated envelope of children.")},
        tags=["Children"],
    )
    def get(self, request: Request) -> Response:
        page, limit = page_params(request.query_params)
        result = children.list_children(
            FilterState.from_params(request.query_params),
            include_archived=_flag(request, "include_archived"),
            page=page,
            limit=limit,
        )
        return Response(result.envelope(ChildSerializer(result.items, many=True).data))

    @extend_schema(
        summary="Register Child",
        request=ChildWriteSerializer,
        responses={
            201: ChildSerializer,
            422: OpenApiResponse(description="The referenced school does not exist."),
        },
        tags=["Children"],
    )
    def post(self, request: Request) -> Response:
        serializer = ChildWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        child = children.create_child(**serializer.validated_data)
        return Response(ChildSerializer(child).data, status=status.HTTP_201_CREATED)


class ChildDetailView(APIView):
    """GET / PATCH / DELETE /children/{id}/"""

    @extend_schema(summary="Get Child", responses={200: ChildSerializer}, tags=["Children"])
    def get(self, request: Request, pk: int) -> Response:
        return Response(ChildSerializer(children.get_child(pk)).data)

    @extend_schema(
        summary="Update Child",
        request=ChildWriteSerializer,
        responses={200: ChildSerializer},
        tags=["Children"],
    )
    def patch(self, request: Request, pk: int) -> Response:
        serializer = ChildWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        child = children.update_child(pk, data=serializer.validated_data)
        return Response(ChildSerializer(child).data)

    @extend_schema(summary="Archive Child", responses={204: None}, tags=["Children"])
    def delete(self, request: Request, pk: int) -> Response:
        children.archive_child(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ChildSponsorsView(APIView):
    """POST /children/{id}/sponsors/ – start sponsoring a child."""

    @extend_schema(
        summary="Add Sponsor to Child",
        request=SponsorshipCreateSerializer,
        responses={
            201: ChildSerializer,
            404: OpenApiResponse(description="Child or sponsor not found."),
            409: OpenApiResponse(description="The sponsor already sponsors this child."),
        },
        tags=["Children"],
    )
    def post(self, request: Request, pk: int) -> Response:
        serializer = SponsorshipCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        sponsorships.add_sponsor(child_id=pk, **serializer.validated_data)
        return Response(ChildSerializer(children.get_child(pk)).data, status=status.HTTP_201_CREATED)


class ChildSponsorDetailView(APIView):
    """DELETE /children/{id}/sponsors/{sponsor_id}/ – end a sponsorship."""

    @extend_schema(
        summary="End Sponsorship",
        responses={
            200: ChildSerializer,
            404: OpenApiResponse(description="No active sponsorship for that pair."),
        },
        tags=["Children"],
    )
    def delete(self, request: Request, pk: int, sponsor_id: int) -> Response:
        child = sponsorships.end_sponsorship(child_id=pk, sponsor_id=sponsor_id)
        return Response(ChildSerializer(child).data)


# ---------------------------------------------------------------------------
# Sponsorships
# ---------------------------------------------------------------------------

class SponsorshipListView(APIView):
    """GET /sponsorships/"""

    @extend_schema(
        summary="List Sponsorships",
        parameters=PAGE_PARAMETERS + [
            OpenApiParameter("status", str, enum=sorted(sponsorships.STATUS_FILTERS)),
        ],
        responses={200: OpenApiResponse(description="Paginated envelope of sponsorships.")},
        tags=["Sponsorships"],
    )
    def get(self, request: Request) -> Response:
        page, limit = page_params(request.query_params)
        result = sponsorships.list_sponsorships(
            status=request.query_params.get("status", "all"), page=page, limit=limit
        )
        return Response(result.envelope(SponsorshipSerializer(result.items, many=True).data))


# ---------------------------------------------------------------------------
# Photos
# ---------------------------------------------------------------------------

class ChildPhotosView(APIView):
    """GET / POST /children/{id}/photos/"""

    @extend_schema(
        summary="List Child Photos",
        parameters=[OpenApiParameter("include_base64", bool)],
        responses={200: ChildPhotoSerializer(many=True)},
        tags=["Photos"],
    )
    def get(self, request: Request, pk: int) -> Response:
        context = {"include_base64": _flag(request, "include_base64")}
        return Response(ChildPhotoSerializer(photos.list_photos(pk), many=True, context=context).data)

    @extend_schema(
        summary="Upload Child Photo",
        description="The uploaded photo becomes the child's profile photo.",
        request=ChildPhotoCreateSerializer,
        responses={
            201: ChildPhotoSerializer,
            404: OpenApiResponse(description="Child not found."),
            422: OpenApiResponse(description="Not an image, bad base64 or larger than 5MB."),
        },
        tags=["Photos"],
    )
    def post(self, request: Request, pk: int) -> Response:
        serializer = ChildPhotoCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        photo = photos.add_photo(child_id=pk, **serializer.validated_data)
        return Response(ChildPhotoSerializer(photo).data, status=status.HTTP_201_CREATED)


class PhotoDetailView(APIView):
    """GET / PATCH / DELETE /photos/{id}/"""

    def perform_content_negotiation(self, request, force=False):
        # GET answers with raw image bytes, whatever the Accept header asks for.
        return super().perform_content_negotiation(request, force=True)

    @extend_schema(
        summary="Get Photo Image",
        responses={200: OpenApiResponse(description="Raw image bytes.")},
        tags=["Photos"],
    )
    def get(self, request: Request, pk: int) -> HttpResponse:
        photo = photos.get_photo(pk)
        image = photos.validate_image(photo.photo_base64, photo.mime_type)
        response = HttpResponse(image, content_type=photo.mime_type)
        response["Cache-Control"] = "public, max-age=86400"
        response["ETag"] = f'"{photo.id}-{int(photo.uploaded_at.timestamp())}"'
        if photo.file_name:
            response["Content-Disposition"] = f'inline; filename="{photo.file_name}"'
        return response

    @extend_schema(
        summary="Update Photo Description",
        request=ChildPhotoUpdateSerializer,
        responses={200: ChildPhotoSerializer},
        tags=["Photos"],
    )
    def patch(self, request: Request, pk: int) -> Response:
        serializer = ChildPhotoUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        photo = photos.update_photo(pk, **serializer.validated_data)
        return Response(ChildPhotoSerializer(photo).data)

    @extend_schema(
        summary="Delete Photo",
        description="The child's newest remaining photo becomes its profile photo.",
        responses={200: OpenApiResponse(description="{'was_profile_photo': bool}")},
        tags=["Photos"],
    )
    def delete(self, request: Request, pk: int) -> Response:
        return Response({"was_profile_photo": photos.delete_photo(pk)})
