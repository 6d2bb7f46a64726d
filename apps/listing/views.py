"""
apps.listing.views
~~~~~~~~~~~~~~~~~~
The children list screen, as JSON (``/api/v1/children/overview/``) and as
server-rendered HTML (``/children/``).

Both fetch through the registry services and serialize with the registry
serializers, so the listing layer consumes exactly what API clients see.
"""
from __future__ import annotations

import structlog
from django.conf import settings
from django.shortcuts import render
from django.urls import reverse
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.registry.serializers import ChildSerializer, ProxySerializer, SchoolSerializer, SponsorSerializer
from apps.registry.services import children, proxies, schools, sponsors
from apps.registry.views import CHILD_FILTER_PARAMETERS
from common.pagination import page_params, query_flag

from .filters import FilterState
from .screen import ChildrenScreen, build_children_screen

logger = structlog.get_logger(__name__)


def load_children_screen(query_params, *, base_url: str) -> ChildrenScreen:
    state = FilterState.from_params(query_params)
    page, limit = page_params(query_params)
    include_archived = query_flag(query_params, "include_archived")
    result = children.list_children(
        state, include_archived=include_archived, page=page, limit=limit
    )

    # Lookup lists are capped at one page; chips fall back to ids beyond it.
    lookup_limit = settings.LISTING_MAX_PAGE_SIZE
    sponsor_page = sponsors.list_sponsors(limit=lookup_limit)
    proxy_page = proxies.list_proxies(limit=lookup_limit)

    screen = build_children_screen(
        state,
        result.envelope(ChildSerializer(result.items, many=True).data),
        schools=SchoolSerializer(schools.list_schools(), many=True).data,
        sponsors=sponsor_page.envelope(SponsorSerializer(sponsor_page.items, many=True).data),
        proxies=proxy_page.envelope(ProxySerializer(proxy_page.items, many=True).data),
        base_url=base_url,
        add_url=settings.REGISTER_CHILD_URL,
    )
    logger.debug(
        "children_screen_built",
        active_filters=state.active_dimensions,
        page=page,
        include_archived=include_archived,
        records=len(screen.children),
        total_count=result.total_count,
    )
    return screen


class ChildrenOverviewView(APIView):
    """GET /children/overview/ – children page plus chips, statistics and empty state."""

    @extend_schema(
        summary="Children List Overview",
        description=(
            "Returns one page of children together with the active-filter chips, "
            "page-local statistics next to the server totals, and the empty state "
            "when the page has no records."
        ),
        parameters=CHILD_FILTER_PARAMETERS,
        responses={200: OpenApiResponse(description="Children list view model.")},
        tags=["Children"],
    )
    def get(self, request: Request) -> Response:
        screen = load_children_screen(request.query_params, base_url=reverse("children-screen"))
        return Response(screen.as_dict())


def children_screen(request):
    """HTML children list."""
    base_url = reverse("children-screen")
    screen = load_children_screen(request.GET, base_url=base_url)
    state = screen.state
    pagination = screen.pagination
    archived = "true" if query_flag(request.GET, "include_archived") else None
    current = pagination.get("current_page", 1)
    context = {
        "screen": screen,
        "state": state,
        "params": state.to_params(),
        "base_url": base_url,
        "add_url": settings.REGISTER_CHILD_URL,
        "prev_query": state.querystring(page=current - 1, include_archived=archived)
        if pagination.get("has_prev_page") else None,
        "next_query": state.querystring(page=current + 1, include_archived=archived)
        if pagination.get("has_next_page") else None,
    }
    return render(request, "listing/children_list.html", context)
