"""
Root URL configuration for the sponsorship registry.
"""
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from apps.listing.urls import api_urlpatterns as listing_api_urlpatterns
from common.health import health_check

urlpatterns = [
    # Admin
    path("admin/", admin.site.urls),

    # Health check
    path("health/", health_check, name="health-check"),

    # OpenAPI schema & Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),

    # Application API routes
    path("api/v1/", include(listing_api_urlpatterns)),
    path("api/v1/", include("apps.registry.urls")),

    # Server-rendered screens
    path("", include("apps.listing.urls")),
]
