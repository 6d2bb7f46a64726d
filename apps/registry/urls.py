"""
apps.registry.urls
~~~~~~~~~~~~~~~~~~
URL routing for the registry API.  Mounted at /api/v1/ by the root URLconf.
"""
from django.urls import path

from .views import (
    ChildDetailView,
    ChildListCreateView,
    ChildPhotosView,
    ChildSponsorDetailView,
    ChildSponsorsView,
    PhotoDetailView,
    ProxyDetailView,
    ProxyListCreateView,
    SchoolDetailView,
    SchoolListCreateView,
    SponsorDetailView,
    SponsorListCreateView,
    SponsorshipListView,
)

urlpatterns = [
    path("schools/", SchoolListCreateView.as_view(), name="school-list-create"),
    path("schools/<int:pk>/", SchoolDetailView.as_view(), name="school-detail"),
    path("proxies/", ProxyListCreateView.as_view(), name="proxy-list-create"),
    path("proxies/<int:pk>/", ProxyDetailView.as_view(), name="proxy-detail"),
    path("sponsors/", SponsorListCreateView.as_view(), name="sponsor-list-create"),
    path("sponsors/<int:pk>/", SponsorDetailView.as_view(), name="sponsor-detail"),
    path("children/", ChildListCreateView.as_view(), name="child-list-create"),
    path("children/<int:pk>/", ChildDetailView.as_view(), name="child-detail"),
    path("children/<int:pk>/sponsors/", ChildSponsorsView.as_view(), name="child-sponsors"),
    path(
        "children/<int:pk>/sponsors/<int:sponsor_id>/",
        ChildSponsorDetailView.as_view(),
        name="child-sponsor-detail",
    ),
    path("children/<int:pk>/photos/", ChildPhotosView.as_view(), name="child-photos"),
    path("photos/<int:pk>/", PhotoDetailView.as_view(), name="photo-detail"),
    path("sponsorships/", SponsorshipListView.as_view(), name="sponsorship-list"),
]
