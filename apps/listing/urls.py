"""
apps.listing.urls
~~~~~~~~~~~~~~~~~
``api_urlpatterns`` are mounted at /api/v1/, ``urlpatterns`` at the site root.
"""
from django.urls import path

from .views import ChildrenOverviewView, children_screen

api_urlpatterns = [
    path("children/overview/", ChildrenOverviewView.as_view(), name="children-overview"),
]

urlpatterns = [
    path("children/", children_screen, name="children-screen"),
]
