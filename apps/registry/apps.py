"""
apps.registry.apps
"""
from django.apps import AppConfig


class RegistryConfig(AppConfig):
    name = "apps.registry"
    label = "registry"
    verbose_name = "Sponsorship Registry"
