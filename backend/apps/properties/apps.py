"""Properties app configuration."""

from django.apps import AppConfig


class PropertiesConfig(AppConfig):
    """Configuration for property listings app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.properties"
