"""Core app configuration."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Shared infrastructure: logging, auth, request context."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.core"

    def ready(self) -> None:
        from django.conf import settings

        from apps.core.logging import configure_logging
        from config.settings.base import settings as env

        configure_logging(json_format=not settings.DEBUG, log_level=env.LOG_LEVEL)
