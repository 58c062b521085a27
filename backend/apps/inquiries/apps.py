"""Inquiries app configuration."""

from django.apps import AppConfig


class InquiriesConfig(AppConfig):
    """Configuration for student-owner inquiry threads."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.inquiries"
