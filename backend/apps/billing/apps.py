"""Billing app configuration."""

from django.apps import AppConfig


class BillingConfig(AppConfig):
    """Rent checkout and Stripe subscription reconciliation."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.billing"
    verbose_name = "Rent payments"
