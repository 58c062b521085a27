"""Accounts app configuration."""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Users, roles and Stytch identity linking."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.accounts"
