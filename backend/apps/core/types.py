"""
Custom type definitions for the application.

These types help mypy understand attributes added by authentication.
"""

from typing import TYPE_CHECKING

from django.http import HttpRequest

if TYPE_CHECKING:
    from apps.accounts.models import User


class AuthenticatedHttpRequest(HttpRequest):
    """
    HttpRequest after BearerAuth has run.

    django-ninja stores the value returned by BearerAuth.authenticate on
    request.auth.
    """

    auth: "User"
