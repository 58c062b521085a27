"""
Core security - authentication classes for API.
"""

from django.http import HttpRequest
from ninja.security import HttpBearer

from apps.accounts.models import User
from apps.accounts.services import AuthenticationError, resolve_session_user
from apps.core.logging import bind_contextvars, get_logger

logger = get_logger(__name__)


class BearerAuth(HttpBearer):
    """
    Bearer token authentication for API endpoints.

    The token is a Stytch session JWT. It is resolved to a local User on
    every request; the User becomes request.auth. Returning None makes
    django-ninja answer 401.
    """

    def authenticate(self, request: HttpRequest, token: str) -> User | None:
        if not token:
            return None

        try:
            user = resolve_session_user(token)
        except AuthenticationError as e:
            logger.info("bearer_auth_rejected", reason=str(e))
            return None

        bind_contextvars(**{"usr.id": str(user.id)})
        return user
