"""
Auth services - resolving Stytch sessions to local users.

Stytch is the identity collaborator: it owns credentials and sessions.
The local User row is created just-in-time the first time a session is seen.
"""

from typing import Any

from django.db import IntegrityError, transaction
from stytch.core.response_base import StytchError

from apps.accounts.models import User
from apps.accounts.stytch_client import get_stytch_client
from apps.core.logging import get_logger

logger = get_logger(__name__)


class AuthenticationError(Exception):
    """Raised when a bearer token cannot be resolved to a user with an email."""


def _primary_email(stytch_user: Any) -> str | None:
    """Return the first email on a Stytch user, verified ones first."""
    emails = list(getattr(stytch_user, "emails", None) or [])
    emails.sort(key=lambda e: not getattr(e, "verified", False))
    for entry in emails:
        if getattr(entry, "email", None):
            return entry.email
    return None


def _display_name(stytch_user: Any) -> str:
    name = getattr(stytch_user, "name", None)
    if name is None:
        return ""
    parts = [getattr(name, "first_name", ""), getattr(name, "last_name", "")]
    return " ".join(p for p in parts if p)


def get_or_create_user_from_stytch(stytch_user_id: str, email: str, full_name: str = "") -> User:
    """
    Get or create the local User for a Stytch identity.

    Looks up by stytch_user_id first, then links an existing row with the
    same email (e.g. a user created before Stytch was wired in).
    A name from Stytch never overwrites one the user typed in profile setup.
    """
    with transaction.atomic():
        user = User.objects.select_for_update().filter(stytch_user_id=stytch_user_id).first()
        if user is None:
            user = User.objects.select_for_update().filter(email__iexact=email).first()

        if user is not None:
            update_fields = []
            if user.stytch_user_id != stytch_user_id:
                user.stytch_user_id = stytch_user_id
                update_fields.append("stytch_user_id")
            if user.email != email:
                user.email = email
                update_fields.append("email")
            if full_name and not user.full_name:
                user.full_name = full_name
                update_fields.append("full_name")
            if update_fields:
                user.save(update_fields=[*update_fields, "updated_at"])
            return user

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                stytch_user_id=stytch_user_id,
                full_name=full_name,
            )
    except IntegrityError:
        # Concurrent first request for the same identity won the race
        return User.objects.get(stytch_user_id=stytch_user_id)

    logger.info("user_created_from_stytch", user_id=user.id)
    return user


def resolve_session_user(token: str, client: Any = None) -> User:
    """
    Resolve a Stytch session JWT to a local User.

    Args:
        token: Session JWT from the Authorization header.
        client: Stytch client; built from settings when omitted.

    Raises:
        AuthenticationError: If Stytch rejects the session or the identity has no email.
    """
    if not token:
        raise AuthenticationError("Missing session token")

    client = client or get_stytch_client()
    try:
        response = client.sessions.authenticate(session_jwt=token)
    except StytchError as e:
        raise AuthenticationError(e.details.error_message) from e

    stytch_user = response.user
    email = _primary_email(stytch_user)
    if not email:
        raise AuthenticationError("No user email")

    return get_or_create_user_from_stytch(
        stytch_user_id=stytch_user.user_id,
        email=email,
        full_name=_display_name(stytch_user),
    )


def select_role(user: User, role: str) -> User:
    """
    Record the marketplace role picked after sign-up.

    Role is chosen once; switching between student and owner is not allowed
    because listings, inquiries and payments hang off it.
    """
    if user.role and user.role != role:
        raise ValueError("Role has already been selected")

    if user.role != role:
        user.role = role
        user.save(update_fields=["role", "updated_at"])
        logger.info("user_role_selected", user_id=user.id, role=role)
    return user


def update_profile(user: User, full_name: str | None = None, phone: str | None = None) -> User:
    """Apply profile setup fields that were provided."""
    update_fields = []
    if full_name is not None:
        user.full_name = full_name.strip()
        update_fields.append("full_name")
    if phone is not None:
        user.phone = phone.strip()
        update_fields.append("phone")
    if update_fields:
        user.save(update_fields=[*update_fields, "updated_at"])
    return user
