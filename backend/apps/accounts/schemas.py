"""
Accounts API schemas - request/response types for profile endpoints.
"""

from typing import Literal

from ninja import Schema
from pydantic import Field


class ProfileResponse(Schema):
    """Current user's profile."""

    id: int
    email: str
    full_name: str
    phone: str
    role: str | None  # None until role selection
    created_at: str  # ISO timestamp


class SelectRoleRequest(Schema):
    """Role selection after sign-up."""

    role: Literal["student", "property_owner"]


class UpdateProfileRequest(Schema):
    """Profile setup fields; omitted fields are left unchanged."""

    full_name: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
