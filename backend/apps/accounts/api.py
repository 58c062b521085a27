"""
Accounts API endpoints.

Profile lookup, role selection and profile setup for the signed-in user.
Sign-in itself happens against Stytch directly from the client.
"""

from ninja import Router
from ninja.errors import HttpError

from apps.accounts.models import User
from apps.accounts.schemas import ProfileResponse, SelectRoleRequest, UpdateProfileRequest
from apps.accounts.services import select_role, update_profile
from apps.core.schemas import ErrorResponse
from apps.core.security import BearerAuth
from apps.core.types import AuthenticatedHttpRequest

router = Router(tags=["auth"])
bearer_auth = BearerAuth()


def _profile(user: User) -> ProfileResponse:
    return ProfileResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        phone=user.phone,
        role=user.role or None,
        created_at=user.created_at.isoformat(),
    )


@router.get(
    "/me",
    response={200: ProfileResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="getCurrentUser",
    summary="Get current user profile",
)
def get_current_user(request: AuthenticatedHttpRequest) -> ProfileResponse:
    """Return the signed-in user's profile, including role if selected."""
    return _profile(request.auth)


@router.post(
    "/me/role",
    response={200: ProfileResponse, 400: ErrorResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="selectRole",
    summary="Select student or property owner role",
)
def select_role_endpoint(
    request: AuthenticatedHttpRequest, payload: SelectRoleRequest
) -> ProfileResponse:
    """
    Pick the marketplace role.

    Can be called again with the same role; switching roles is rejected.
    """
    try:
        user = select_role(request.auth, payload.role)
    except ValueError as e:
        raise HttpError(400, str(e))
    return _profile(user)


@router.patch(
    "/me/profile",
    response={200: ProfileResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="updateProfile",
    summary="Update user profile",
)
def update_profile_endpoint(
    request: AuthenticatedHttpRequest, payload: UpdateProfileRequest
) -> ProfileResponse:
    """Profile setup: full name and phone number."""
    user = update_profile(request.auth, full_name=payload.full_name, phone=payload.phone)
    return _profile(user)
