"""
Property listing API endpoints.

Browsing is public; creating and editing listings is limited to property
owners, and only on their own listings.
"""

from decimal import Decimal

from django.http import HttpRequest
from ninja import Router
from ninja.errors import HttpError

from apps.accounts.models import User
from apps.billing.models import RentPayment
from apps.core.schemas import ErrorResponse
from apps.core.security import BearerAuth
from apps.core.types import AuthenticatedHttpRequest
from apps.properties.models import Property
from apps.properties.schemas import (
    CreatePropertyRequest,
    PropertyListResponse,
    PropertyResponse,
    UpdatePropertyRequest,
)
from apps.properties.services import (
    create_property,
    delete_property,
    search_properties,
    update_property,
)

router = Router(tags=["properties"])
bearer_auth = BearerAuth()


def property_to_response(prop: Property) -> PropertyResponse:
    return PropertyResponse(
        id=prop.id,
        owner_id=prop.owner_id,
        title=prop.title,
        description=prop.description,
        rent=prop.rent,
        location=prop.location,
        bedrooms=prop.bedrooms,
        bathrooms=prop.bathrooms,
        property_type=prop.property_type,
        status=prop.status,
        amenities=list(prop.amenities or []),
        available_from=prop.available_from,
        images=list(prop.images or []),
        created_at=prop.created_at.isoformat(),
        updated_at=prop.updated_at.isoformat(),
    )


def _get_property(property_id: int) -> Property:
    try:
        return Property.objects.get(id=property_id)
    except Property.DoesNotExist:
        raise HttpError(404, "Property not found")


def _get_owned_property(user: User, property_id: int) -> Property:
    prop = _get_property(property_id)
    if prop.owner_id != user.id:
        raise HttpError(403, "You can only manage your own listings")
    return prop


def _has_active_rent(prop: Property) -> bool:
    return RentPayment.objects.filter(property=prop, status=RentPayment.Status.ACTIVE).exists()


@router.get(
    "",
    response={200: PropertyListResponse},
    operation_id="listProperties",
    summary="Browse property listings",
)
def list_properties(
    request: HttpRequest,
    search: str | None = None,
    property_type: str | None = None,
    status: str | None = None,
    min_rent: Decimal | None = None,
    max_rent: Decimal | None = None,
    bedrooms: int | None = None,
    location: str | None = None,
) -> PropertyListResponse:
    """
    List properties, newest first.

    All filters are optional and combine with AND.
    """
    qs = search_properties(
        search=search,
        property_type=property_type,
        status=status,
        min_rent=min_rent,
        max_rent=max_rent,
        bedrooms=bedrooms,
        location=location,
    )
    properties = [property_to_response(p) for p in qs]
    return PropertyListResponse(properties=properties, count=len(properties))


@router.get(
    "/mine",
    response={200: PropertyListResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="listMyProperties",
    summary="List the signed-in owner's properties",
)
def list_my_properties(request: AuthenticatedHttpRequest) -> PropertyListResponse:
    """Owner dashboard listing."""
    properties = [property_to_response(p) for p in search_properties(owner=request.auth)]
    return PropertyListResponse(properties=properties, count=len(properties))


@router.get(
    "/{property_id}",
    response={200: PropertyResponse, 404: ErrorResponse},
    operation_id="getProperty",
    summary="Get property details",
)
def get_property(request: HttpRequest, property_id: int) -> PropertyResponse:
    """Property detail page."""
    return property_to_response(_get_property(property_id))


@router.post(
    "",
    response={201: PropertyResponse, 401: ErrorResponse, 403: ErrorResponse},
    auth=bearer_auth,
    operation_id="createProperty",
    summary="Create a property listing",
)
def create_property_endpoint(
    request: AuthenticatedHttpRequest, payload: CreatePropertyRequest
) -> tuple[int, PropertyResponse]:
    """Property owners only."""
    user = request.auth
    if not user.is_property_owner:
        raise HttpError(403, "Only property owners can create listings")

    prop = create_property(user, payload.model_dump())
    return 201, property_to_response(prop)


@router.patch(
    "/{property_id}",
    response={
        200: PropertyResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="updateProperty",
    summary="Update a property listing",
)
def update_property_endpoint(
    request: AuthenticatedHttpRequest, property_id: int, payload: UpdatePropertyRequest
) -> PropertyResponse:
    """
    Owner of the listing only. Only fields present in the body change.

    Status must agree with billing: a listing with an active rent
    subscription stays rented, and one without cannot be marked rented.
    """
    prop = _get_owned_property(request.auth, property_id)
    changes = payload.model_dump(exclude_unset=True)

    new_status = changes.get("status")
    if new_status is not None and new_status != prop.status:
        has_active_rent = _has_active_rent(prop)
        if has_active_rent and new_status != Property.Status.RENTED:
            raise HttpError(400, "Property has an active rent subscription")
        if not has_active_rent and new_status == Property.Status.RENTED:
            raise HttpError(400, "Only an active rent subscription can mark a property rented")

    return property_to_response(update_property(prop, changes))


@router.delete(
    "/{property_id}",
    response={
        204: None,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="deleteProperty",
    summary="Delete a property listing",
)
def delete_property_endpoint(
    request: AuthenticatedHttpRequest, property_id: int
) -> tuple[int, None]:
    """
    Owner of the listing only.

    Refused while a tenant still has an active rent subscription on it.
    """
    prop = _get_owned_property(request.auth, property_id)

    if _has_active_rent(prop):
        raise HttpError(400, "Property has an active rent subscription")

    delete_property(prop)
    return 204, None
