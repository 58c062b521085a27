"""
Property services - listing queries and owner-side CRUD.
"""

from decimal import Decimal
from typing import Any

from django.db.models import Q, QuerySet

from apps.accounts.models import User
from apps.core.logging import get_logger
from apps.properties.models import Property

logger = get_logger(__name__)


def search_properties(
    search: str | None = None,
    property_type: str | None = None,
    status: str | None = None,
    min_rent: Decimal | None = None,
    max_rent: Decimal | None = None,
    bedrooms: int | None = None,
    location: str | None = None,
    owner: User | None = None,
) -> QuerySet[Property]:
    """
    Build the listing query for the browse page.

    search matches title, location or description case-insensitively;
    bedrooms is a minimum. Results are newest first.
    """
    qs = Property.objects.all()

    if owner is not None:
        qs = qs.filter(owner=owner)
    if search:
        term = search.strip()
        qs = qs.filter(
            Q(title__icontains=term) | Q(location__icontains=term) | Q(description__icontains=term)
        )
    if property_type:
        qs = qs.filter(property_type=property_type)
    if status:
        qs = qs.filter(status=status)
    if min_rent is not None:
        qs = qs.filter(rent__gte=min_rent)
    if max_rent is not None:
        qs = qs.filter(rent__lte=max_rent)
    if bedrooms is not None:
        qs = qs.filter(bedrooms__gte=bedrooms)
    if location:
        qs = qs.filter(location__icontains=location.strip())

    return qs.order_by("-created_at", "-id")


def create_property(owner: User, data: dict[str, Any]) -> Property:
    """Create a listing owned by `owner`. New listings start AVAILABLE."""
    prop = Property.objects.create(owner=owner, status=Property.Status.AVAILABLE, **data)
    logger.info("property_created", property_id=prop.id, owner_id=owner.id)
    return prop


def update_property(prop: Property, changes: dict[str, Any]) -> Property:
    """Apply a partial update; keys not present in `changes` are untouched."""
    if not changes:
        return prop

    for field, value in changes.items():
        setattr(prop, field, value)
    prop.save(update_fields=[*changes.keys(), "updated_at"])

    logger.info("property_updated", property_id=prop.id, fields=sorted(changes))
    return prop


def delete_property(prop: Property) -> None:
    """Delete a listing and its inquiries. Payment rows keep a null property."""
    property_id = prop.id
    prop.delete()
    logger.info("property_deleted", property_id=property_id)
