"""
Property API schemas - request/response types for listing endpoints.
"""

from datetime import date
from decimal import Decimal
from typing import Literal

from ninja import Schema
from pydantic import Field, field_validator

PropertyTypeLiteral = Literal["house", "apartment", "studio", "shared_room"]
PropertyStatusLiteral = Literal["available", "rented", "pending"]


class PropertyResponse(Schema):
    """A property listing."""

    id: int
    owner_id: int
    title: str
    description: str | None
    rent: Decimal  # Major units, e.g. 800.00
    location: str
    bedrooms: int
    bathrooms: int
    property_type: str
    status: str
    amenities: list[str]
    available_from: date
    images: list[str]
    created_at: str  # ISO timestamp
    updated_at: str  # ISO timestamp


class CreatePropertyRequest(Schema):
    """New listing posted by a property owner."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    rent: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    location: str = Field(..., min_length=1, max_length=255)
    bedrooms: int = Field(default=1, ge=0)
    bathrooms: int = Field(default=1, ge=0)
    property_type: PropertyTypeLiteral
    amenities: list[str] = []
    available_from: date
    images: list[str] = []


class UpdatePropertyRequest(Schema):
    """Partial update; omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    rent: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    bedrooms: int | None = Field(default=None, ge=0)
    bathrooms: int | None = Field(default=None, ge=0)
    property_type: PropertyTypeLiteral | None = None
    status: PropertyStatusLiteral | None = None
    amenities: list[str] | None = None
    available_from: date | None = None
    images: list[str] | None = None

    @field_validator(
        "title",
        "rent",
        "location",
        "bedrooms",
        "bathrooms",
        "property_type",
        "status",
        "amenities",
        "available_from",
        "images",
        mode="before",
    )
    @classmethod
    def reject_null(cls, value: object) -> object:
        # Only description may be cleared; the other columns are NOT NULL
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class PropertyListResponse(Schema):
    """Listings matching the filters."""

    properties: list[PropertyResponse]
    count: int
