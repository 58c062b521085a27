"""
Tests for property API endpoints.
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from ninja.errors import HttpError

from apps.properties.api import (
    create_property_endpoint,
    delete_property_endpoint,
    get_property,
    update_property_endpoint,
)
from apps.properties.models import Property
from apps.properties.schemas import CreatePropertyRequest, UpdatePropertyRequest
from tests.accounts.factories import OwnerFactory
from tests.billing.factories import RentPaymentFactory
from tests.properties.factories import PropertyFactory


def new_listing(**overrides) -> CreatePropertyRequest:
    data = {
        "title": "Two-bed near campus",
        "description": "Furnished",
        "rent": "800.00",
        "location": "Leeds",
        "bedrooms": 2,
        "bathrooms": 1,
        "property_type": "apartment",
        "amenities": ["wifi", "laundry"],
        "available_from": "2026-09-01",
    }
    data.update(overrides)
    return CreatePropertyRequest(**data)


@pytest.mark.django_db
class TestListProperties:
    def test_public_listing_with_filters(self, api_client) -> None:
        PropertyFactory.create(rent=Decimal("400.00"))
        match = PropertyFactory.create(rent=Decimal("800.00"), bedrooms=2)

        response = api_client.get("/api/v1/properties", {"min_rent": "500", "bedrooms": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["properties"][0]["id"] == match.id
        assert Decimal(body["properties"][0]["rent"]) == Decimal("800.00")

    @patch("apps.core.security.resolve_session_user")
    def test_mine_lists_only_own(self, mock_resolve: MagicMock, api_client, owner) -> None:
        mock_resolve.return_value = owner
        mine = PropertyFactory.create(owner=owner)
        PropertyFactory.create()

        response = api_client.get("/api/v1/properties/mine", HTTP_AUTHORIZATION="Bearer t")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["properties"]] == [mine.id]


@pytest.mark.django_db
class TestGetProperty:
    def test_returns_property(self, request_factory) -> None:
        prop = PropertyFactory.create(title="Loft")

        result = get_property(request_factory.get("/"), prop.id)

        assert result.title == "Loft"

    def test_missing_returns_404(self, api_client) -> None:
        response = api_client.get("/api/v1/properties/999999")

        assert response.status_code == 404


@pytest.mark.django_db
class TestCreateProperty:
    def test_owner_creates_listing(self, authenticated_request, owner) -> None:
        request = authenticated_request(owner, method="post")

        status, result = create_property_endpoint(request, new_listing())

        assert status == 201
        assert result.owner_id == owner.id
        assert result.status == "available"
        assert Property.objects.filter(owner=owner).count() == 1

    def test_student_is_forbidden(self, authenticated_request, student) -> None:
        request = authenticated_request(student, method="post")

        with pytest.raises(HttpError) as exc_info:
            create_property_endpoint(request, new_listing())

        assert exc_info.value.status_code == 403

    def test_rent_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            new_listing(rent="0")


@pytest.mark.django_db
class TestUpdateProperty:
    def test_owner_updates_given_fields(self, authenticated_request) -> None:
        prop = PropertyFactory.create(title="Before")
        request = authenticated_request(prop.owner, method="patch")

        result = update_property_endpoint(
            request, prop.id, UpdatePropertyRequest(status="pending")
        )

        assert result.status == "pending"
        assert result.title == "Before"

    def test_other_owner_is_forbidden(self, authenticated_request) -> None:
        prop = PropertyFactory.create()
        request = authenticated_request(OwnerFactory.create(), method="patch")

        with pytest.raises(HttpError) as exc_info:
            update_property_endpoint(request, prop.id, UpdatePropertyRequest(title="Mine now"))

        assert exc_info.value.status_code == 403

    @patch("apps.core.security.resolve_session_user")
    def test_null_for_required_column_returns_422(
        self, mock_resolve: MagicMock, api_client
    ) -> None:
        prop = PropertyFactory.create(title="Before")
        mock_resolve.return_value = prop.owner

        response = api_client.patch(
            f"/api/v1/properties/{prop.id}",
            data={"title": None},
            content_type="application/json",
            HTTP_AUTHORIZATION="Bearer t",
        )

        assert response.status_code == 422
        prop.refresh_from_db()
        assert prop.title == "Before"

    def test_description_can_be_cleared(self, authenticated_request) -> None:
        prop = PropertyFactory.create(description="Furnished")
        request = authenticated_request(prop.owner, method="patch")

        result = update_property_endpoint(
            request, prop.id, UpdatePropertyRequest(description=None)
        )

        assert result.description is None

    def test_status_change_refused_while_rent_is_active(self, authenticated_request) -> None:
        payment = RentPaymentFactory.create()
        Property.objects.filter(id=payment.property_id).update(status=Property.Status.RENTED)
        request = authenticated_request(payment.property.owner, method="patch")

        with pytest.raises(HttpError) as exc_info:
            update_property_endpoint(
                request, payment.property_id, UpdatePropertyRequest(status="available")
            )

        assert exc_info.value.status_code == 400
        assert Property.objects.get(id=payment.property_id).status == Property.Status.RENTED

    def test_cannot_mark_rented_without_active_rent(self, authenticated_request) -> None:
        prop = PropertyFactory.create()
        request = authenticated_request(prop.owner, method="patch")

        with pytest.raises(HttpError) as exc_info:
            update_property_endpoint(request, prop.id, UpdatePropertyRequest(status="rented"))

        assert exc_info.value.status_code == 400
        prop.refresh_from_db()
        assert prop.status == Property.Status.AVAILABLE
        assert exc_info.value.status_code == 403


@pytest.mark.django_db
class TestDeleteProperty:
    def test_owner_deletes_listing(self, authenticated_request) -> None:
        prop = PropertyFactory.create()
        request = authenticated_request(prop.owner, method="delete")

        status, _ = delete_property_endpoint(request, prop.id)

        assert status == 204
        assert not Property.objects.filter(id=prop.id).exists()

    def test_refused_while_rent_is_active(self, authenticated_request) -> None:
        payment = RentPaymentFactory.create()
        request = authenticated_request(payment.property.owner, method="delete")

        with pytest.raises(HttpError) as exc_info:
            delete_property_endpoint(request, payment.property_id)

        assert exc_info.value.status_code == 400
        assert Property.objects.filter(id=payment.property_id).exists()
