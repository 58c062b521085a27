"""
Shared pytest fixtures for all tests.

Factories
---------
Import factories directly from their modules:

    from tests.accounts.factories import UserFactory, StudentFactory, OwnerFactory
    from tests.properties.factories import PropertyFactory
    from tests.inquiries.factories import InquiryFactory
    from tests.billing.factories import RentPaymentFactory

Example usage:

    @pytest.mark.django_db
    def test_something():
        owner = OwnerFactory.create()
        prop = PropertyFactory.create(owner=owner, rent=Decimal("800.00"))
"""

from collections.abc import Callable
from typing import Any, cast

import pytest
from django.test import Client, RequestFactory
from django.test.client import WSGIRequest  # type: ignore[attr-defined]

from apps.core.types import AuthenticatedHttpRequest


def make_request_with_auth(request: "WSGIRequest", user: Any) -> AuthenticatedHttpRequest:
    """
    Set request.auth the way BearerAuth does and return the typed request.

    Example:
        request = request_factory.get("/api/v1/auth/me")
        request = make_request_with_auth(request, user)
    """
    request.auth = user  # type: ignore[attr-defined]
    return cast(AuthenticatedHttpRequest, request)


@pytest.fixture
def request_factory() -> RequestFactory:
    """
    Django request factory for calling Ninja endpoint functions directly.

    Example:
        def test_endpoint(request_factory, student):
            request = make_request_with_auth(request_factory.get("/"), student)
            result = my_endpoint(request)
    """
    return RequestFactory()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Example:
        def test_api_returns_200(api_client):
            response = api_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    return Client()


@pytest.fixture
def authenticated_request(
    request_factory: RequestFactory,
) -> Callable[..., AuthenticatedHttpRequest]:
    """
    Factory fixture for creating authenticated requests.

    Example:
        def test_authenticated_endpoint(authenticated_request, owner):
            request = authenticated_request(owner, method="post", data={"title": "Flat"})
            result = my_endpoint(request, payload)
    """
    from tests.accounts.factories import UserFactory

    def _make_request(
        user: Any = None,
        method: str = "get",
        path: str = "/",
        data: dict | None = None,
        content_type: str = "application/json",
    ) -> AuthenticatedHttpRequest:
        if user is None:
            user = UserFactory.create()

        method_func = getattr(request_factory, method.lower())
        kwargs: dict[str, Any] = {}
        if data is not None:
            kwargs["data"] = data
            kwargs["content_type"] = content_type

        return make_request_with_auth(method_func(path, **kwargs), user)

    return _make_request


@pytest.fixture
def student(db):
    """A user who picked the student role."""
    from tests.accounts.factories import StudentFactory

    return StudentFactory.create()


@pytest.fixture
def owner(db):
    """A user who picked the property owner role."""
    from tests.accounts.factories import OwnerFactory

    return OwnerFactory.create()
