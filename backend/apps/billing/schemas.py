"""
Billing API schemas - request/response types for rent payment endpoints.
"""

from ninja import Schema
from pydantic import ConfigDict, Field


class RentCheckoutRequest(Schema):
    """Request to start a monthly rent subscription for a property."""

    model_config = ConfigDict(populate_by_name=True)

    # Validated by the service so a missing id gets the checkout error shape
    property_id: str | int | None = Field(None, alias="propertyId")


class RentCheckoutResponse(Schema):
    """Hosted Stripe Checkout URL to redirect the tenant to."""

    url: str


class CheckoutErrorResponse(Schema):
    """Failure shape for rent checkout; always sent with status 500."""

    error: str
    details: str = "Check server logs for more information"


class RentPortalRequest(Schema):
    """Request to open the Stripe Billing Portal."""

    return_url: str | None = None  # Defaults to FRONTEND_URL


class RentPortalResponse(Schema):
    url: str


class VerifySessionRequest(Schema):
    """Checkout session id from the success page query string."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., min_length=1, alias="sessionId")


class VerifySessionResponse(Schema):
    success: bool  # True when the subscription is active
    status: str | None  # Stripe subscription status, None if no subscription yet


class RentPaymentResponse(Schema):
    """A rent subscription from the tenant's point of view."""

    id: int
    property_id: int | None
    property_title: str | None
    property_location: str | None
    stripe_subscription_id: str
    monthly_rent: int  # Minor units, e.g. 80000 for 800.00
    status: str  # 'active', 'past_due', 'cancelled', or a raw Stripe status
    current_period_start: str | None  # ISO timestamp
    current_period_end: str | None  # ISO timestamp
    created_at: str  # ISO timestamp


class RentPaymentListResponse(Schema):
    payments: list[RentPaymentResponse]
