"""
Billing API endpoints.

Handles rent checkout, the Stripe Billing Portal and the tenant's payment
history. Subscription state itself is written by the Stripe webhook.
"""

import stripe
from django.http import HttpRequest
from ninja import Router
from ninja.errors import HttpError
from pydantic import ValidationError

from apps.accounts.services import AuthenticationError, resolve_session_user
from apps.billing.models import RentPayment
from apps.billing.schemas import (
    CheckoutErrorResponse,
    RentCheckoutRequest,
    RentCheckoutResponse,
    RentPaymentListResponse,
    RentPaymentResponse,
    RentPortalRequest,
    RentPortalResponse,
    VerifySessionRequest,
    VerifySessionResponse,
)
from apps.billing.services import (
    BillingError,
    CheckoutError,
    SessionOwnershipError,
    create_rent_checkout,
    create_rent_portal_session,
    payments_for_tenant,
    verify_checkout_session,
)
from apps.billing.stripe_client import get_stripe_client
from apps.core.logging import bind_contextvars, get_logger
from apps.core.schemas import ErrorResponse
from apps.core.security import BearerAuth
from apps.core.types import AuthenticatedHttpRequest
from config.settings.base import settings

logger = get_logger(__name__)

router = Router(tags=["billing"])
bearer_auth = BearerAuth()


def _request_origin(request: HttpRequest) -> str:
    return request.headers.get("Origin") or settings.FRONTEND_URL


def _bearer_token(request: HttpRequest) -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return ""
    return token.strip()


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def payment_to_response(payment: RentPayment) -> RentPaymentResponse:
    prop = payment.property
    return RentPaymentResponse(
        id=payment.id,
        property_id=payment.property_id,
        property_title=prop.title if prop else None,
        property_location=prop.location if prop else None,
        stripe_subscription_id=payment.stripe_subscription_id,
        monthly_rent=payment.monthly_rent,
        status=payment.status,
        current_period_start=_iso(payment.current_period_start),
        current_period_end=_iso(payment.current_period_end),
        created_at=payment.created_at.isoformat(),
    )


@router.post(
    "/rent-checkout",
    response={200: RentCheckoutResponse, 500: CheckoutErrorResponse},
    operation_id="createRentCheckout",
    summary="Start a monthly rent subscription",
)
def create_rent_checkout_endpoint(request: HttpRequest):
    """
    Create a Stripe Checkout session for a property's monthly rent.

    Authenticates the bearer token itself instead of using BearerAuth:
    every failure, including a bad token, is reported as a 500 with an
    error message the frontend shows to the tenant.
    """
    try:
        try:
            payload = RentCheckoutRequest.model_validate_json(request.body or b"{}")
        except ValidationError:
            raise CheckoutError("Property ID is required")

        if payload.property_id is None or str(payload.property_id).strip() == "":
            raise CheckoutError("Property ID is required")

        token = _bearer_token(request)
        if not token:
            raise CheckoutError("Authorization header is required")

        try:
            tenant = resolve_session_user(token)
        except AuthenticationError as e:
            raise CheckoutError(f"User authentication failed: {e}")

        bind_contextvars(**{"usr.id": str(tenant.id)})

        url = create_rent_checkout(
            get_stripe_client(),
            tenant=tenant,
            property_id=payload.property_id,
            origin=_request_origin(request),
        )
    except CheckoutError as e:
        logger.warning("rent_checkout_rejected", reason=str(e))
        return 500, CheckoutErrorResponse(error=str(e))
    except stripe.StripeError as e:
        logger.exception("rent_checkout_stripe_error", stripe_error=e.user_message or str(e))
        return 500, CheckoutErrorResponse(error=str(e.user_message or e))
    except Exception:
        logger.exception("rent_checkout_failed")
        return 500, CheckoutErrorResponse(error="Failed to create checkout session")

    return 200, RentCheckoutResponse(url=url)


@router.post(
    "/rent-portal",
    response={200: RentPortalResponse, 400: ErrorResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="createRentPortalSession",
    summary="Open the Stripe Billing Portal",
)
def create_rent_portal_endpoint(
    request: AuthenticatedHttpRequest, payload: RentPortalRequest
) -> RentPortalResponse:
    """Let a tenant manage or cancel their rent subscriptions on Stripe."""
    return_url = payload.return_url or settings.FRONTEND_URL

    try:
        url = create_rent_portal_session(get_stripe_client(), request.auth, return_url)
    except BillingError as e:
        raise HttpError(400, str(e))
    except Exception:
        logger.exception("rent_portal_session_failed")
        raise HttpError(500, "Failed to create portal session")

    return RentPortalResponse(url=url)


@router.post(
    "/verify-session",
    response={200: VerifySessionResponse, 401: ErrorResponse, 403: ErrorResponse},
    auth=bearer_auth,
    operation_id="verifyCheckoutSession",
    summary="Confirm a completed rent checkout",
)
def verify_session_endpoint(
    request: AuthenticatedHttpRequest, payload: VerifySessionRequest
) -> VerifySessionResponse:
    """
    Sync the subscription behind a checkout session from Stripe.

    Called by the success page so the payment shows up even before the
    webhook arrives.
    """
    try:
        success, status = verify_checkout_session(
            get_stripe_client(), request.auth, payload.session_id
        )
    except SessionOwnershipError as e:
        raise HttpError(403, str(e))
    except Exception:
        logger.exception("checkout_session_verification_failed", session_id=payload.session_id)
        raise HttpError(500, "Failed to verify checkout session")

    return VerifySessionResponse(success=success, status=status)


@router.get(
    "/payments",
    response={200: RentPaymentListResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="listRentPayments",
    summary="List the current user's rent payments",
)
def list_rent_payments(request: AuthenticatedHttpRequest) -> RentPaymentListResponse:
    payments = payments_for_tenant(request.auth)
    return RentPaymentListResponse(payments=[payment_to_response(p) for p in payments])
