"""
Billing services - rent checkout and Stripe subscription reconciliation.

All Stripe API calls are isolated here for testability. Every function that
talks to Stripe takes the StripeClient as an argument; build it per request
with apps.billing.stripe_client.get_stripe_client().
External calls must NOT be inside database transactions.
"""

import json
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import stripe
from django.db.models import QuerySet
from django.utils import timezone as dj_timezone

from apps.accounts.models import User
from apps.billing.models import RentPayment
from apps.core.logging import get_logger
from apps.properties.models import Property
from config.settings.base import settings

logger = get_logger(__name__)

STRIPE_ACTIVE = "active"
CHECKOUT_SUCCESS_PATH = "/rent-payment-success?session_id={CHECKOUT_SESSION_ID}"


class BillingError(Exception):
    """Base exception for billing errors that carry a user-facing message."""


class CheckoutError(BillingError):
    """Raised when a rent checkout cannot be started."""


class SessionOwnershipError(BillingError):
    """Raised when a checkout session belongs to another tenant."""


def to_minor_units(amount: Decimal | int | float | str) -> int:
    """
    Convert a major-unit amount to minor units (pounds to pence).

    Rounds half away from zero at the cents boundary: 10.005 -> 1001.
    """
    cents = Decimal(str(amount)) * 100
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _as_dict(obj: Any) -> dict:
    """Normalize a Stripe object (or an already-plain dict) to a plain dict."""
    if isinstance(obj, dict):
        return obj
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return json.loads(str(obj))


def _metadata_id(stripe_object: dict, key: str) -> int | None:
    """Read an integer id from Stripe metadata; None when missing or malformed."""
    raw = (stripe_object.get("metadata") or {}).get(key)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("stripe_metadata_invalid_id", key=key, value=str(raw))
        return None


def _first_item(stripe_subscription: dict) -> dict:
    items = (stripe_subscription.get("items") or {}).get("data") or []
    return items[0] if items else {}


def _timestamp(value: int | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _period_bounds(stripe_subscription: dict) -> tuple[datetime | None, datetime | None]:
    """
    Current billing period of a subscription.

    Older API versions put the bounds on the subscription; newer ones put
    them on each subscription item.
    """
    item = _first_item(stripe_subscription)
    start = stripe_subscription.get("current_period_start") or item.get("current_period_start")
    end = stripe_subscription.get("current_period_end") or item.get("current_period_end")
    return _timestamp(start), _timestamp(end)


def _unit_amount(stripe_subscription: dict) -> int:
    price = _first_item(stripe_subscription).get("price") or {}
    return price.get("unit_amount") or 0


def _stripe_id(value: Any) -> str:
    """IDs may arrive as a bare string or as an expanded object."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.get("id", "") if isinstance(value, dict) else getattr(value, "id", "")


def _invoice_subscription_id(invoice: dict) -> str:
    subscription = invoice.get("subscription")
    if not subscription:
        parent = invoice.get("parent") or {}
        subscription = (parent.get("subscription_details") or {}).get("subscription")
    return _stripe_id(subscription)


# --- Checkout ---


def find_stripe_customer_id(client: stripe.StripeClient, email: str) -> str | None:
    """Return the Stripe customer registered with this email, if any."""
    customers = client.customers.list(params={"email": email, "limit": 1})
    data = customers["data"]
    return data[0]["id"] if data else None


def has_matching_stripe_subscription(
    client: stripe.StripeClient, customer_id: str, unit_amount: int
) -> str | None:
    """
    Look for an active Stripe subscription charging exactly `unit_amount`.

    Catches duplicates the webhook has not written locally yet. Matching is
    by price alone, so two properties with the same rent look identical here.

    Returns the matching subscription id, or None.
    """
    subscriptions = client.subscriptions.list(
        params={"customer": customer_id, "status": STRIPE_ACTIVE, "limit": 10}
    )
    for subscription in subscriptions["data"]:
        items = subscription["items"]["data"]
        if items and items[0]["price"]["unit_amount"] == unit_amount:
            return subscription["id"]
    return None


def create_rent_checkout(
    client: stripe.StripeClient,
    tenant: User,
    property_id: str | int | None,
    origin: str,
) -> str:
    """
    Open a Stripe Checkout session for a monthly rent subscription.

    Refuses when the tenant already pays for this property, either per our
    own rent_payments rows or per an active Stripe subscription at the same
    price. Nothing is written locally: the RentPayment row appears once
    Stripe sends the subscription webhook.

    Returns the hosted checkout URL.

    Raises:
        CheckoutError: Validation failure, unknown property, or duplicate subscription.
    """
    if property_id is None or str(property_id).strip() == "":
        raise CheckoutError("Property ID is required")
    if not tenant.email:
        raise CheckoutError("User authentication failed: No user email")

    try:
        property_pk = int(property_id)
    except (ValueError, TypeError):
        raise CheckoutError("Property not found: Property does not exist")

    existing = RentPayment.objects.filter(
        property_id=property_pk, tenant=tenant, status=RentPayment.Status.ACTIVE
    ).first()
    if existing:
        logger.info(
            "rent_checkout_duplicate_local",
            rent_payment_id=existing.id,
            property_id=property_pk,
            tenant_id=tenant.id,
        )
        raise CheckoutError(
            "You already have an active subscription for this property. "
            "Use 'Manage Subscription' to modify your existing subscription."
        )

    try:
        prop = Property.objects.get(id=property_pk)
    except Property.DoesNotExist:
        raise CheckoutError("Property not found: Property does not exist")

    unit_amount = to_minor_units(prop.rent)

    customer_id = find_stripe_customer_id(client, tenant.email)
    if customer_id:
        duplicate_id = has_matching_stripe_subscription(client, customer_id, unit_amount)
        if duplicate_id:
            logger.info(
                "rent_checkout_duplicate_stripe",
                stripe_subscription_id=duplicate_id,
                property_id=prop.id,
                tenant_id=tenant.id,
            )
            raise CheckoutError(
                "You already have an active subscription with the same rent amount. "
                "Please cancel your existing subscription before creating a new one."
            )

    metadata = {
        "property_id": str(prop.id),
        "tenant_id": str(tenant.id),
    }
    base_url = origin.rstrip("/")
    params: dict[str, Any] = {
        "mode": "subscription",
        "line_items": [
            {
                "price_data": {
                    "currency": settings.STRIPE_CURRENCY,
                    "product_data": {
                        "name": f"Monthly Rent - {prop.title}",
                        "description": f"Monthly rent payment for {prop.location}",
                    },
                    "unit_amount": unit_amount,
                    "recurring": {"interval": "month"},
                },
                "quantity": 1,
            }
        ],
        "success_url": f"{base_url}{CHECKOUT_SUCCESS_PATH}",
        "cancel_url": f"{base_url}/",
        "metadata": metadata,
        # Session metadata does not propagate; the subscription events need their own copy
        "subscription_data": {"metadata": metadata},
    }
    if customer_id:
        params["customer"] = customer_id
    else:
        params["customer_email"] = tenant.email

    session = client.checkout.sessions.create(params=params)

    logger.info(
        "rent_checkout_session_created",
        session_id=session["id"],
        property_id=prop.id,
        tenant_id=tenant.id,
        unit_amount=unit_amount,
    )
    return session["url"]


def create_rent_portal_session(client: stripe.StripeClient, tenant: User, return_url: str) -> str:
    """
    Create a Stripe Billing Portal session so the tenant can manage or cancel rent.

    Raises:
        BillingError: If the tenant has never checked out.
    """
    customer_id = find_stripe_customer_id(client, tenant.email)
    if not customer_id:
        raise BillingError("No billing account found")

    session = client.billing_portal.sessions.create(
        params={"customer": customer_id, "return_url": return_url}
    )
    return session["url"]


def verify_checkout_session(
    client: stripe.StripeClient, tenant: User, session_id: str
) -> tuple[bool, str | None]:
    """
    Confirm a completed checkout from the success page.

    Pulls the subscription straight from Stripe and applies it locally, so
    the tenant sees the result even if the webhook has not arrived yet.

    Returns (is_active, subscription_status).

    Raises:
        SessionOwnershipError: If the session was opened by another tenant.
    """
    session = _as_dict(client.checkout.sessions.retrieve(session_id))

    if _metadata_id(session, "tenant_id") != tenant.id:
        raise SessionOwnershipError("Checkout session does not belong to this user")

    subscription_id = _stripe_id(session.get("subscription"))
    if not subscription_id:
        return False, None

    subscription = _as_dict(client.subscriptions.retrieve(subscription_id))
    handle_subscription_upserted(subscription)

    status = subscription.get("status")
    return status == STRIPE_ACTIVE, status


def payments_for_tenant(tenant: User) -> QuerySet[RentPayment]:
    """Payment history for the tenant dashboard, newest first."""
    return (
        RentPayment.objects.filter(tenant=tenant)
        .select_related("property")
        .order_by("-created_at", "-id")
    )


# --- Webhook reconciliation ---


def handle_subscription_upserted(stripe_subscription: dict) -> RentPayment | None:
    """
    Handle customer.subscription.created / customer.subscription.updated.

    Upserts the RentPayment keyed by (property, tenant) from the subscription
    metadata, then marks the property rented if the subscription is active.
    Subscriptions without our metadata belong to something else in the
    Stripe account and are skipped.
    """
    subscription_id = stripe_subscription.get("id", "")
    property_id = _metadata_id(stripe_subscription, "property_id")
    tenant_id = _metadata_id(stripe_subscription, "tenant_id")

    if property_id is None or tenant_id is None:
        logger.info("stripe_subscription_missing_metadata", stripe_subscription_id=subscription_id)
        return None

    if not Property.objects.filter(id=property_id).exists():
        logger.warning(
            "stripe_subscription_unknown_property",
            stripe_subscription_id=subscription_id,
            property_id=property_id,
        )
        return None
    if not User.objects.filter(id=tenant_id).exists():
        logger.warning(
            "stripe_subscription_unknown_tenant",
            stripe_subscription_id=subscription_id,
            tenant_id=tenant_id,
        )
        return None

    status = stripe_subscription.get("status") or ""
    period_start, period_end = _period_bounds(stripe_subscription)

    payment, created = RentPayment.objects.update_or_create(
        property_id=property_id,
        tenant_id=tenant_id,
        defaults={
            "stripe_customer_id": _stripe_id(stripe_subscription.get("customer")),
            "stripe_subscription_id": subscription_id,
            "monthly_rent": _unit_amount(stripe_subscription),
            "status": status,
            "current_period_start": period_start,
            "current_period_end": period_end,
        },
    )

    logger.info(
        "rent_payment_upserted",
        rent_payment_id=payment.id,
        stripe_subscription_id=subscription_id,
        status=status,
        created=created,
    )

    if status == STRIPE_ACTIVE:
        Property.objects.filter(id=property_id).update(
            status=Property.Status.RENTED, updated_at=dj_timezone.now()
        )
        logger.info("property_marked_rented", property_id=property_id)

    return payment


def handle_subscription_deleted(stripe_subscription: dict) -> None:
    """
    Handle customer.subscription.deleted.

    Marks the matching RentPayment cancelled and puts the property back on
    the market.
    """
    subscription_id = stripe_subscription.get("id", "")

    updated = RentPayment.objects.filter(stripe_subscription_id=subscription_id).update(
        status=RentPayment.Status.CANCELLED, updated_at=dj_timezone.now()
    )
    if updated:
        logger.info("rent_payment_cancelled", stripe_subscription_id=subscription_id)
    else:
        logger.info("rent_payment_not_found", stripe_subscription_id=subscription_id)

    property_id = _metadata_id(stripe_subscription, "property_id")
    if property_id is None:
        return

    if Property.objects.filter(id=property_id).update(
        status=Property.Status.AVAILABLE, updated_at=dj_timezone.now()
    ):
        logger.info("property_marked_available", property_id=property_id)
    else:
        logger.warning(
            "stripe_subscription_unknown_property",
            stripe_subscription_id=subscription_id,
            property_id=property_id,
        )


def _set_status_for_invoice(invoice: dict, status: str) -> None:
    subscription_id = _invoice_subscription_id(invoice)
    if not subscription_id:
        logger.info("stripe_invoice_without_subscription", invoice_id=invoice.get("id"))
        return

    updated = RentPayment.objects.filter(stripe_subscription_id=subscription_id).update(
        status=status, updated_at=dj_timezone.now()
    )
    logger.info(
        "rent_payment_invoice_status",
        invoice_id=invoice.get("id"),
        stripe_subscription_id=subscription_id,
        status=status,
        matched=bool(updated),
    )


def handle_invoice_payment_succeeded(invoice: dict) -> None:
    """Handle invoice.payment_succeeded - also clears a previous past_due."""
    _set_status_for_invoice(invoice, RentPayment.Status.ACTIVE)


def handle_invoice_payment_failed(invoice: dict) -> None:
    """Handle invoice.payment_failed."""
    _set_status_for_invoice(invoice, RentPayment.Status.PAST_DUE)


def fetch_checkout_subscription(client: stripe.StripeClient, session: dict) -> dict | None:
    """
    Fetch the subscription a completed checkout session created.

    Applying it on checkout.session.completed means the row exists even
    when the subscription.created event is delayed or lost.
    """
    subscription_id = _stripe_id(session.get("subscription"))
    if not subscription_id:
        logger.info("stripe_checkout_without_subscription", session_id=session.get("id"))
        return None

    return _as_dict(client.subscriptions.retrieve(subscription_id))


def sync_rent_payment_from_stripe(client: stripe.StripeClient, payment: RentPayment) -> str:
    """
    Re-apply a RentPayment's subscription state straight from Stripe.

    Used to recover from missed webhooks. Returns the Stripe status.
    """
    subscription = _as_dict(client.subscriptions.retrieve(payment.stripe_subscription_id))
    status = subscription.get("status") or ""

    if status == "canceled":
        handle_subscription_deleted(subscription)
    else:
        handle_subscription_upserted(subscription)
    return status
