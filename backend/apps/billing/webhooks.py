"""
Stripe webhook handler.

Keeps rent_payments and property availability in step with Stripe.
This is a separate view (not Django Ninja) for raw request handling
needed to verify Stripe signatures.
"""

import json

import stripe
from django.db import transaction
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.billing.services import (
    fetch_checkout_subscription,
    handle_invoice_payment_failed,
    handle_invoice_payment_succeeded,
    handle_subscription_deleted,
    handle_subscription_upserted,
)
from apps.billing.stripe_client import get_stripe_client
from apps.core.logging import get_logger
from apps.core.webhooks import mark_webhook_processed
from config.settings.base import settings

logger = get_logger(__name__)

WEBHOOK_SOURCE = "stripe"


def _dispatch(event: dict, checkout_subscription: dict | None = None) -> None:
    event_type = event["type"]
    data_object = event["data"]["object"]

    match event_type:
        case "customer.subscription.created" | "customer.subscription.updated":
            handle_subscription_upserted(data_object)

        case "customer.subscription.deleted":
            handle_subscription_deleted(data_object)

        case "invoice.payment_succeeded":
            handle_invoice_payment_succeeded(data_object)

        case "invoice.payment_failed":
            handle_invoice_payment_failed(data_object)

        case "checkout.session.completed":
            if checkout_subscription:
                handle_subscription_upserted(checkout_subscription)

        case _:
            logger.debug("stripe_webhook_unhandled_event", event_type=event_type)


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> JsonResponse:
    """
    Handle Stripe webhook events.

    Verifies the signature over the raw body, then dispatches. Every
    authenticated event is acknowledged with 200 even when no local row
    matched; only verification failures and handler crashes return an
    error status, which makes Stripe redeliver.
    """
    payload = request.body
    sig_header = request.headers.get("Stripe-Signature")

    if not sig_header:
        logger.warning("stripe_webhook_missing_signature")
        return JsonResponse({"error": "Missing Stripe signature"}, status=400)

    if not settings.STRIPE_WEBHOOK_SECRET:
        logger.error("stripe_webhook_secret_not_configured")
        return JsonResponse({"error": "Webhook not configured"}, status=500)

    # Verify only, then parse with json so handlers get plain dicts rather than StripeObjects
    try:
        stripe.WebhookSignature.verify_header(
            payload.decode("utf-8"),
            sig_header,
            settings.STRIPE_WEBHOOK_SECRET,
            stripe.Webhook.DEFAULT_TOLERANCE,
        )
    except (stripe.SignatureVerificationError, UnicodeDecodeError) as e:
        logger.warning("stripe_webhook_invalid_signature", error=str(e))
        return JsonResponse({"error": "Webhook signature verification failed"}, status=400)

    try:
        event = json.loads(payload)
        event_id = event["id"]
        event_type = event["type"]
        event["data"]["object"]
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("stripe_webhook_invalid_payload", error=str(e))
        return JsonResponse({"error": "Invalid payload"}, status=400)

    logger.info("stripe_webhook_received", event_id=event_id, event_type=event_type)

    try:
        # Stripe calls stay outside the transaction below
        checkout_subscription = None
        if event_type == "checkout.session.completed":
            checkout_subscription = fetch_checkout_subscription(
                get_stripe_client(), event["data"]["object"]
            )

        with transaction.atomic():
            if not mark_webhook_processed(WEBHOOK_SOURCE, event_id):
                logger.info("stripe_webhook_duplicate", event_id=event_id)
                return JsonResponse({"received": True})
            _dispatch(event, checkout_subscription)
    except Exception as e:
        logger.exception("stripe_webhook_handler_error", event_id=event_id, event_type=event_type)
        # Marker rolled back with the transaction; Stripe will retry
        return JsonResponse({"error": str(e)}, status=500)

    return JsonResponse({"received": True})
