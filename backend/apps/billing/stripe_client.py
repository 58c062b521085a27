"""
Stripe client configuration.

Each call returns a new StripeClient bound to the configured secret key.
Callers construct one per request and pass it into billing services; no
module-level API key is set.
"""

import stripe

from config.settings.base import settings

# Period bounds live on subscription items and invoice.subscription moved under
# invoice.parent from this version on; services read both shapes.
STRIPE_API_VERSION = "2025-06-30.basil"

# Stripe SDK has 80s default timeout which is reasonable for payment APIs.
# Retries are safe due to automatic idempotency key generation.
STRIPE_MAX_NETWORK_RETRIES = 2


def get_stripe_client() -> stripe.StripeClient:
    """Build a Stripe client for the current request."""
    return stripe.StripeClient(
        settings.STRIPE_SECRET_KEY,
        stripe_version=STRIPE_API_VERSION,
        max_network_retries=STRIPE_MAX_NETWORK_RETRIES,
    )
