"""
Billing models - rent subscriptions mirrored from Stripe.
"""

from django.conf import settings
from django.db import models

from apps.core.models import TimestampedModel


class RentPayment(TimestampedModel):
    """
    One tenant's monthly rent subscription for one property.

    Source of truth is Stripe - rows are written only by the webhook
    reconciler and read by the API for display. At most one row exists per
    (property, tenant); re-subscribing overwrites it.
    """

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        PAST_DUE = "past_due", "Past Due"
        CANCELLED = "cancelled", "Cancelled"

    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.SET_NULL,
        null=True,
        related_name="rent_payments",
    )
    tenant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="rent_payments",
    )
    stripe_customer_id = models.CharField(
        max_length=255,
        blank=True,
        db_index=True,
        help_text="Stripe customer ID, e.g. 'cus_xxx'",
    )
    stripe_subscription_id = models.CharField(
        max_length=255,
        blank=True,
        db_index=True,
        help_text="Stripe subscription ID, e.g. 'sub_xxx'",
    )
    monthly_rent = models.PositiveIntegerField(
        help_text="Monthly amount in minor currency units (pence)",
    )
    # Not limited to Status: other Stripe statuses (incomplete, trialing...) are stored verbatim
    status = models.CharField(
        max_length=50,
        default=Status.ACTIVE,
        db_index=True,
        help_text="Subscription status from Stripe",
    )
    current_period_start = models.DateTimeField(null=True, blank=True)
    current_period_end = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "rent_payments"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["property", "tenant"],
                name="rent_payments_property_tenant_unique",
            )
        ]

    def __str__(self) -> str:
        return f"RentPayment {self.stripe_subscription_id or self.id} - {self.status}"

    def is_active(self) -> bool:
        """Check if the subscription is currently paying."""
        return self.status == self.Status.ACTIVE
