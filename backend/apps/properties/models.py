"""
Property listings.
"""

from django.conf import settings
from django.db import models

from apps.core.models import TimestampedModel


class Property(TimestampedModel):
    """
    A rentable unit listed by a property owner.

    Status tracks rent subscriptions: the Stripe reconciler flips it to
    RENTED when a subscription becomes active and back to AVAILABLE when
    the subscription is deleted.
    """

    class PropertyType(models.TextChoices):
        HOUSE = "house", "House"
        APARTMENT = "apartment", "Apartment"
        STUDIO = "studio", "Studio"
        SHARED_ROOM = "shared_room", "Shared Room"

    class Status(models.TextChoices):
        AVAILABLE = "available", "Available"
        RENTED = "rented", "Rented"
        PENDING = "pending", "Pending"

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    rent = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Monthly rent in major currency units, e.g. 800.00",
    )
    location = models.CharField(max_length=255)
    bedrooms = models.PositiveSmallIntegerField(default=1)
    bathrooms = models.PositiveSmallIntegerField(default=1)
    property_type = models.CharField(max_length=20, choices=PropertyType.choices)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.AVAILABLE,
        db_index=True,
    )
    amenities = models.JSONField(default=list, blank=True)
    available_from = models.DateField()
    images = models.JSONField(
        default=list,
        blank=True,
        help_text="Public URLs of uploaded images",
    )

    class Meta:
        db_table = "properties"
        ordering = ["-created_at"]
        verbose_name_plural = "properties"

    def __str__(self) -> str:
        return f"{self.title} ({self.location})"
