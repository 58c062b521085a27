"""
Core models - shared base classes and utilities.
"""

from django.db import models


class TimestampedModel(models.Model):
    """
    Abstract base model with created_at/updated_at timestamps.

    All business entities should inherit from this.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ProcessedWebhook(models.Model):
    """
    Marker for an inbound webhook event that has already been applied.

    The (source, event_id) unique constraint is what makes redelivered
    events no-ops.
    """

    source = models.CharField(max_length=50, help_text="Webhook provider, e.g. 'stripe'")
    event_id = models.CharField(max_length=255, help_text="Provider event ID, e.g. 'evt_xxx'")
    processed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["source", "event_id"],
                name="core_processedwebhook_source_event_unique",
            )
        ]

    def __str__(self) -> str:
        return f"{self.source}:{self.event_id}"
