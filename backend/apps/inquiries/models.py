"""
Inquiry threads between students and property owners.
"""

from django.conf import settings
from django.db import models

from apps.core.models import TimestampedModel


class Inquiry(TimestampedModel):
    """
    A student's question about a listing, addressed to its owner.

    owner is copied from the property at creation so the thread stays
    addressable even if the listing changes hands.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        RESPONDED = "responded", "Responded"
        CLOSED = "closed", "Closed"

    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="inquiries",
    )
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="inquiries_sent",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="inquiries_received",
    )
    message = models.TextField()
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )

    class Meta:
        db_table = "inquiries"
        ordering = ["-created_at"]
        verbose_name_plural = "inquiries"

    def __str__(self) -> str:
        return f"Inquiry {self.id} on property {self.property_id} ({self.status})"

    def is_participant(self, user) -> bool:
        return user.id in (self.student_id, self.owner_id)


class InquiryMessage(models.Model):
    """A follow-up message in an inquiry thread."""

    inquiry = models.ForeignKey(
        Inquiry,
        on_delete=models.CASCADE,
        related_name="messages",
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="inquiry_messages",
    )
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "inquiry_messages"
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"Message {self.id} in inquiry {self.inquiry_id}"
