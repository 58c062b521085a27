"""
Inquiry services - opening threads, replying, status changes.
"""

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.core.logging import get_logger
from apps.inquiries.models import Inquiry, InquiryMessage
from apps.properties.models import Property

logger = get_logger(__name__)


class InquiryError(Exception):
    """Raised when an inquiry action violates marketplace rules."""


def create_inquiry(student: User, prop: Property, message: str) -> Inquiry:
    """Open an inquiry from a student to the listing's owner."""
    if prop.owner_id == student.id:
        raise InquiryError("You cannot send an inquiry about your own listing")

    inquiry = Inquiry.objects.create(
        property=prop,
        student=student,
        owner_id=prop.owner_id,
        message=message.strip(),
    )
    logger.info(
        "inquiry_created",
        inquiry_id=inquiry.id,
        property_id=prop.id,
        student_id=student.id,
    )
    return inquiry


def inquiries_for_user(user: User) -> QuerySet[Inquiry]:
    """Students see what they sent, owners what they received."""
    qs = Inquiry.objects.select_related("property", "student", "owner")
    if user.is_property_owner:
        qs = qs.filter(owner=user)
    else:
        qs = qs.filter(student=user)
    return qs.order_by("-created_at", "-id")


def set_inquiry_status(inquiry: Inquiry, status: str) -> Inquiry:
    if inquiry.status != status:
        inquiry.status = status
        inquiry.save(update_fields=["status", "updated_at"])
        logger.info("inquiry_status_changed", inquiry_id=inquiry.id, status=status)
    return inquiry


def post_message(inquiry: Inquiry, sender: User, message: str) -> InquiryMessage:
    """
    Append a message to the thread.

    The owner's first reply to a pending inquiry marks it responded.
    Closed threads accept no new messages.
    """
    if not inquiry.is_participant(sender):
        raise InquiryError("Only the student and the owner can post to this inquiry")
    if inquiry.status == Inquiry.Status.CLOSED:
        raise InquiryError("This inquiry is closed")

    with transaction.atomic():
        msg = InquiryMessage.objects.create(
            inquiry=inquiry,
            sender=sender,
            message=message.strip(),
        )
        if sender.id == inquiry.owner_id and inquiry.status == Inquiry.Status.PENDING:
            set_inquiry_status(inquiry, Inquiry.Status.RESPONDED)

    return msg
