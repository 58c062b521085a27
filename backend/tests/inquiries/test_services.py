"""
Tests for inquiry services.
"""

import pytest

from apps.inquiries.models import Inquiry, InquiryMessage
from apps.inquiries.services import (
    InquiryError,
    create_inquiry,
    inquiries_for_user,
    post_message,
    set_inquiry_status,
)
from tests.accounts.factories import StudentFactory
from tests.inquiries.factories import InquiryFactory
from tests.properties.factories import PropertyFactory


@pytest.mark.django_db
class TestCreateInquiry:
    def test_owner_taken_from_property(self, student) -> None:
        prop = PropertyFactory.create()

        inquiry = create_inquiry(student, prop, "  Can I view it on Friday?  ")

        assert inquiry.owner_id == prop.owner_id
        assert inquiry.student == student
        assert inquiry.message == "Can I view it on Friday?"
        assert inquiry.status == Inquiry.Status.PENDING

    def test_cannot_inquire_about_own_listing(self) -> None:
        prop = PropertyFactory.create()

        with pytest.raises(InquiryError):
            create_inquiry(prop.owner, prop, "Hello me")


@pytest.mark.django_db
class TestInquiriesForUser:
    def test_student_sees_sent(self, student) -> None:
        mine = InquiryFactory.create(student=student)
        InquiryFactory.create()

        assert list(inquiries_for_user(student)) == [mine]

    def test_owner_sees_received(self) -> None:
        inquiry = InquiryFactory.create()
        InquiryFactory.create()

        assert list(inquiries_for_user(inquiry.owner)) == [inquiry]


@pytest.mark.django_db
class TestPostMessage:
    def test_owner_reply_marks_responded(self) -> None:
        inquiry = InquiryFactory.create()

        post_message(inquiry, inquiry.owner, "Yes, still available")

        inquiry.refresh_from_db()
        assert inquiry.status == Inquiry.Status.RESPONDED
        assert InquiryMessage.objects.filter(inquiry=inquiry).count() == 1

    def test_student_follow_up_keeps_status(self) -> None:
        inquiry = InquiryFactory.create()

        post_message(inquiry, inquiry.student, "Any update?")

        inquiry.refresh_from_db()
        assert inquiry.status == Inquiry.Status.PENDING

    def test_outsider_rejected(self) -> None:
        inquiry = InquiryFactory.create()

        with pytest.raises(InquiryError):
            post_message(inquiry, StudentFactory.create(), "Hi")

    def test_closed_thread_rejected(self) -> None:
        inquiry = InquiryFactory.create(status=Inquiry.Status.CLOSED)

        with pytest.raises(InquiryError, match="closed"):
            post_message(inquiry, inquiry.student, "Hello?")


@pytest.mark.django_db
def test_set_inquiry_status() -> None:
    inquiry = InquiryFactory.create()

    set_inquiry_status(inquiry, Inquiry.Status.CLOSED)

    inquiry.refresh_from_db()
    assert inquiry.status == Inquiry.Status.CLOSED
