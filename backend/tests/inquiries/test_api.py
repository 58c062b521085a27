"""
Tests for inquiry API endpoints.
"""

import pytest
from ninja.errors import HttpError

from apps.inquiries.api import (
    create_inquiry_endpoint,
    list_inquiries,
    list_messages,
    post_message_endpoint,
    update_inquiry_status,
)
from apps.inquiries.models import Inquiry
from apps.inquiries.schemas import (
    CreateInquiryRequest,
    PostMessageRequest,
    UpdateInquiryStatusRequest,
)
from tests.accounts.factories import StudentFactory
from tests.inquiries.factories import InquiryFactory, InquiryMessageFactory
from tests.properties.factories import PropertyFactory


@pytest.mark.django_db
class TestCreateInquiry:
    def test_student_creates_inquiry(self, authenticated_request, student) -> None:
        prop = PropertyFactory.create(title="Attic Room")
        request = authenticated_request(student, method="post")

        status, result = create_inquiry_endpoint(
            request, CreateInquiryRequest(property_id=prop.id, message="Is it furnished?")
        )

        assert status == 201
        assert result.property_title == "Attic Room"
        assert result.property_rent == "800.00"
        assert result.owner_id == prop.owner_id

    def test_owner_cannot_create(self, authenticated_request, owner) -> None:
        prop = PropertyFactory.create()
        request = authenticated_request(owner, method="post")

        with pytest.raises(HttpError) as exc_info:
            create_inquiry_endpoint(
                request, CreateInquiryRequest(property_id=prop.id, message="Hi")
            )

        assert exc_info.value.status_code == 403

    def test_unknown_property_returns_404(self, authenticated_request, student) -> None:
        request = authenticated_request(student, method="post")

        with pytest.raises(HttpError) as exc_info:
            create_inquiry_endpoint(
                request, CreateInquiryRequest(property_id=999999, message="Hi")
            )

        assert exc_info.value.status_code == 404


@pytest.mark.django_db
class TestListInquiries:
    def test_lists_for_student(self, authenticated_request, student) -> None:
        inquiry = InquiryFactory.create(student=student)
        InquiryFactory.create()

        result = list_inquiries(authenticated_request(student))

        assert [i.id for i in result.inquiries] == [inquiry.id]


@pytest.mark.django_db
class TestUpdateInquiryStatus:
    def test_owner_closes_inquiry(self, authenticated_request) -> None:
        inquiry = InquiryFactory.create()
        request = authenticated_request(inquiry.owner, method="patch")

        result = update_inquiry_status(
            request, inquiry.id, UpdateInquiryStatusRequest(status="closed")
        )

        assert result.status == "closed"

    def test_student_is_forbidden(self, authenticated_request) -> None:
        inquiry = InquiryFactory.create()
        request = authenticated_request(inquiry.student, method="patch")

        with pytest.raises(HttpError) as exc_info:
            update_inquiry_status(request, inquiry.id, UpdateInquiryStatusRequest(status="closed"))

        assert exc_info.value.status_code == 403

    def test_outsider_gets_404(self, authenticated_request) -> None:
        inquiry = InquiryFactory.create()
        request = authenticated_request(StudentFactory.create(), method="patch")

        with pytest.raises(HttpError) as exc_info:
            update_inquiry_status(request, inquiry.id, UpdateInquiryStatusRequest(status="closed"))

        assert exc_info.value.status_code == 404


@pytest.mark.django_db
class TestMessages:
    def test_lists_thread_oldest_first(self, authenticated_request) -> None:
        inquiry = InquiryFactory.create()
        first = InquiryMessageFactory.create(inquiry=inquiry, message="first")
        second = InquiryMessageFactory.create(
            inquiry=inquiry, sender=inquiry.owner, message="second"
        )

        result = list_messages(authenticated_request(inquiry.student), inquiry.id)

        assert [m.id for m in result.messages] == [first.id, second.id]

    def test_owner_reply(self, authenticated_request) -> None:
        inquiry = InquiryFactory.create()
        request = authenticated_request(inquiry.owner, method="post")

        status, result = post_message_endpoint(
            request, inquiry.id, PostMessageRequest(message="Come by at 5")
        )

        assert status == 201
        assert result.sender_id == inquiry.owner_id
        inquiry.refresh_from_db()
        assert inquiry.status == Inquiry.Status.RESPONDED

    def test_closed_thread_returns_400(self, authenticated_request) -> None:
        inquiry = InquiryFactory.create(status=Inquiry.Status.CLOSED)
        request = authenticated_request(inquiry.student, method="post")

        with pytest.raises(HttpError) as exc_info:
            post_message_endpoint(request, inquiry.id, PostMessageRequest(message="Hello?"))

        assert exc_info.value.status_code == 400
