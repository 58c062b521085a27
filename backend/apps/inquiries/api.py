"""
Inquiry API endpoints.

Students open inquiries on listings; owners answer and close them.
Both sides exchange follow-up messages on the thread.
"""

from ninja import Router
from ninja.errors import HttpError

from apps.core.schemas import ErrorResponse
from apps.core.security import BearerAuth
from apps.core.types import AuthenticatedHttpRequest
from apps.inquiries.models import Inquiry, InquiryMessage
from apps.inquiries.schemas import (
    CreateInquiryRequest,
    InquiryListResponse,
    InquiryMessageListResponse,
    InquiryMessageResponse,
    InquiryResponse,
    PostMessageRequest,
    UpdateInquiryStatusRequest,
)
from apps.inquiries.services import (
    InquiryError,
    create_inquiry,
    inquiries_for_user,
    post_message,
    set_inquiry_status,
)
from apps.properties.models import Property

router = Router(tags=["inquiries"])
bearer_auth = BearerAuth()


def _inquiry_response(inquiry: Inquiry) -> InquiryResponse:
    return InquiryResponse(
        id=inquiry.id,
        property_id=inquiry.property_id,
        property_title=inquiry.property.title,
        property_rent=str(inquiry.property.rent),
        student_id=inquiry.student_id,
        student_name=inquiry.student.full_name or "Student",
        owner_id=inquiry.owner_id,
        owner_name=inquiry.owner.full_name or "Property Owner",
        message=inquiry.message,
        status=inquiry.status,
        created_at=inquiry.created_at.isoformat(),
    )


def _message_response(msg: InquiryMessage) -> InquiryMessageResponse:
    return InquiryMessageResponse(
        id=msg.id,
        inquiry_id=msg.inquiry_id,
        sender_id=msg.sender_id,
        message=msg.message,
        created_at=msg.created_at.isoformat(),
    )


def _get_participant_inquiry(request: AuthenticatedHttpRequest, inquiry_id: int) -> Inquiry:
    try:
        inquiry = Inquiry.objects.select_related("property", "student", "owner").get(
            id=inquiry_id
        )
    except Inquiry.DoesNotExist:
        raise HttpError(404, "Inquiry not found")

    if not inquiry.is_participant(request.auth):
        # Same answer as a missing inquiry so ids can't be probed
        raise HttpError(404, "Inquiry not found")
    return inquiry


@router.post(
    "",
    response={
        201: InquiryResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="createInquiry",
    summary="Send an inquiry about a property",
)
def create_inquiry_endpoint(
    request: AuthenticatedHttpRequest, payload: CreateInquiryRequest
) -> tuple[int, InquiryResponse]:
    """Students only."""
    user = request.auth
    if not user.is_student:
        raise HttpError(403, "Only students can send inquiries")

    try:
        prop = Property.objects.get(id=payload.property_id)
    except Property.DoesNotExist:
        raise HttpError(404, "Property not found")

    try:
        inquiry = create_inquiry(user, prop, payload.message)
    except InquiryError as e:
        raise HttpError(400, str(e))

    return 201, _inquiry_response(inquiry)


@router.get(
    "",
    response={200: InquiryListResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="listInquiries",
    summary="List inquiries for the signed-in user",
)
def list_inquiries(request: AuthenticatedHttpRequest) -> InquiryListResponse:
    """Sent inquiries for students, received inquiries for owners."""
    return InquiryListResponse(
        inquiries=[_inquiry_response(i) for i in inquiries_for_user(request.auth)]
    )


@router.patch(
    "/{inquiry_id}/status",
    response={
        200: InquiryResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="updateInquiryStatus",
    summary="Mark an inquiry responded or closed",
)
def update_inquiry_status(
    request: AuthenticatedHttpRequest, inquiry_id: int, payload: UpdateInquiryStatusRequest
) -> InquiryResponse:
    """Owner of the inquiry only."""
    inquiry = _get_participant_inquiry(request, inquiry_id)
    if inquiry.owner_id != request.auth.id:
        raise HttpError(403, "Only the property owner can change inquiry status")

    return _inquiry_response(set_inquiry_status(inquiry, payload.status))


@router.get(
    "/{inquiry_id}/messages",
    response={200: InquiryMessageListResponse, 401: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="listInquiryMessages",
    summary="List messages in an inquiry thread",
)
def list_messages(request: AuthenticatedHttpRequest, inquiry_id: int) -> InquiryMessageListResponse:
    """Oldest first."""
    inquiry = _get_participant_inquiry(request, inquiry_id)
    return InquiryMessageListResponse(
        messages=[_message_response(m) for m in inquiry.messages.order_by("created_at", "id")]
    )


@router.post(
    "/{inquiry_id}/messages",
    response={
        201: InquiryMessageResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        404: ErrorResponse,
    },
    auth=bearer_auth,
    operation_id="postInquiryMessage",
    summary="Reply in an inquiry thread",
)
def post_message_endpoint(
    request: AuthenticatedHttpRequest, inquiry_id: int, payload: PostMessageRequest
) -> tuple[int, InquiryMessageResponse]:
    """Student or owner of the inquiry."""
    inquiry = _get_participant_inquiry(request, inquiry_id)
    try:
        msg = post_message(inquiry, request.auth, payload.message)
    except InquiryError as e:
        raise HttpError(400, str(e))
    return 201, _message_response(msg)
