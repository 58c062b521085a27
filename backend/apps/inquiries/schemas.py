"""
Inquiry API schemas.
"""

from typing import Literal

from ninja import Schema
from pydantic import Field


class CreateInquiryRequest(Schema):
    property_id: int
    message: str = Field(..., min_length=1, max_length=5000)


class InquiryResponse(Schema):
    id: int
    property_id: int
    property_title: str
    property_rent: str  # Major units, e.g. "800.00"
    student_id: int
    student_name: str
    owner_id: int
    owner_name: str
    message: str
    status: str
    created_at: str  # ISO timestamp


class InquiryListResponse(Schema):
    inquiries: list[InquiryResponse]


class UpdateInquiryStatusRequest(Schema):
    status: Literal["pending", "responded", "closed"]


class PostMessageRequest(Schema):
    message: str = Field(..., min_length=1, max_length=5000)


class InquiryMessageResponse(Schema):
    id: int
    inquiry_id: int
    sender_id: int
    message: str
    created_at: str  # ISO timestamp


class InquiryMessageListResponse(Schema):
    messages: list[InquiryMessageResponse]
