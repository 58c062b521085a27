"""
Factories for inquiries app models.
"""

import factory
from factory.django import DjangoModelFactory

from apps.inquiries.models import Inquiry, InquiryMessage
from tests.accounts.factories import StudentFactory
from tests.properties.factories import PropertyFactory


class InquiryFactory(DjangoModelFactory):
    """Factory for Inquiry model. Owner follows the property."""

    class Meta:
        model = Inquiry

    property = factory.SubFactory(PropertyFactory)
    student = factory.SubFactory(StudentFactory)
    owner = factory.LazyAttribute(lambda o: o.property.owner)
    message = "Is the room still available?"
    status = Inquiry.Status.PENDING


class InquiryMessageFactory(DjangoModelFactory):
    class Meta:
        model = InquiryMessage

    inquiry = factory.SubFactory(InquiryFactory)
    sender = factory.LazyAttribute(lambda o: o.inquiry.student)
    message = factory.Faker("sentence")
