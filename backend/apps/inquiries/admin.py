"""Admin registration for inquiries."""

from django.contrib import admin

from apps.inquiries.models import Inquiry, InquiryMessage


class InquiryMessageInline(admin.TabularInline):
    model = InquiryMessage
    extra = 0
    raw_id_fields = ["sender"]


@admin.register(Inquiry)
class InquiryAdmin(admin.ModelAdmin):
    list_display = ["id", "property", "student", "owner", "status", "created_at"]
    list_filter = ["status"]
    raw_id_fields = ["property", "student", "owner"]
    inlines = [InquiryMessageInline]
