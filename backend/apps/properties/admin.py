"""Admin registration for property listings."""

from django.contrib import admin

from apps.properties.models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ["title", "location", "rent", "property_type", "status", "owner", "created_at"]
    list_filter = ["status", "property_type"]
    search_fields = ["title", "location", "owner__email"]
    raw_id_fields = ["owner"]
