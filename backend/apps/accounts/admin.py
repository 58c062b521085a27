"""Admin registration for accounts."""

from django.contrib import admin

from apps.accounts.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ["email", "full_name", "role", "is_active", "created_at"]
    list_filter = ["role", "is_active", "is_staff"]
    search_fields = ["email", "full_name", "stytch_user_id"]
    readonly_fields = ["stytch_user_id", "created_at", "updated_at", "last_login"]
