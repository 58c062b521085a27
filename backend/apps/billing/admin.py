"""Admin registration for rent payments (read-only mirror of Stripe)."""

from django.contrib import admin

from apps.billing.models import RentPayment


@admin.register(RentPayment)
class RentPaymentAdmin(admin.ModelAdmin):
    list_display = [
        "stripe_subscription_id",
        "property",
        "tenant",
        "monthly_rent",
        "status",
        "current_period_end",
    ]
    list_filter = ["status"]
    search_fields = ["stripe_subscription_id", "stripe_customer_id", "tenant__email"]
    raw_id_fields = ["property", "tenant"]

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False
