"""
Management command to re-sync rent payments from Stripe.

Recovers from missed or failed webhook deliveries by re-reading each
subscription and running it through the webhook handlers.
Usage: python manage.py reconcile_rent_payments [--all] [--subscription sub_...]
"""

import stripe
from django.core.management.base import BaseCommand, CommandError

from apps.billing.models import RentPayment
from apps.billing.services import sync_rent_payment_from_stripe
from apps.billing.stripe_client import get_stripe_client
from config.settings.base import settings


class Command(BaseCommand):
    help = "Re-sync rent payment status and property availability from Stripe"

    def add_arguments(self, parser):
        parser.add_argument(
            "--all",
            action="store_true",
            help="Include cancelled payments (default: only active and past_due)",
        )
        parser.add_argument(
            "--subscription",
            type=str,
            default=None,
            help="Only sync the payment with this Stripe subscription id",
        )

    def handle(self, *args, **options):
        if not settings.STRIPE_SECRET_KEY:
            raise CommandError("STRIPE_SECRET_KEY not set. Add it to your .env file first.")

        payments = RentPayment.objects.all().order_by("id")
        if options["subscription"]:
            payments = payments.filter(stripe_subscription_id=options["subscription"])
        elif not options["all"]:
            payments = payments.exclude(status=RentPayment.Status.CANCELLED)

        client = get_stripe_client()
        synced = failed = 0

        for payment in payments:
            try:
                status = sync_rent_payment_from_stripe(client, payment)
            except stripe.StripeError as e:
                failed += 1
                self.stderr.write(f"  {payment.stripe_subscription_id}: {e}")
                continue

            synced += 1
            self.stdout.write(f"  {payment.stripe_subscription_id}: {status}")

        self.stdout.write(self.style.SUCCESS(f"Synced {synced} rent payment(s), {failed} failed"))
