"""Tests for webhook idempotency utilities."""

import pytest
from django.db import IntegrityError, transaction

from apps.core.models import ProcessedWebhook
from apps.core.webhooks import mark_webhook_processed


@pytest.mark.django_db
class TestProcessedWebhook:
    def test_str_representation(self) -> None:
        webhook = ProcessedWebhook.objects.create(source="stripe", event_id="evt_123")

        assert str(webhook) == "stripe:evt_123"
        assert webhook.processed_at is not None

    def test_unique_per_source(self) -> None:
        ProcessedWebhook.objects.create(source="stripe", event_id="evt_123")

        with pytest.raises(IntegrityError):
            ProcessedWebhook.objects.create(source="stripe", event_id="evt_123")


@pytest.mark.django_db
class TestMarkWebhookProcessed:
    def test_first_delivery_is_marked(self) -> None:
        assert mark_webhook_processed("stripe", "evt_new") is True
        assert ProcessedWebhook.objects.filter(source="stripe", event_id="evt_new").exists()

    def test_redelivery_returns_false(self) -> None:
        mark_webhook_processed("stripe", "evt_dup")

        assert mark_webhook_processed("stripe", "evt_dup") is False

    def test_outer_transaction_survives_duplicate(self) -> None:
        """A duplicate inside a handler transaction must not break later queries."""
        mark_webhook_processed("stripe", "evt_txn")

        with transaction.atomic():
            assert mark_webhook_processed("stripe", "evt_txn") is False
            assert ProcessedWebhook.objects.filter(event_id="evt_txn").count() == 1

    def test_rolled_back_marker_allows_retry(self) -> None:
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                mark_webhook_processed("stripe", "evt_retry")
                raise RuntimeError("handler failed")

        assert mark_webhook_processed("stripe", "evt_retry") is True
