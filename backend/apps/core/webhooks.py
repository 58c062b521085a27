"""
Webhook utilities for idempotent processing.
"""

from django.db import IntegrityError, transaction

from apps.core.logging import get_logger
from apps.core.models import ProcessedWebhook

logger = get_logger(__name__)


def mark_webhook_processed(source: str, event_id: str) -> bool:
    """
    Mark a webhook event as processed.

    Uses INSERT with unique constraint to handle concurrent deliveries.
    Call inside the same transaction as the handler so a failed handler
    leaves no marker behind and the provider's retry is processed.

    Returns:
        True if marked successfully, False if already processed
    """
    try:
        # Savepoint keeps the outer transaction usable after IntegrityError
        with transaction.atomic():
            ProcessedWebhook.objects.create(source=source, event_id=event_id)
        return True
    except IntegrityError:
        logger.debug(
            "webhook_already_processed",
            source=source,
            event_id=event_id,
        )
        return False
