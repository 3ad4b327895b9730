from packages.billing.models.database.processed_event import (
    ProcessedWebhookEventEntity,
)

__all__ = ["ProcessedWebhookEventEntity"]
