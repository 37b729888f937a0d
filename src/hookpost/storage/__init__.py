"""Webhook subscription storage.

Example:
    ```python
    from hookpost.storage import InMemoryWebhookStore

    store = InMemoryWebhookStore(records)
    webhook = store.get_webhook("7")
    ```
"""

from .base import RECORD_FIELDS, WebhookStore, webhook_from_record
from .memory import InMemoryWebhookStore

__all__ = [
    "InMemoryWebhookStore",
    "RECORD_FIELDS",
    "WebhookStore",
    "webhook_from_record",
]
