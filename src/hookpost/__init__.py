"""Hookpost: webhook dispatch for store events.

Turns domain occurrences (order created, coupon updated, customer deleted,
...) into signed HTTP POST deliveries to the webhooks subscribed to them.

Quick Start:
    from hookpost.service import WebhookService

    async with WebhookService.create() as hooks:
        hooks.store.add({
            "id": "7",
            "delivery_url": "https://example.com/hooks",
            "secret": "s3cret",
            "topics": ["order_created"],
            "status": "published",
        })
        hooks.bootstrap()

        hooks.publish("order.created", order)
        attempts = await hooks.drain()

Flow:
    - OccurrenceBus: domain code publishes occurrences
    - Listeners: capture the payload once and enqueue one job per webhook
    - DeliveryWorker: runs jobs from the queue
    - WebhookDispatcher: signs, POSTs, and tracks consecutive failures
"""

__version__ = "0.1.0"

# Configuration
from .config import Settings, settings

# Occurrences
from .events import Occurrence, OccurrenceBus

# Exceptions
from .exceptions import (
    ConfigError,
    HookpostError,
    HttpError,
    NotFoundError,
    PartialCaptureError,
    StorageError,
    TransportError,
    ValidationError,
)

# Logging
from .logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    logger,
    unbind_context,
)

# Models
from .models import DeliveryAttempt, DeliveryJob, WebhookConfig

# Topics
from .topics import ALL_TOPICS, TOPIC_CATALOG_VERSION, TOPIC_LABELS

__all__ = [
    # Version
    "__version__",
    # Configuration
    "Settings",
    "settings",
    # Exceptions
    "HookpostError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "ConfigError",
    "TransportError",
    "HttpError",
    "PartialCaptureError",
    # Logging
    "configure_logging",
    "get_logger",
    "logger",
    "bind_context",
    "clear_context",
    "unbind_context",
    # Occurrences
    "Occurrence",
    "OccurrenceBus",
    # Models
    "DeliveryAttempt",
    "DeliveryJob",
    "WebhookConfig",
    # Topics
    "ALL_TOPICS",
    "TOPIC_CATALOG_VERSION",
    "TOPIC_LABELS",
]
