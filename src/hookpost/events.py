"""Occurrence bus: the explicit channel from the domain layer.

The domain layer calls ``publish`` after an entity is created, updated or
restored, and ``publish_deleted`` after one is removed. Subscribers are
registered ahead of time by the listener registry. A failing subscriber
is logged and skipped: webhooks are a side effect and must never break
the domain action that raised the occurrence.

Example:
    ```python
    bus = OccurrenceBus()
    bus.publish("order.created", order)
    bus.publish_deleted("product.deleted", product.id, snapshot)
    ```
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

from hookpost.logging import get_logger
from hookpost.topics import split_topic, to_topic

logger = get_logger(__name__)


@dataclass(frozen=True)
class Occurrence:
    """Something that happened to a domain entity.

    Attributes:
        entity_kind: product, coupon, order, customer.
        event_kind: created, updated, deleted, restored.
        entity: Live entity (absent for deletions).
        entity_id: Final identifier (deletions).
        snapshot: Last-known state captured before removal (deletions).
    """

    entity_kind: str
    event_kind: str
    entity: Any = None
    entity_id: Any = None
    snapshot: Any = None

    @property
    def topic(self) -> str:
        return f"{self.entity_kind}.{self.event_kind}"

    @property
    def is_deletion(self) -> bool:
        return self.entity is None and self.entity_id is not None


OccurrenceHandler = Callable[[Occurrence], None]


class OccurrenceBus:
    """Synchronous publish/subscribe for occurrences, keyed by topic."""

    def __init__(self) -> None:
        self._handlers: dict[str, dict[str, OccurrenceHandler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, topic: str, handler: OccurrenceHandler) -> str:
        """Register a handler for a topic. Returns a subscription ID."""
        subscription_id = uuid4().hex
        with self._lock:
            self._handlers.setdefault(to_topic(topic), {})[subscription_id] = handler
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        with self._lock:
            for handlers in self._handlers.values():
                if handlers.pop(subscription_id, None) is not None:
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()

    def handler_count(self, topic: str | None = None) -> int:
        with self._lock:
            if topic is not None:
                return len(self._handlers.get(to_topic(topic), {}))
            return sum(len(h) for h in self._handlers.values())

    def publish(self, topic: str, entity: Any) -> int:
        """Publish a create/update/restore occurrence.

        Returns:
            Number of handlers that ran without error.
        """
        entity_kind, event_kind = split_topic(topic)
        return self.emit(Occurrence(entity_kind, event_kind, entity=entity))

    def publish_deleted(self, topic: str, entity_id: Any, snapshot: Any = None) -> int:
        """Publish a delete occurrence with the last-known snapshot."""
        entity_kind, event_kind = split_topic(topic)
        return self.emit(
            Occurrence(entity_kind, event_kind, entity_id=entity_id, snapshot=snapshot)
        )

    def emit(self, occurrence: Occurrence) -> int:
        with self._lock:
            handlers = list(self._handlers.get(occurrence.topic, {}).values())

        handled = 0
        for handler in handlers:
            try:
                handler(occurrence)
            except Exception:
                logger.exception("Occurrence handler failed", topic=occurrence.topic)
                continue
            handled += 1
        return handled
