"""Listener base class.

A listener connects one topic to the occurrence bus. ``bind`` attaches a
webhook; the first bind subscribes the listener to the bus. When an
occurrence arrives the listener captures the payload once and hands it
to the deliver callback of every bound webhook.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar

from hookpost.capture import DEFAULT_META_PREFIX, capture_deleted
from hookpost.events import Occurrence, OccurrenceBus
from hookpost.logging import get_logger

logger = get_logger(__name__)

# deliver(webhook_id, topic, payload)
DeliverCallback = Callable[[str, str, dict[str, Any]], Any]


class Listener(ABC):
    """Binds webhooks to occurrences of a single topic.

    Subclasses set ``topic`` and implement ``capture_entity``.
    """

    topic: ClassVar[str]

    def __init__(self, bus: OccurrenceBus, meta_prefix: str = DEFAULT_META_PREFIX) -> None:
        self._bus = bus
        self.meta_prefix = meta_prefix
        self._deliveries: dict[str, DeliverCallback] = {}
        self._subscription_id: str | None = None

    @property
    def webhook_ids(self) -> list[str]:
        return list(self._deliveries)

    @property
    def is_subscribed(self) -> bool:
        return self._subscription_id is not None

    def bind(self, deliver: DeliverCallback, webhook_id: str) -> bool:
        """Attach a webhook to this listener.

        Returns:
            False if the webhook was already bound (nothing changes).
        """
        webhook_id = str(webhook_id)
        if webhook_id in self._deliveries:
            return False

        self._deliveries[webhook_id] = deliver
        if self._subscription_id is None:
            self._subscription_id = self._bus.subscribe(self.topic, self.handle)
        return True

    def unbind_all(self) -> None:
        if self._subscription_id is not None:
            self._bus.unsubscribe(self._subscription_id)
            self._subscription_id = None
        self._deliveries.clear()

    def handle(self, occurrence: Occurrence) -> None:
        """Capture the payload and deliver it to every bound webhook.

        Never raises: capture and enqueue failures are logged.
        """
        if not self._deliveries:
            return

        try:
            payload = self.capture(occurrence)
        except Exception:
            logger.exception("Payload capture failed", topic=self.topic)
            return

        for webhook_id, deliver in list(self._deliveries.items()):
            try:
                deliver(webhook_id, self.topic, payload)
            except Exception:
                logger.exception(
                    "Failed to queue webhook delivery",
                    topic=self.topic,
                    webhook_id=webhook_id,
                )

    def capture(self, occurrence: Occurrence) -> dict[str, Any]:
        if occurrence.entity is None:
            raise ValueError(f"{self.topic} occurrence carries no entity")
        return self.capture_entity(occurrence.entity)

    @abstractmethod
    def capture_entity(self, entity: Any) -> dict[str, Any]:
        """Build the payload for a live entity."""
        ...


class DeletedListener(Listener):
    """Listener for delete topics.

    The entity is gone when the occurrence fires; the payload is built
    from the last-known snapshot plus the final identifier.
    """

    def capture(self, occurrence: Occurrence) -> dict[str, Any]:
        if occurrence.entity_id is None:
            raise ValueError(f"{self.topic} occurrence carries no entity id")
        return capture_deleted(occurrence.entity_id, occurrence.snapshot, self.capture_entity)
