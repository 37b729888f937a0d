"""Webhook registry reader.

Loads the published webhooks once at bootstrap. Stored topic lists are
normalised on the way: legacy ``{"value": ...}`` entries are flattened,
duplicates and empties dropped, and the flat list written back, so the
migration runs once per record and is logged.
"""

from __future__ import annotations

from typing import Any

from hookpost.logging import get_logger
from hookpost.models import WebhookConfig
from hookpost.storage import WebhookStore, webhook_from_record
from hookpost.topics import flatten_topic_entries, is_known_topic, to_topic

logger = get_logger(__name__)


class WebhookRegistryReader:
    """Reads published webhook subscriptions from the store.

    Only the listener registry calls this, and only at bootstrap; it is
    never consulted per occurrence.
    """

    def __init__(self, store: WebhookStore) -> None:
        self._store = store

    def normalize_topics(self, webhook_id: str, raw: Any) -> tuple[list[str], bool]:
        """Normalise a stored topic list, persisting the flat form if needed.

        Args:
            webhook_id: Record the topics belong to.
            raw: Stored ``topics`` value.

        Returns:
            Tuple of (flat topic keys, whether the flat form was written).
        """
        keys, legacy = flatten_topic_entries(raw)
        # Duplicates and empties in a plain list are rewritten too
        changed = legacy or (isinstance(raw, list | tuple) and keys != list(raw))
        if changed:
            self._store.save_topics(webhook_id, keys)
            logger.info(
                "Migrated legacy webhook topics",
                webhook_id=webhook_id,
                topics=keys,
                legacy=legacy,
            )
        return keys, changed

    def list_published(self) -> list[WebhookConfig]:
        """List published webhooks with normalised, known topics."""
        webhooks: list[WebhookConfig] = []
        for record in self._store.list_records(status="published"):
            webhook_id = str(record["id"])
            keys, _ = self.normalize_topics(webhook_id, record.get("topics"))

            unknown = [key for key in keys if not is_known_topic(key)]
            if unknown:
                logger.debug("Ignoring unknown topics", webhook_id=webhook_id, topics=unknown)

            record["topics"] = [to_topic(key) for key in keys if is_known_topic(key)]
            webhooks.append(webhook_from_record(record))

        logger.debug("Loaded published webhooks", count=len(webhooks))
        return webhooks
