"""In-memory webhook store.

Used for tests and single-process deployments. A lock serialises counter
updates so concurrent deliveries never lose an increment.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any, get_args

from hookpost.exceptions import NotFoundError, ValidationError
from hookpost.models import WebhookConfig, WebhookStatus

from .base import RECORD_FIELDS, webhook_from_record

logger = logging.getLogger(__name__)

VALID_STATUSES = frozenset(get_args(WebhookStatus))


class InMemoryWebhookStore:
    """Webhook store backed by a dict of records.

    Example:
        ```python
        store = InMemoryWebhookStore([
            {
                "id": 7,
                "delivery_url": "https://example.com/hook",
                "secret": "s3cr3t",
                "topics": ["order_created"],
                "status": "published",
            }
        ])
        store.increment_failure_count("7")  # -> 1
        ```
    """

    def __init__(self, records: Iterable[Mapping[str, Any]] | None = None) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        for record in records or []:
            self.add(record)

    def add(self, record: Mapping[str, Any]) -> str:
        """Insert or replace a record. Returns the normalised ID."""
        if "id" not in record:
            raise ValidationError("id", "Webhook record requires an id")

        unknown = set(record) - set(RECORD_FIELDS)
        if unknown:
            raise ValidationError("record", f"Unknown fields: {sorted(unknown)}")

        status = record.get("status", "draft")
        if status not in VALID_STATUSES:
            raise ValidationError(
                "status", f"Expected one of {sorted(VALID_STATUSES)}, got {status!r}"
            )

        webhook_id = str(record["id"])
        stored = {
            "id": webhook_id,
            "delivery_url": record.get("delivery_url", ""),
            "secret": record.get("secret", ""),
            "topics": copy.deepcopy(list(record.get("topics") or [])),
            "status": status,
            "failure_count": int(record.get("failure_count") or 0),
        }
        with self._lock:
            self._records[webhook_id] = stored
        return webhook_id

    def delete(self, webhook_id: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
        with self._lock:
            return self._records.pop(str(webhook_id), None) is not None

    def list_records(self, status: str | None = None) -> list[dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(record)
                for record in self._records.values()
                if status is None or record["status"] == status
            ]

    def get_record(self, webhook_id: str) -> dict[str, Any] | None:
        with self._lock:
            record = self._records.get(str(webhook_id))
            return copy.deepcopy(record) if record is not None else None

    def get_webhook(self, webhook_id: str) -> WebhookConfig | None:
        record = self.get_record(webhook_id)
        return webhook_from_record(record) if record is not None else None

    def save_topics(self, webhook_id: str, topics: list[str]) -> None:
        with self._lock:
            record = self._require(webhook_id)
            record["topics"] = list(topics)
        logger.debug("Saved topics for webhook %s: %s", webhook_id, topics)

    def increment_failure_count(self, webhook_id: str) -> int:
        with self._lock:
            record = self._require(webhook_id)
            record["failure_count"] += 1
            return int(record["failure_count"])

    def reset_failure_count(self, webhook_id: str) -> int:
        with self._lock:
            record = self._require(webhook_id)
            record["failure_count"] = 0
            return 0

    def _require(self, webhook_id: str) -> dict[str, Any]:
        # Caller holds the lock
        record = self._records.get(str(webhook_id))
        if record is None:
            raise NotFoundError("webhook", str(webhook_id))
        return record

    def __len__(self) -> int:
        return len(self._records)
