"""Webhook store interface.

Subscription records live in an external store owned by the admin
surface. Hookpost reads them, rewrites legacy topic lists, and keeps the
per-webhook failure counter. Counter updates must be atomic at the store,
because delivery workers run concurrently with no shared memory.
Backends report their own failures (connection loss, write conflicts) as
``StorageError``; callers treat it like any other ``HookpostError``.

Persisted record schema:
    {id, delivery_url, secret, topics: list, status, failure_count}
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from hookpost.models import WebhookConfig
from hookpost.topics import flatten_topic_entries

RECORD_FIELDS = ("id", "delivery_url", "secret", "topics", "status", "failure_count")


@runtime_checkable
class WebhookStore(Protocol):
    """Protocol for webhook subscription stores."""

    @abstractmethod
    def list_records(self, status: str | None = None) -> list[dict[str, Any]]:
        """List stored records, optionally filtered by status.

        Args:
            status: "published", "draft", or None for all.

        Returns:
            Copies of the stored records.
        """
        ...

    @abstractmethod
    def get_record(self, webhook_id: str) -> dict[str, Any] | None:
        """Get one record by ID, or None if it does not exist."""
        ...

    @abstractmethod
    def save_topics(self, webhook_id: str, topics: list[str]) -> None:
        """Replace the stored topic list of a record.

        Raises:
            NotFoundError: If the record does not exist.
            StorageError: If the backend cannot complete the write.
        """
        ...

    @abstractmethod
    def increment_failure_count(self, webhook_id: str) -> int:
        """Atomically add one to the failure counter.

        Returns:
            The new counter value.

        Raises:
            NotFoundError: If the record does not exist.
            StorageError: If the backend cannot complete the write.
        """
        ...

    @abstractmethod
    def reset_failure_count(self, webhook_id: str) -> int:
        """Atomically reset the failure counter to zero.

        Returns:
            The new counter value (always 0).

        Raises:
            NotFoundError: If the record does not exist.
            StorageError: If the backend cannot complete the write.
        """
        ...


def webhook_from_record(record: Mapping[str, Any]) -> WebhookConfig:
    """Build a ``WebhookConfig`` from a stored record.

    Legacy topic entries are flattened in memory only; persisting the
    flattened form is the registry reader's job.
    """
    topics, _ = flatten_topic_entries(record.get("topics"))
    return WebhookConfig(
        id=record["id"],
        delivery_url=record.get("delivery_url") or "",
        secret=record.get("secret") or "",
        topics=topics,
        status=record.get("status") or "draft",
        failure_count=int(record.get("failure_count") or 0),
    )
