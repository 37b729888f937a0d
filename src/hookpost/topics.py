"""Webhook topic catalog.

Topics are stored as flat keys (``order_created``) and used in canonical
dotted form (``order.created``) everywhere else. The catalog is fixed and
versioned; anything outside it is ignored by the registry.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

TOPIC_CATALOG_VERSION = "1"

# Stored topic keys
TopicKey = Literal[
    "product_created",
    "product_updated",
    "product_deleted",
    "product_restored",
    "coupon_created",
    "coupon_updated",
    "coupon_deleted",
    "coupon_restored",
    "order_created",
    "order_updated",
    "order_deleted",
    "order_restored",
    "customer_created",
    "customer_updated",
    "customer_deleted",
]

ALL_TOPIC_KEYS: tuple[TopicKey, ...] = (
    "product_created",
    "product_updated",
    "product_deleted",
    "product_restored",
    "coupon_created",
    "coupon_updated",
    "coupon_deleted",
    "coupon_restored",
    "order_created",
    "order_updated",
    "order_deleted",
    "order_restored",
    "customer_created",
    "customer_updated",
    "customer_deleted",
)

TOPIC_LABELS: dict[str, str] = {
    key: key.replace("_", " ", 1).title() for key in ALL_TOPIC_KEYS
}


def to_topic(key: str) -> str:
    """Convert a stored key to its canonical form.

    Splits on the first underscore only: ``order_created`` -> ``order.created``.
    Keys already in dotted form are returned unchanged.
    """
    if "." in key:
        return key
    resource, sep, event = key.partition("_")
    if not sep:
        return key
    return f"{resource}.{event}"


def to_key(topic: str) -> str:
    """Convert a canonical topic back to its stored key."""
    return topic.replace(".", "_", 1)


def split_topic(topic: str) -> tuple[str, str]:
    """Split a topic into ``(resource, event)``.

    Accepts both the canonical and the stored form.

    Raises:
        ValueError: If the topic has no resource/event separator.
    """
    resource, sep, event = to_topic(topic).partition(".")
    if not sep or not resource or not event:
        raise ValueError(f"Malformed topic: {topic!r}")
    return resource, event


ALL_TOPICS: tuple[str, ...] = tuple(to_topic(key) for key in ALL_TOPIC_KEYS)

_CATALOG = frozenset(ALL_TOPICS)


def is_known_topic(topic: str) -> bool:
    """Check whether a topic (either form) belongs to the catalog."""
    return to_topic(topic) in _CATALOG


def flatten_topic_entries(entries: Any) -> tuple[list[str], bool]:
    """Flatten stored topic entries into plain keys.

    Older records stored each topic as ``{"value": "order_created", ...}``
    (the shape produced by the admin form's option list). Those entries
    are flattened, empties dropped and duplicates removed, keeping the
    first occurrence.

    Args:
        entries: Raw ``topics`` value from a stored record.

    Returns:
        Tuple of (flat keys, whether any legacy entry was found).
    """
    if not isinstance(entries, list | tuple):
        return [], False

    keys: list[str] = []
    legacy = False
    for entry in entries:
        if isinstance(entry, Mapping):
            legacy = True
            entry = entry.get("value")
        if not isinstance(entry, str) or not entry:
            continue
        if entry not in keys:
            keys.append(entry)
    return keys, legacy


__all__ = [
    "ALL_TOPICS",
    "ALL_TOPIC_KEYS",
    "TOPIC_CATALOG_VERSION",
    "TOPIC_LABELS",
    "flatten_topic_entries",
    "TopicKey",
    "is_known_topic",
    "split_topic",
    "to_key",
    "to_topic",
]
