"""Shared capture helpers.

Capturers run synchronously inside the request that raised the occurrence,
so they must stay pure: read attributes, build a dict, no I/O. Optional
sections are loaded through ``PayloadBuilder.optional`` so that one broken
sub-aggregate cannot prevent the delivery of everything else.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from hookpost.exceptions import PartialCaptureError
from hookpost.logging import get_logger
from hookpost.models.base import to_json_safe

logger = get_logger(__name__)

DEFAULT_META_PREFIX = "_storeengine_"


class PayloadBuilder:
    """Accumulates payload fields in insertion order.

    Example:
        ```python
        builder = PayloadBuilder("order", order.id)
        builder.set("id", order.id)
        builder.optional("refunds", lambda: refunds_of(order))
        payload = builder.build()
        ```
    """

    def __init__(self, entity_kind: str, entity_id: Any) -> None:
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        self._data: dict[str, Any] = {}
        self.omitted: list[str] = []

    def set(self, key: str, value: Any) -> PayloadBuilder:
        self._data[key] = to_json_safe(value)
        return self

    def optional(self, key: str, loader: Callable[[], Any]) -> PayloadBuilder:
        """Add a section that may fail to load.

        On any error the section is left out and a warning is logged.
        """
        try:
            value = to_json_safe(loader())
        except Exception as e:
            error = PartialCaptureError(key, f"{type(e).__name__}: {e}")
            self.omitted.append(key)
            logger.warning(
                "Omitting payload section",
                entity_kind=self.entity_kind,
                entity_id=self.entity_id,
                section=key,
                error_code=error.code,
                error=error.message,
            )
            return self
        self._data[key] = value
        return self

    def build(self) -> dict[str, Any]:
        return dict(self._data)


def prefixed_meta(meta: Mapping[str, Any], prefix: str = DEFAULT_META_PREFIX) -> dict[str, Any]:
    """Export meta entries carrying the store prefix, with the prefix stripped.

    Multi-valued entries (lists) export their first value.
    """
    data: dict[str, Any] = {}
    for key, value in meta.items():
        if not key.startswith(prefix):
            continue
        if isinstance(value, list):
            value = value[0] if value else None
        data[key[len(prefix) :]] = value
    return data


def address(addr: Any) -> dict[str, Any]:
    """Capture an address; a missing country renders as ``-``."""
    return {
        "first_name": addr.first_name,
        "last_name": addr.last_name,
        "country": addr.country if addr.country is not None else "-",
        "email": addr.email,
        "phone": addr.phone,
        "company": addr.company,
        "address_1": addr.address_1,
        "address_2": addr.address_2,
        "city": addr.city,
        "state": addr.state,
        "postcode": addr.postcode,
    }


def capture_deleted(
    entity_id: Any,
    snapshot: Any,
    capture: Callable[[Any], dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build the payload of a delete occurrence.

    The entity no longer exists when the occurrence fires, so the payload
    is the last-known snapshot taken before removal merged with the final
    identifier. The identifier wins over any ``id`` in the snapshot.

    Args:
        entity_id: Identifier of the removed entity.
        snapshot: Mapping, entity, or None.
        capture: Capturer applied when the snapshot is an entity.

    Returns:
        JSON-safe payload.
    """
    if snapshot is None:
        data: Any = {}
    elif isinstance(snapshot, Mapping):
        data = to_json_safe(dict(snapshot))
    elif capture is not None:
        data = capture(snapshot)
    else:
        data = to_json_safe(snapshot)

    if not isinstance(data, dict):
        raise TypeError(f"Snapshot must capture to a mapping, got {type(data).__name__}")

    data["id"] = to_json_safe(entity_id)
    return data
