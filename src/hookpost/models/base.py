"""Shared helpers for Hookpost models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import TypeAdapter

_json_adapter: TypeAdapter[Any] = TypeAdapter(Any)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def timestamp() -> str:
    """Current UTC time as an ISO-8601 string (seconds precision)."""
    return utc_now().isoformat(timespec="seconds")


def to_json_safe(value: Any) -> Any:
    """Convert a value into plain JSON types.

    Datetimes become ISO strings, Decimals become strings, pydantic models
    become dicts. Mapping key order is preserved, so the same input always
    encodes to the same bytes.
    """
    return _json_adapter.dump_python(value, mode="json")
