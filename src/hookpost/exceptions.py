"""Hookpost exception hierarchy.

Delivery failures are reported through these types even when they are
not raised: the dispatcher builds the matching error, logs it, and
records its code on the delivery attempt.
"""

from __future__ import annotations


class HookpostError(Exception):
    """Base exception for all Hookpost errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
    """

    code: str = "hookpost_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a log-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class ValidationError(HookpostError):
    """Invalid input provided.

    Attributes:
        field: The field that failed validation.
    """

    code: str = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")

    def to_dict(self) -> dict[str, object]:
        return {
            "error": {
                "code": self.code,
                "field": self.field,
                "message": self.message,
            }
        }


class NotFoundError(HookpostError):
    """A webhook record does not exist in the store.

    Attributes:
        resource_type: Type of resource (e.g., "webhook").
        resource_id: ID of the missing resource.
    """

    code: str = "not_found"

    def __init__(self, resource_type: str, resource_id: str) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} not found: {resource_id}")

    def to_dict(self) -> dict[str, object]:
        return {
            "error": {
                "code": self.code,
                "resource_type": self.resource_type,
                "resource_id": self.resource_id,
                "message": self.message,
            }
        }


class StorageError(HookpostError):
    """Webhook store operation failed."""

    code: str = "storage_error"


class ConfigError(HookpostError):
    """Webhook configuration is unusable.

    Raised for a missing or invalid delivery URL. No request is attempted
    and the attempt counts as a failure.
    """

    code: str = "config_error"


class TransportError(HookpostError):
    """The request never produced an HTTP response.

    DNS, connect, TLS and timeout failures land here.

    Attributes:
        error_code: Transport error identifier (httpx exception class name).
    """

    code: str = "transport_error"

    def __init__(self, error_code: str, message: str) -> None:
        self.error_code = error_code
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        return {
            "error": {
                "code": self.code,
                "error_code": self.error_code,
                "message": self.message,
            }
        }


class HttpError(HookpostError):
    """The endpoint answered with a status outside the success range.

    Attributes:
        status_code: HTTP status returned by the endpoint.
    """

    code: str = "http_error"

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}" + (f": {message}" if message else ""))

    def to_dict(self) -> dict[str, object]:
        return {
            "error": {
                "code": self.code,
                "status_code": self.status_code,
                "message": self.message,
            }
        }


class PartialCaptureError(HookpostError):
    """An optional part of a payload could not be captured.

    The payload is still emitted without that field.

    Attributes:
        section: Payload field that was omitted.
    """

    code: str = "partial_capture_error"

    def __init__(self, section: str, message: str) -> None:
        self.section = section
        super().__init__(f"{section}: {message}")

    def to_dict(self) -> dict[str, object]:
        return {
            "error": {
                "code": self.code,
                "section": self.section,
                "message": self.message,
            }
        }
