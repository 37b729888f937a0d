"""Webhook models: subscriptions, delivery jobs and delivery attempts.

A ``WebhookConfig`` is the in-memory view of a persisted subscription
record. A ``DeliveryJob`` is the value handed to the delivery queue. A
``DeliveryAttempt`` describes one HTTP request made for a job and is only
ever logged or passed to delivery hooks, never persisted by Hookpost.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hookpost.topics import is_known_topic, split_topic, to_topic

from .base import timestamp

WebhookStatus = Literal["published", "draft"]

# Outcome of one delivery attempt
DeliveryOutcome = Literal["success", "failed", "skipped"]


class WebhookConfig(BaseModel):
    """A webhook subscription.

    Attributes:
        id: Opaque identifier from the store.
        delivery_url: Endpoint receiving POST requests.
        secret: Shared secret for payload signatures. Never logged.
        topics: Canonical topics (``order.created``) this webhook receives.
        status: Only published webhooks receive deliveries.
        failure_count: Consecutive failed attempts, reset on success.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(description="Webhook identifier")
    delivery_url: str = Field(default="", description="Endpoint receiving deliveries")
    secret: str = Field(default="", repr=False, description="Shared signing secret")
    topics: list[str] = Field(default_factory=list, description="Subscribed topics")
    status: WebhookStatus = Field(default="draft", description="Publication status")
    failure_count: int = Field(default=0, ge=0, description="Consecutive failures")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Stores commonly use integer primary keys
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("topics")
    @classmethod
    def _canonical_topics(cls, value: list[str]) -> list[str]:
        topics: list[str] = []
        for item in value:
            topic = to_topic(item)
            if is_known_topic(topic) and topic not in topics:
                topics.append(topic)
        return topics

    @property
    def is_published(self) -> bool:
        return self.status == "published"

    def subscribes_to(self, topic: str) -> bool:
        """Check if this webhook is published and subscribed to the topic."""
        return self.is_published and to_topic(topic) in self.topics


class DeliveryJob(BaseModel):
    """Unit of work: send this payload to this webhook for this topic.

    The payload is a captured value, never a handle to a live entity,
    because the entity may change or disappear before the job runs.
    """

    model_config = ConfigDict(extra="forbid")

    webhook_id: str = Field(description="Target webhook")
    topic: str = Field(description="Canonical topic, e.g. order.created")
    payload: dict[str, Any] = Field(description="Captured JSON-safe payload")
    triggered_at: str = Field(
        default_factory=timestamp,
        description="When the occurrence fired (ISO-8601, UTC)",
    )

    @field_validator("webhook_id", mode="before")
    @classmethod
    def _coerce_webhook_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("topic")
    @classmethod
    def _canonical_topic(cls, value: str) -> str:
        split_topic(value)
        return to_topic(value)


class DeliveryRequest(BaseModel):
    """Outgoing request of a delivery attempt."""

    method: str = "POST"
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""


class DeliveryResponse(BaseModel):
    """Response received for a delivery attempt."""

    code: int
    message: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""


class DeliveryAttempt(BaseModel):
    """Record of a single delivery attempt.

    Attributes:
        delivery_id: Per-attempt tracing identifier sent to the receiver.
        outcome: success, failed, or skipped (webhook no longer exists).
        error_code: Error class for failures (config_error, transport error
            class name, or http_error).
        duration_seconds: Wall-clock time around the HTTP call.
        failure_count: Webhook failure count after this attempt.
    """

    delivery_id: str
    webhook_id: str
    topic: str
    url: str = ""
    outcome: DeliveryOutcome
    request: DeliveryRequest | None = None
    response: DeliveryResponse | None = None
    error_code: str | None = None
    error_message: str | None = None
    duration_seconds: float = 0.0
    failure_count: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == "success"


__all__ = [
    "DeliveryAttempt",
    "DeliveryJob",
    "DeliveryOutcome",
    "DeliveryRequest",
    "DeliveryResponse",
    "WebhookConfig",
    "WebhookStatus",
]
