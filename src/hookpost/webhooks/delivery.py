"""Webhook delivery with HMAC signatures and failure accounting.

One ``dispatch`` call is one HTTP attempt:
- Payload encoded once as compact JSON, shared by body and signature
- Signature is base64(HMAC(algorithm, body, secret))
- Status 200..302 resets the webhook's failure counter, anything else
  (including transport and configuration errors) increments it
- No internal retry; redelivery is the queue's business
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import hmac
import json
import time
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import pydantic

from hookpost import __version__
from hookpost.config import Settings
from hookpost.exceptions import (
    ConfigError,
    HookpostError,
    HttpError,
    TransportError,
)
from hookpost.logging import bind_context, get_logger, unbind_context
from hookpost.models import (
    DeliveryAttempt,
    DeliveryJob,
    DeliveryRequest,
    DeliveryResponse,
    WebhookConfig,
)
from hookpost.storage import WebhookStore, webhook_from_record
from hookpost.topics import split_topic

logger = get_logger(__name__)

SUCCESS_STATUS_MIN = 200
SUCCESS_STATUS_MAX = 303  # exclusive

# Called with every attempt after failure accounting
DeliveryHook = Callable[[DeliveryAttempt], Awaitable[None] | None]


def encode_payload(payload: dict[str, Any]) -> str:
    """Encode a payload as compact JSON.

    The same string is sent as the request body and signed, so receivers
    can verify the signature against the raw body.
    """
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def compute_signature(body: str, secret: str, algorithm: str = "sha256") -> str:
    """Compute the X-Webhook-Signature value for a request body.

    Args:
        body: Encoded JSON payload.
        secret: Shared secret of the webhook.
        algorithm: hashlib digest name (sha256, sha1, sha512).

    Returns:
        Base64 of the raw HMAC digest.
    """
    digest = hmac.new(
        key=secret.encode("utf-8"),
        msg=body.encode("utf-8"),
        digestmod=algorithm,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(body: str, secret: str, signature: str, algorithm: str = "sha256") -> bool:
    """Verify a signature in constant time.

    Args:
        body: Raw request body as received.
        secret: Shared secret of the webhook.
        signature: Value of the X-Webhook-Signature header.
        algorithm: Digest the sender was configured with.

    Returns:
        True if signature is valid, False otherwise.
    """
    expected = compute_signature(body, secret, algorithm)
    return hmac.compare_digest(expected, signature)


def generate_delivery_id(webhook_id: str, now: float, salt: str) -> str:
    """Derive the tracing ID of one delivery attempt.

    Two attempts for the same webhook within the same second share an ID.
    """
    message = f"{webhook_id}{int(now)}"
    return hmac.new(
        key=salt.encode("utf-8"),
        msg=message.encode("utf-8"),
        digestmod=hashlib.sha256,
    ).hexdigest()


def default_user_agent() -> str:
    return f"Hookpost/{__version__} Webhook (httpx/{httpx.__version__})"


def _unix_time() -> float:
    return time.time()


def _validate_delivery_url(url: str) -> httpx.URL:
    if not url:
        raise ConfigError("Webhook has no delivery URL")
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ConfigError(f"Invalid delivery URL: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigError(f"Invalid delivery URL: {url}")
    return parsed


def _validate_headers(headers: dict[str, str]) -> None:
    # Header values go out as ASCII; anything else would fail inside the client
    for name, value in headers.items():
        if not (value.isascii() and value.isprintable()):
            raise ConfigError(f"Header {name} is not printable ASCII: {value!r}")


class WebhookDispatcher:
    """Delivers queued jobs to webhook endpoints.

    Handles:
    - Loading the current webhook configuration from the store
    - Signing payloads with the configured HMAC digest
    - Updating the webhook's consecutive failure counter
    - Logging each attempt, verbosely when ``webhook_debug`` is on

    Example:
        ```python
        async with WebhookDispatcher(store, settings) as dispatcher:
            attempt = await dispatcher.dispatch(job)
            if not attempt.succeeded:
                print(attempt.error_code, attempt.failure_count)
        ```
    """

    def __init__(
        self,
        store: WebhookStore,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            store: Webhook store for configuration and failure counters.
            settings: Delivery settings. Defaults to a fresh ``Settings()``.
            client: HTTP client to send with. When omitted the dispatcher
                creates one and closes it in ``aclose``.
        """
        self._store = store
        self._settings = settings or Settings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self._settings.delivery_timeout_seconds,
            follow_redirects=False,
        )
        self._hooks: list[DeliveryHook] = []

    @property
    def settings(self) -> Settings:
        return self._settings

    def add_delivery_hook(self, hook: DeliveryHook) -> None:
        """Register a callable run after every attempt.

        Hooks may be sync or async. Their exceptions are logged and ignored.
        """
        self._hooks.append(hook)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> WebhookDispatcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def dispatch(self, job: DeliveryJob) -> DeliveryAttempt:
        """Make one delivery attempt for a job.

        Never raises for delivery failures; the outcome is on the
        returned attempt.

        Args:
            job: Job taken from the delivery queue.

        Returns:
            The attempt record, also passed to every delivery hook.
        """
        delivery_id = generate_delivery_id(
            job.webhook_id, _unix_time(), self._settings.effective_delivery_salt
        )
        bind_context(delivery_id=delivery_id, webhook_id=job.webhook_id, topic=job.topic)
        try:
            record = self._store.get_record(job.webhook_id)
            if record is None:
                logger.warning("Webhook no longer exists, skipping delivery")
                attempt = DeliveryAttempt(
                    delivery_id=delivery_id,
                    webhook_id=job.webhook_id,
                    topic=job.topic,
                    outcome="skipped",
                )
            else:
                attempt = await self._deliver_record(record, job, delivery_id)
            await self._run_hooks(attempt)
            return attempt
        finally:
            unbind_context("delivery_id", "webhook_id", "topic")

    async def _deliver_record(
        self, record: dict[str, Any], job: DeliveryJob, delivery_id: str
    ) -> DeliveryAttempt:
        try:
            webhook = webhook_from_record(record)
        except pydantic.ValidationError as e:
            error = ConfigError(f"Invalid webhook record: {e.error_count()} error(s)")
            attempt = DeliveryAttempt(
                delivery_id=delivery_id,
                webhook_id=job.webhook_id,
                topic=job.topic,
                url=str(record.get("delivery_url") or ""),
                outcome="failed",
                error_code=self._error_code(error),
                error_message=error.message,
                failure_count=self._record_outcome(job.webhook_id, succeeded=False),
            )
            self._log_attempt(attempt, error)
            return attempt
        return await self._attempt_delivery(webhook, job, delivery_id)

    async def _attempt_delivery(
        self,
        webhook: WebhookConfig,
        job: DeliveryJob,
        delivery_id: str,
    ) -> DeliveryAttempt:
        resource, event = split_topic(job.topic)
        body = encode_payload(job.payload)
        headers = {
            "Content-Type": "application/json",
            "X-Webhook-Source": self._settings.source_url,
            "X-Webhook-Topic": job.topic,
            "X-Webhook-Resource": resource,
            "X-Webhook-Event": event,
            "X-Webhook-Signature": compute_signature(
                body, webhook.secret, self._settings.signature_algorithm
            ),
            "X-Webhook-ID": webhook.id,
            "X-Webhook-Triggered-At": job.triggered_at,
            "X-Webhook-Delivery-ID": delivery_id,
            "User-Agent": self._settings.user_agent or default_user_agent(),
        }
        request = DeliveryRequest(url=webhook.delivery_url, headers=headers, body=body)

        response: DeliveryResponse | None = None
        error: HookpostError | None = None
        start = time.perf_counter()
        try:
            url = _validate_delivery_url(webhook.delivery_url)
            _validate_headers(headers)
            # httpx timeouts apply per phase; this bounds the whole exchange
            async with asyncio.timeout(self._settings.delivery_timeout_seconds):
                http_response = await self._client.post(
                    url,
                    content=body.encode("utf-8"),
                    headers=headers,
                    timeout=self._settings.delivery_timeout_seconds,
                    follow_redirects=False,
                )
            response = DeliveryResponse(
                code=http_response.status_code,
                message=http_response.reason_phrase,
                headers=dict(http_response.headers),
                body=http_response.text,
            )
            if not SUCCESS_STATUS_MIN <= http_response.status_code < SUCCESS_STATUS_MAX:
                error = HttpError(http_response.status_code, http_response.reason_phrase)
        except ConfigError as e:
            error = e
        except httpx.RequestError as e:
            error = TransportError(type(e).__name__, str(e) or type(e).__name__)
        except TimeoutError:
            error = TransportError(
                "DeliveryTimeout",
                f"No complete response within {self._settings.delivery_timeout_seconds}s",
            )
        duration = round(time.perf_counter() - start, 5)

        failure_count = self._record_outcome(webhook.id, succeeded=error is None)

        attempt = DeliveryAttempt(
            delivery_id=delivery_id,
            webhook_id=webhook.id,
            topic=job.topic,
            url=webhook.delivery_url,
            outcome="success" if error is None else "failed",
            request=request,
            response=response,
            error_code=self._error_code(error),
            error_message=error.message if error is not None else None,
            duration_seconds=duration,
            failure_count=failure_count,
        )
        self._log_attempt(attempt, error)
        return attempt

    def _record_outcome(self, webhook_id: str, succeeded: bool) -> int | None:
        try:
            if succeeded:
                return self._store.reset_failure_count(webhook_id)
            return self._store.increment_failure_count(webhook_id)
        except HookpostError as e:
            # Webhook removed while the request was in flight, or backend down
            logger.warning("Failed to update failure count", **e.to_dict()["error"])
            return None

    @staticmethod
    def _error_code(error: HookpostError | None) -> str | None:
        if error is None:
            return None
        if isinstance(error, TransportError):
            return error.error_code
        return error.code

    def _log_attempt(self, attempt: DeliveryAttempt, error: HookpostError | None) -> None:
        if error is None:
            logger.info(
                "Webhook delivered",
                url=attempt.url,
                status=attempt.response.code if attempt.response else None,
                duration=attempt.duration_seconds,
            )
        elif isinstance(error, HttpError):
            logger.warning(
                "Webhook rejected",
                url=attempt.url,
                status=error.status_code,
                duration=attempt.duration_seconds,
                failure_count=attempt.failure_count,
            )
        elif isinstance(error, TransportError):
            logger.warning(
                "Webhook transport error",
                url=attempt.url,
                error_code=error.error_code,
                error=error.message,
                duration=attempt.duration_seconds,
                failure_count=attempt.failure_count,
            )
        else:
            logger.error(
                "Webhook configuration error",
                error_code=error.code,
                error=error.message,
                failure_count=attempt.failure_count,
            )

        if self._settings.webhook_debug:
            logger.debug(
                "Webhook delivery details",
                url=attempt.url,
                duration=attempt.duration_seconds,
                request=attempt.request.model_dump() if attempt.request else None,
                response=(
                    attempt.response.model_dump()
                    if attempt.response
                    else {
                        "code": attempt.error_code,
                        "message": attempt.error_message,
                        "headers": {},
                        "body": "",
                    }
                ),
            )

    async def _run_hooks(self, attempt: DeliveryAttempt) -> None:
        for hook in list(self._hooks):
            try:
                result = hook(attempt)
                if result is not None:
                    await result
            except Exception:
                logger.exception("Delivery hook failed", hook=getattr(hook, "__name__", repr(hook)))


__all__ = [
    "DeliveryHook",
    "WebhookDispatcher",
    "compute_signature",
    "default_user_agent",
    "encode_payload",
    "generate_delivery_id",
    "verify_signature",
]
