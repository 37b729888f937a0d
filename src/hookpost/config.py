"""Configuration management for Hookpost."""

import logging
import secrets
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

SignatureAlgorithm = Literal["sha256", "sha1", "sha512"]


def _generate_delivery_salt() -> str:
    """Generate a random per-process salt for delivery IDs.

    In development/test environments, if no salt is provided, a random one
    is generated at startup. Delivery IDs are tracing hints for receivers,
    so a salt that changes on restart is acceptable outside production.

    Returns:
        A cryptographically secure random hex string (64 characters).
    """
    return secrets.token_hex(32)


class Settings(BaseSettings):
    """Hookpost configuration loaded from environment variables.

    All settings can be overridden via environment variables with
    the HOOKPOST_ prefix. For example:
        HOOKPOST_SOURCE_URL=https://shop.example.com/
        HOOKPOST_WEBHOOK_DEBUG=true

    Security Notes:
        - In production (HOOKPOST_ENV=production), a delivery salt must be set
        - Verbose delivery logging writes signed payloads to the log stream;
          enabling it in production logs a warning
    """

    # Environment
    env: Literal["development", "production", "test"] = Field(
        default="development",
        description="Environment: development, production, or test",
    )

    # Delivery
    source_url: str = Field(
        default="http://localhost/",
        description="Origin of the deliveries, sent as X-Webhook-Source",
    )
    delivery_timeout_seconds: float = Field(
        default=60.0,
        gt=0.0,
        le=600.0,
        description="HTTP request timeout for a single delivery attempt",
    )
    signature_algorithm: SignatureAlgorithm = Field(
        default="sha256",
        description="HMAC digest used for X-Webhook-Signature",
    )
    user_agent: str | None = Field(
        default=None,
        description="User-Agent override. Defaults to 'Hookpost/<version> Webhook'.",
    )
    delivery_salt: str | None = Field(
        default=None,
        description=(
            "Salt mixed into delivery IDs. "
            "REQUIRED in production. In dev/test, a random salt is generated if not set."
        ),
    )
    webhook_debug: bool = Field(
        default=False,
        description=(
            "Log full request and response details (headers, bodies) for every "
            "delivery attempt. Bodies carry signed payloads, keep off in production."
        ),
    )

    # Queue
    queue_name: str = Field(
        default="hookpost-webhooks",
        min_length=1,
        description="Queue that delivery jobs are enqueued on",
    )

    # Capture
    meta_prefix: str = Field(
        default="_storeengine_",
        description="Prefix of entity meta keys exported in payloads (stripped on export)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    # Runtime-generated salt (not from env, generated at startup if needed)
    _runtime_delivery_salt: str | None = None

    @model_validator(mode="after")
    def validate_security_settings(self) -> "Settings":
        """Validate security settings based on environment.

        - In production, a delivery salt MUST be explicitly provided
        - In dev/test, a random salt is generated if not provided
        - In production, verbose delivery logging logs a warning
        """
        if self.env == "production":
            if not self.delivery_salt:
                raise ValueError(
                    "HOOKPOST_DELIVERY_SALT must be set in production. "
                    'Generate one with: python -c "import secrets; print(secrets.token_hex(32))"'
                )
            if self.webhook_debug:
                logger.warning(
                    "Verbose webhook logging enabled in production - payloads will be logged"
                )
        elif not self.delivery_salt:
            object.__setattr__(self, "_runtime_delivery_salt", _generate_delivery_salt())
            logger.debug("Generated random delivery salt for development")

        return self

    @property
    def effective_delivery_salt(self) -> str:
        """Get the salt used for delivery IDs.

        Returns the configured salt if set, otherwise the runtime-generated one.
        """
        if self.delivery_salt:
            return self.delivery_salt
        if self._runtime_delivery_salt is None:
            object.__setattr__(self, "_runtime_delivery_salt", _generate_delivery_salt())
        return self._runtime_delivery_salt  # type: ignore[return-value]

    model_config = {
        "env_prefix": "HOOKPOST_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
    }


# Global settings instance
settings = Settings()
