"""Tests for Hookpost structured logging."""

from hookpost.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    redact_secrets,
    unbind_context,
)


class TestConfigureLogging:
    """Tests for logging configuration."""

    def test_configure_with_defaults(self):
        """Should configure with INFO level and JSON format by default."""
        configure_logging()
        logger = get_logger("test")
        logger.info("test message")

    def test_configure_with_text_format(self):
        """Should accept text format for development."""
        configure_logging(level="INFO", format="text")
        logger = get_logger("test")
        logger.info("text format message")
        configure_logging()

    def test_configure_multiple_times(self):
        configure_logging(level="INFO")
        configure_logging(level="DEBUG")
        logger = get_logger("test")
        logger.debug("after reconfigure")


class TestRedactSecrets:
    """Tests for the secret-masking processor."""

    def test_top_level_secret_masked(self):
        event = redact_secrets(None, "info", {"event": "x", "secret": "s3cr3t", "id": "7"})
        assert event == {"event": "x", "secret": "***", "id": "7"}

    def test_nested_secret_masked(self):
        event = redact_secrets(
            None,
            "info",
            {"event": "x", "webhook": {"id": "7", "secret": "s3cr3t"}},
        )
        assert event["webhook"] == {"id": "7", "secret": "***"}

    def test_delivery_salt_masked(self):
        event = redact_secrets(None, "info", {"event": "x", "delivery_salt": "pepper"})
        assert event["delivery_salt"] == "***"

    def test_other_values_untouched(self):
        event = {"event": "x", "headers": {"X-Webhook-Signature": "abc"}}
        assert redact_secrets(None, "info", dict(event)) == event

    def test_secret_never_rendered(self, capsys):
        configure_logging(level="INFO", format="json")
        get_logger("test").info("Loaded webhook", secret="s3cr3t", webhook_id="7")
        assert "s3cr3t" not in capsys.readouterr().out


class TestContextBinding:
    """Tests for context variable binding."""

    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_bind_and_unbind(self):
        bind_context(delivery_id="abc", webhook_id="7")
        unbind_context("delivery_id")
        get_logger("test").info("partial unbind")
