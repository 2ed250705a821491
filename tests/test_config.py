"""Tests for settings, telemetry and health endpoints."""

import json
import logging
from datetime import timezone

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from autodevelop_api.api.app import create_app
from autodevelop_api.config import Settings
from autodevelop_api.main import JsonLogFormatter
from autodevelop_api.telemetry import get_tracer, setup_telemetry, shutdown_telemetry


class TestSettings:
    """Tests for application settings."""

    def test_defaults(self, test_settings):
        """Test admission and pricing defaults."""
        assert test_settings.rate_limit_window_seconds == 60
        assert test_settings.rate_limit_max_requests == 10
        assert test_settings.rate_limit_max_tracked_keys == 1000
        assert test_settings.chat_max_message_length == 2000
        assert test_settings.chat_suspicious_keywords == [
            "hack",
            "exploit",
            "attack",
            "bypass",
            "injection",
        ]
        assert test_settings.promo_expiry.tzinfo == timezone.utc
        assert test_settings.stripe_pro_price_id == "price_pro_monthly"

    def test_env_override(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "5")
        monkeypatch.setenv("STRIPE_PRO_PRICE_ID", "price_live_pro")
        monkeypatch.setenv("PROMO_ENABLED", "false")

        settings = Settings()

        assert settings.rate_limit_max_requests == 5
        assert settings.stripe_pro_price_id == "price_live_pro"
        assert settings.promo_enabled is False

    @pytest.mark.parametrize(
        "field",
        [
            "rate_limit_window_seconds",
            "rate_limit_max_requests",
            "rate_limit_max_tracked_keys",
            "chat_max_message_length",
        ],
    )
    def test_positive_limits(self, field):
        """Test that limits must be positive."""
        with pytest.raises(ValidationError):
            Settings(**{field: 0})

    def test_invalid_backend(self):
        """Test that unknown rate limit backends are rejected."""
        with pytest.raises(ValidationError):
            Settings(rate_limit_backend="memcached")


class TestJsonLogFormatter:
    """Tests for structured log output."""

    def make_record(self, msg, *args, **extra):
        record = logging.LogRecord(
            "autodevelop_api.chat.router", logging.ERROR, __file__, 1, msg, args, None
        )
        record.__dict__.update(extra)
        return record

    def test_message_and_extra_fields(self):
        """Test that fields passed via extra reach the output."""
        record = self.make_record(
            "Chat request failed: %s",
            "billing account 1234 empty",
            error_code="insufficient_quota",
            duration_ms=12,
        )

        entry = json.loads(JsonLogFormatter().format(record))

        assert entry["level"] == "ERROR"
        assert entry["logger"] == "autodevelop_api.chat.router"
        assert entry["message"] == "Chat request failed: billing account 1234 empty"
        assert entry["error_code"] == "insufficient_quota"
        assert entry["duration_ms"] == 12
        assert "args" not in entry

    def test_quotes_are_escaped(self):
        """Test that user text cannot break the JSON line."""
        record = self.make_record('preview "quoted" text')

        entry = json.loads(JsonLogFormatter().format(record))

        assert entry["message"] == 'preview "quoted" text'

    def test_non_serializable_extra(self):
        """Test that arbitrary objects are rendered as strings."""
        record = self.make_record("sweep", keys={"a"})

        entry = json.loads(JsonLogFormatter().format(record))

        assert entry["keys"] == "{'a'}"


class TestTelemetry:
    """Tests for OpenTelemetry setup."""

    def test_disabled_by_default(self, test_settings):
        """Test that tracing stays off unless enabled."""
        assert setup_telemetry(test_settings) is False

    def test_console_exporter(self, test_settings):
        """Test enabling tracing with the console exporter."""
        settings = test_settings.model_copy(
            update={"otel_enabled": True, "otel_exporter_type": "console"}
        )

        try:
            assert setup_telemetry(settings) is True
        finally:
            shutdown_telemetry()

    def test_get_tracer(self):
        """Test that a tracer is always available."""
        tracer = get_tracer(__name__)

        with tracer.start_as_current_span("test-span") as span:
            assert span is not None


class TestHealthEndpoints:
    """Tests for health and readiness endpoints."""

    @pytest.fixture
    def client(self):
        return TestClient(create_app())

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_ready(self, client):
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_cors_preflight(self, client):
        """Test that browsers may call the chat endpoint."""
        response = client.options(
            "/api/chat",
            headers={
                "Origin": "https://autodevelop.ai",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
