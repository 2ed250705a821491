"""Pytest configuration and fixtures."""

import os

import pytest

# Set test environment variables before importing application modules
os.environ["GOOGLE_GENAI_USE_VERTEXAI"] = "FALSE"
os.environ["GOOGLE_API_KEY"] = "test-api-key"
os.environ["DEBUG"] = "true"
os.environ["RATE_LIMIT_BACKEND"] = "memory"
os.environ["OTEL_ENABLED"] = "false"


@pytest.fixture
def test_settings():
    """Provide test settings."""
    from autodevelop_api.config import Settings

    return Settings(
        google_api_key="test-api-key",
        debug=True,
        rate_limit_backend="memory",
        otel_enabled=False,
    )


@pytest.fixture
def memory_store():
    """Provide an empty in-memory rate limit store."""
    from autodevelop_api.ratelimit import InMemoryRateLimitStore

    return InMemoryRateLimitStore()


@pytest.fixture
def rate_limiter(test_settings, memory_store):
    """Provide a rate limiter over an in-memory store."""
    from autodevelop_api.ratelimit import SlidingWindowRateLimiter

    return SlidingWindowRateLimiter(settings=test_settings, store=memory_store)


@pytest.fixture
def admission_controller(test_settings, rate_limiter):
    """Provide an admission controller with a fresh rate limit table."""
    from autodevelop_api.chat import AdmissionController

    return AdmissionController(settings=test_settings, rate_limiter=rate_limiter)
