"""Application settings and configuration management."""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_INSTRUCTION = (
    "You are a helpful AI assistant for AutoDevelop.ai. Help users transform their "
    "ideas into reality with practical, step-by-step guidance. \n\n"
    "Format your responses using:\n"
    "- ## Headers for main topics\n"
    "- **Bold text** for important points\n"
    "- Numbered lists (1. 2. 3.) for sequential steps\n"
    "- Bullet points (- or *) for features or options\n"
    "- `code snippets` for technical terms\n"
    "- ```code blocks``` for longer code examples\n\n"
    "Be professional, clear, and well-structured. If asked about anything "
    "inappropriate or harmful, politely decline and redirect to constructive "
    "development topics."
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google AI / Gemini Configuration
    google_genai_use_vertexai: bool = Field(
        default=False,
        description="Use Vertex AI instead of Google AI Studio",
    )
    google_api_key: str | None = Field(
        default=None,
        description="Google AI Studio API key",
    )
    google_cloud_project: str | None = Field(
        default=None,
        description="Google Cloud project ID for Vertex AI",
    )
    google_cloud_location: str = Field(
        default="us-central1",
        description="Google Cloud location for Vertex AI",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model to use",
    )

    # Chat completion parameters
    chat_system_instruction: str = Field(
        default=DEFAULT_SYSTEM_INSTRUCTION,
        description="System instruction sent with every chat request",
    )
    chat_max_output_tokens: int = Field(
        default=500,
        gt=0,
        description="Maximum tokens generated per reply",
    )
    chat_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    chat_presence_penalty: float = Field(
        default=0.1,
        description="Presence penalty",
    )
    chat_frequency_penalty: float = Field(
        default=0.1,
        description="Frequency penalty",
    )

    # Admission Control
    chat_max_message_length: int = Field(
        default=2000,
        gt=0,
        description="Maximum trimmed message length in characters",
    )
    chat_suspicious_keywords: list[str] = Field(
        default=["hack", "exploit", "attack", "bypass", "injection"],
        description="Keywords that reject a message when found as a substring",
    )
    rate_limit_window_seconds: int = Field(
        default=60,
        gt=0,
        description="Sliding window length for chat rate limiting",
    )
    rate_limit_max_requests: int = Field(
        default=10,
        gt=0,
        description="Requests admitted per client within one window",
    )
    rate_limit_max_tracked_keys: int = Field(
        default=1000,
        gt=0,
        description="Tracked client count above which expired clients are swept",
    )
    rate_limit_backend: Literal["memory", "redis"] = Field(
        default="memory",
        description="Rate limit store backend",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis URL for the redis rate limit backend",
    )

    # Pricing
    promo_enabled: bool = Field(
        default=True,
        description="Enable the early bird promotional pricing",
    )
    promo_expiry: datetime = Field(
        default=datetime(2025, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
        description="Promotion expiry (promotion is active strictly before it)",
    )
    stripe_starter_price_id: str = Field(default="price_starter_monthly")
    stripe_starter_yearly_price_id: str = Field(default="price_starter_yearly")
    stripe_pro_price_id: str = Field(default="price_pro_monthly")
    stripe_pro_yearly_price_id: str = Field(default="price_pro_yearly")
    stripe_enterprise_price_id: str = Field(default="price_enterprise_monthly")
    stripe_enterprise_yearly_price_id: str = Field(default="price_enterprise_yearly")

    # Server Configuration
    app_name: str = Field(
        default="autodevelop_api",
        description="Service name",
    )
    app_description: str = Field(
        default="AutoDevelop.ai chat and pricing API",
        description="Service description",
    )
    app_host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    app_port: int = Field(
        default=8000,
        description="Server port",
    )
    frontend_url: str | None = Field(
        default=None,
        description="Allowed CORS origin; all origins are allowed when unset",
    )
    support_email: str = Field(
        default="support@autodevelop.ai",
        description="Support address returned with provider errors",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log format",
    )

    # Development Settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # OpenTelemetry Configuration
    otel_enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing",
    )
    otel_service_name: str = Field(
        default="autodevelop_api",
        description="Service name for OpenTelemetry traces",
    )
    otel_exporter_otlp_endpoint: str = Field(
        default="http://localhost:4317",
        description="OTLP exporter endpoint (gRPC)",
    )
    otel_exporter_otlp_http_endpoint: str = Field(
        default="http://localhost:4318",
        description="OTLP exporter endpoint (HTTP)",
    )
    otel_exporter_type: Literal["otlp", "otlp-http", "console"] = Field(
        default="otlp",
        description="Telemetry exporter type",
    )
    otel_traces_sampler: Literal["always_on", "always_off", "traceidratio", "parentbased_always_on", "parentbased_always_off", "parentbased_traceidratio"] = Field(
        default="always_on",
        description="Trace sampling strategy",
    )
    otel_traces_sampler_arg: float = Field(
        default=1.0,
        description="Sampler argument (e.g., ratio for traceidratio)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
