"""Main entry point for the AutoDevelop API."""

import json
import logging
import sys
from typing import Any

import uvicorn
from dotenv import load_dotenv

from autodevelop_api.config import get_settings


_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record, including fields passed via ``extra=``."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging() -> None:
    """Configure application logging.

    ``LOG_FORMAT=json`` emits structured records carrying their ``extra``
    fields; any other value gives plain text lines.
    """
    settings = get_settings()

    handler = logging.StreamHandler(sys.stdout)
    if settings.log_format == "json":
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        handlers=[handler],
    )


def main() -> None:
    """Run the AutoDevelop API server."""
    # Load environment variables from .env file
    load_dotenv()

    setup_logging()

    settings = get_settings()
    logger = logging.getLogger(__name__)

    # Tracing must be configured before the app is created
    from autodevelop_api.telemetry import setup_telemetry, shutdown_telemetry

    setup_telemetry(settings)

    logger.info(
        "Starting %s on %s:%d (model=%s)",
        settings.app_name,
        settings.app_host,
        settings.app_port,
        settings.gemini_model,
        extra={
            "service": settings.app_name,
            "model": settings.gemini_model,
            "host": settings.app_host,
            "port": settings.app_port,
            "otel_enabled": settings.otel_enabled,
        },
    )

    from autodevelop_api.api.app import create_app

    app = create_app()

    try:
        uvicorn.run(
            app,
            host=settings.app_host,
            port=settings.app_port,
            log_level=settings.log_level.lower(),
        )
    finally:
        shutdown_telemetry()


if __name__ == "__main__":
    main()
