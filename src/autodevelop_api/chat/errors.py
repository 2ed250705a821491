"""Provider error taxonomy.

Failures of the chat-completion call are resolved into a closed set of kinds
once, at the provider boundary. Everything downstream works with
``ProviderErrorKind`` and never inspects raw provider codes.
"""

import logging
import uuid
from enum import Enum
from typing import NamedTuple

from google.genai import errors as genai_errors
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ProviderErrorKind(str, Enum):
    """Kinds of chat-completion provider failures."""

    QUOTA_EXCEEDED = "quota_exceeded"
    PROVIDER_RATE_LIMITED = "provider_rate_limited"
    INVALID_REQUEST = "invalid_request"
    CONTEXT_TOO_LONG = "context_too_long"
    CONTENT_FILTERED = "content_filtered"
    UNKNOWN = "unknown"


class ProviderError(Exception):
    """Raised by the chat provider for failures it detects itself."""

    def __init__(self, kind: ProviderErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind
        self.code = kind.value


class ErrorMapping(NamedTuple):
    """User-facing message and HTTP status for a provider error kind."""

    user_message: str
    status_code: int


# Provider error codes understood without further inspection
PROVIDER_CODE_TO_KIND: dict[str, ProviderErrorKind] = {
    "insufficient_quota": ProviderErrorKind.QUOTA_EXCEEDED,
    "rate_limit_exceeded": ProviderErrorKind.PROVIDER_RATE_LIMITED,
    "invalid_request_error": ProviderErrorKind.INVALID_REQUEST,
    "context_length_exceeded": ProviderErrorKind.CONTEXT_TOO_LONG,
    "content_filter": ProviderErrorKind.CONTENT_FILTERED,
}

ERROR_MAPPINGS: dict[ProviderErrorKind, ErrorMapping] = {
    ProviderErrorKind.QUOTA_EXCEEDED: ErrorMapping(
        "Our AI service is temporarily unavailable due to high demand. "
        "Please try again in a few minutes.",
        503,
    ),
    ProviderErrorKind.PROVIDER_RATE_LIMITED: ErrorMapping(
        "Too many requests to our AI service. Please wait a moment and try again.",
        429,
    ),
    ProviderErrorKind.INVALID_REQUEST: ErrorMapping(
        "There was an issue with your request. Please try rephrasing your message.",
        400,
    ),
    ProviderErrorKind.CONTEXT_TOO_LONG: ErrorMapping(
        "Your message is too complex. Please try breaking it into smaller, "
        "simpler questions.",
        400,
    ),
    ProviderErrorKind.CONTENT_FILTERED: ErrorMapping(
        "Your message contains content that cannot be processed. "
        "Please rephrase your question.",
        400,
    ),
    ProviderErrorKind.UNKNOWN: ErrorMapping(
        "Sorry, I encountered an error. Please try again.",
        500,
    ),
}


class ProviderErrorInfo(BaseModel):
    """Classified provider failure."""

    kind: ProviderErrorKind = Field(..., description="Provider error kind")
    user_message: str = Field(..., description="Non-leaking message for the caller")
    status_code: int = Field(..., description="HTTP status to answer with")
    error_id: str = Field(..., description="Opaque identifier for support correlation")


def _translate_genai_error(error: genai_errors.APIError) -> ProviderErrorKind:
    status = (error.status or "").upper()
    detail = (error.message or str(error)).lower()

    if error.code == 429 or status == "RESOURCE_EXHAUSTED":
        if "quota" in detail:
            return ProviderErrorKind.QUOTA_EXCEEDED
        return ProviderErrorKind.PROVIDER_RATE_LIMITED

    if error.code == 400 or status == "INVALID_ARGUMENT":
        if "token" in detail and ("exceed" in detail or "limit" in detail):
            return ProviderErrorKind.CONTEXT_TOO_LONG
        if "context" in detail and "length" in detail:
            return ProviderErrorKind.CONTEXT_TOO_LONG
        return ProviderErrorKind.INVALID_REQUEST

    return ProviderErrorKind.UNKNOWN


def translate_provider_error(error: BaseException) -> ProviderErrorKind:
    """Resolve an arbitrary provider failure into a ``ProviderErrorKind``.

    Args:
        error: Exception raised by the provider call.

    Returns:
        The error kind; ``UNKNOWN`` when nothing matches.
    """
    if isinstance(error, ProviderError):
        return error.kind

    if isinstance(error, genai_errors.APIError):
        return _translate_genai_error(error)

    code = getattr(error, "code", None)
    if isinstance(code, str):
        return PROVIDER_CODE_TO_KIND.get(code, ProviderErrorKind.UNKNOWN)

    return ProviderErrorKind.UNKNOWN


def classify_provider_error(error: BaseException) -> ProviderErrorInfo:
    """Map a provider failure to a user-safe message and status code.

    Args:
        error: Exception raised by the provider call.

    Returns:
        Classified error with a freshly generated error ID.
    """
    kind = translate_provider_error(error)
    mapping = ERROR_MAPPINGS[kind]
    return ProviderErrorInfo(
        kind=kind,
        user_message=mapping.user_message,
        status_code=mapping.status_code,
        error_id=str(uuid.uuid4()),
    )
