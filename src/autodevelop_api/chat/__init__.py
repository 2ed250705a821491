"""Chat module.

This module fronts the chat-completion provider:
- Admission control (validation, rate limiting, content screening)
- Gemini chat provider
- Provider error taxonomy
"""

from autodevelop_api.chat.admission import (
    AdmissionController,
    ContentScreener,
    get_admission_controller,
    get_client_key_from_request,
)
from autodevelop_api.chat.errors import (
    ProviderError,
    ProviderErrorInfo,
    ProviderErrorKind,
    classify_provider_error,
    translate_provider_error,
)
from autodevelop_api.chat.models import (
    AdmissionDecision,
    AdmissionResult,
    ChatCompletion,
    ChatErrorResponse,
    ChatResponse,
)
from autodevelop_api.chat.provider import ChatProvider, get_chat_provider
from autodevelop_api.chat.router import router as chat_router

__all__ = [
    # Admission
    "AdmissionController",
    "ContentScreener",
    "get_admission_controller",
    "get_client_key_from_request",
    # Errors
    "ProviderError",
    "ProviderErrorInfo",
    "ProviderErrorKind",
    "classify_provider_error",
    "translate_provider_error",
    # Models
    "AdmissionDecision",
    "AdmissionResult",
    "ChatCompletion",
    "ChatErrorResponse",
    "ChatResponse",
    # Provider
    "ChatProvider",
    "get_chat_provider",
    # Router
    "chat_router",
]
