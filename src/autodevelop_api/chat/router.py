"""FastAPI router for the chat endpoint."""

import logging
import time
from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from autodevelop_api.chat.admission import (
    AdmissionController,
    get_admission_controller,
    get_client_key_from_request,
)
from autodevelop_api.chat.errors import classify_provider_error
from autodevelop_api.chat.models import ChatErrorResponse, ChatMeta, ChatResponse
from autodevelop_api.chat.provider import ChatProvider, get_chat_provider
from autodevelop_api.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Chat"])


async def _read_message(request: Request) -> Any:
    """Pull ``message`` out of the JSON body, tolerating malformed bodies."""
    try:
        body = await request.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("message")
    return None


@router.post("/chat", response_model=None)
async def chat(
    request: Request,
    controller: Annotated[AdmissionController, Depends(get_admission_controller)],
    provider: Annotated[ChatProvider, Depends(get_chat_provider)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JSONResponse | dict[str, Any]:
    """Answer a chat message.

    The request passes admission control first; rejected requests never
    reach the provider. Provider failures are answered with a generic
    message and an error ID, while the underlying error is only logged.

    Args:
        request: FastAPI request.
        controller: Admission controller.
        provider: Chat-completion provider.
        settings: Application settings.

    Returns:
        Reply with metadata, or a JSON error response.
    """
    start = time.monotonic()
    client_key = get_client_key_from_request(request)
    message = await _read_message(request)

    admission = await controller.check_admission(client_key, message)
    if not admission.admitted:
        headers = None
        if admission.retry_after is not None:
            headers = {"Retry-After": str(admission.retry_after)}
        return JSONResponse(
            status_code=admission.status_code,
            content=admission.to_error_response().to_body(),
            headers=headers,
        )

    logger.info(
        "Processing chat request",
        extra={
            "client_key": client_key,
            "message_length": admission.current_length,
        },
    )

    try:
        completion = await provider.complete(admission.message or "")
    except Exception as e:
        duration = int((time.monotonic() - start) * 1000)
        info = classify_provider_error(e)
        logger.error(
            "Chat request failed for client %s after %dms: kind=%s code=%s "
            "error_id=%s: %s",
            client_key,
            duration,
            info.kind.value,
            getattr(e, "code", None),
            info.error_id,
            e,
            extra={
                "client_key": client_key,
                "duration_ms": duration,
                "error_type": info.kind.value,
                "error_code": getattr(e, "code", None),
                "error_message": str(e),
                "error_id": info.error_id,
            },
        )
        body = ChatErrorResponse(
            error=info.user_message,
            error_id=info.error_id,
            support_email=settings.support_email,
        )
        return JSONResponse(status_code=info.status_code, content=body.to_body())

    duration = int((time.monotonic() - start) * 1000)
    logger.info(
        "Chat request successful",
        extra={
            "client_key": client_key,
            "duration_ms": duration,
            "response_length": len(completion.reply),
            "tokens_used": completion.total_tokens,
        },
    )

    response = ChatResponse(
        reply=completion.reply,
        meta=ChatMeta(
            timestamp=datetime.now(timezone.utc).isoformat(),
            response_time=duration,
        ),
    )
    return response.model_dump(by_alias=True)
