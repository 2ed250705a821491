"""Chat admission and response models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AdmissionDecision(str, Enum):
    """Outcome of admission control for a chat request."""

    ADMITTED = "admitted"
    RATE_LIMITED = "rate_limited"
    SUSPICIOUS_CONTENT = "suspicious_content"
    INVALID_INPUT = "invalid_input"
    MESSAGE_TOO_LONG = "message_too_long"


class ChatErrorResponse(BaseModel):
    """Error body returned by the chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(..., description="User-facing error message")
    hint: str | None = Field(None, description="How to fix the request")
    retry_after: int | None = Field(
        None,
        alias="retryAfter",
        description="Seconds to wait before retrying",
    )
    current_length: int | None = Field(
        None,
        alias="currentLength",
        description="Length of the rejected message",
    )
    max_length: int | None = Field(
        None,
        alias="maxLength",
        description="Maximum accepted message length",
    )
    error_id: str | None = Field(
        None,
        alias="errorId",
        description="Opaque identifier for support correlation",
    )
    support_email: str | None = Field(
        None,
        alias="supportEmail",
        description="Support contact",
    )

    def to_body(self) -> dict:
        """Serialize with wire names, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


_REJECTION_BODIES: dict[AdmissionDecision, tuple[str, str | None]] = {
    AdmissionDecision.RATE_LIMITED: (
        "Too many requests. Please slow down and try again in a minute.",
        None,
    ),
    AdmissionDecision.INVALID_INPUT: (
        "A valid message is required",
        "Please provide a non-empty text message",
    ),
    AdmissionDecision.MESSAGE_TOO_LONG: (
        "Message is too long",
        "Please keep your message under {max_length} characters",
    ),
    AdmissionDecision.SUSPICIOUS_CONTENT: (
        "Your message contains content that cannot be processed.",
        "Please rephrase your question and focus on development topics.",
    ),
}


class AdmissionResult(BaseModel):
    """Result of admission control.

    ``message`` holds the trimmed text whenever the input was a valid string,
    so an admitted result can be forwarded to the provider as is.
    """

    decision: AdmissionDecision = Field(..., description="Admission decision")
    message: str | None = Field(None, description="Trimmed message text")
    current_length: int | None = Field(None, description="Trimmed message length")
    max_length: int | None = Field(None, description="Maximum message length")
    retry_after: int | None = Field(
        None, description="Seconds until the client may retry (rate limited only)"
    )

    @property
    def admitted(self) -> bool:
        return self.decision == AdmissionDecision.ADMITTED

    @property
    def status_code(self) -> int:
        if self.decision == AdmissionDecision.ADMITTED:
            return 200
        if self.decision == AdmissionDecision.RATE_LIMITED:
            return 429
        return 400

    def to_error_response(self) -> ChatErrorResponse:
        """Build the JSON error body for a rejected request.

        Raises:
            ValueError: If the request was admitted.
        """
        if self.admitted:
            raise ValueError("Admitted requests have no error response")

        error, hint = _REJECTION_BODIES[self.decision]
        response = ChatErrorResponse(error=error)

        if self.decision == AdmissionDecision.RATE_LIMITED:
            response.retry_after = self.retry_after
        elif self.decision == AdmissionDecision.MESSAGE_TOO_LONG:
            response.hint = hint.format(max_length=self.max_length) if hint else None
            response.current_length = self.current_length
            response.max_length = self.max_length
        else:
            response.hint = hint

        return response


class ChatCompletion(BaseModel):
    """Reply produced by the chat provider."""

    reply: str = Field(..., description="Generated reply text")
    total_tokens: int = Field(0, description="Tokens consumed by the call")


class ChatMeta(BaseModel):
    """Metadata attached to a successful chat reply."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = Field(..., description="ISO-8601 response timestamp")
    response_time: int = Field(
        ...,
        alias="responseTime",
        description="Handler duration in milliseconds",
    )


class ChatResponse(BaseModel):
    """Successful chat response body."""

    reply: str
    meta: ChatMeta
