"""Chat-completion provider backed by Google Gemini."""

import logging

from google import genai
from google.genai import types

from autodevelop_api.chat.errors import ProviderError, ProviderErrorKind
from autodevelop_api.chat.models import ChatCompletion
from autodevelop_api.config import Settings, get_settings
from autodevelop_api.telemetry import get_tracer

logger = logging.getLogger(__name__)

FALLBACK_REPLY = (
    "I'm sorry, I couldn't generate a response. Please try rephrasing your question."
)


class ChatProvider:
    """Sends a single user message to Gemini and returns the reply.

    Provider exceptions propagate unchanged; callers resolve them with
    ``classify_provider_error``. A prompt blocked by the safety filters is
    reported as ``ProviderError(CONTENT_FILTERED)``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: genai.Client | None = None,
    ):
        """Initialize the provider.

        Args:
            settings: Application settings.
            client: Pre-built GenAI client (created lazily from settings otherwise).
        """
        self._settings = settings or get_settings()
        self._client = client
        self._tracer = get_tracer(__name__)

    def _get_client(self) -> genai.Client:
        """Get the GenAI client, configuring Vertex AI or AI Studio.

        Returns:
            GenAI client.
        """
        if self._client is None:
            settings = self._settings
            if settings.google_genai_use_vertexai:
                self._client = genai.Client(
                    vertexai=True,
                    project=settings.google_cloud_project,
                    location=settings.google_cloud_location,
                )
            else:
                self._client = genai.Client(api_key=settings.google_api_key)
        return self._client

    def _build_config(self) -> types.GenerateContentConfig:
        settings = self._settings
        return types.GenerateContentConfig(
            system_instruction=settings.chat_system_instruction,
            max_output_tokens=settings.chat_max_output_tokens,
            temperature=settings.chat_temperature,
            presence_penalty=settings.chat_presence_penalty,
            frequency_penalty=settings.chat_frequency_penalty,
        )

    async def complete(self, message: str) -> ChatCompletion:
        """Generate a reply for a user message.

        Args:
            message: Admitted, trimmed user message.

        Returns:
            Generated reply and token usage.

        Raises:
            ProviderError: If the prompt was blocked.
            google.genai.errors.APIError: If the API call fails.
        """
        client = self._get_client()
        model = self._settings.gemini_model

        with self._tracer.start_as_current_span("chat.generate_content") as span:
            span.set_attribute("gen_ai.request.model", model)
            span.set_attribute("chat.message_length", len(message))

            response = await client.aio.models.generate_content(
                model=model,
                contents=message,
                config=self._build_config(),
            )

            feedback = response.prompt_feedback
            if feedback is not None and feedback.block_reason:
                raise ProviderError(
                    ProviderErrorKind.CONTENT_FILTERED,
                    f"Prompt blocked: {feedback.block_reason}",
                )

            usage = response.usage_metadata
            total_tokens = (usage.total_token_count or 0) if usage else 0
            span.set_attribute("gen_ai.usage.total_tokens", total_tokens)

        return ChatCompletion(
            reply=response.text or FALLBACK_REPLY,
            total_tokens=total_tokens,
        )


# Global provider instance
_provider: ChatProvider | None = None


def get_chat_provider() -> ChatProvider:
    """Get the global chat provider instance.

    Returns:
        ChatProvider instance.
    """
    global _provider
    if _provider is None:
        _provider = ChatProvider()
    return _provider
