"""Admission control for chat requests."""

import logging
from typing import Any

from fastapi import Request

from autodevelop_api.chat.models import AdmissionDecision, AdmissionResult
from autodevelop_api.config import Settings, get_settings
from autodevelop_api.ratelimit import SlidingWindowRateLimiter, get_rate_limiter, now_millis

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def get_client_key_from_request(request: Request) -> str:
    """Extract the rate limiting key for a request.

    The key comes from:
    1. The first address in X-Forwarded-For (set by the proxy in front of us)
    2. The connection peer address
    3. ``"unknown"`` when neither is available

    Args:
        request: FastAPI request.

    Returns:
        Client key.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    if request.client and request.client.host:
        return request.client.host

    return UNKNOWN_CLIENT


class ContentScreener:
    """Case-insensitive substring denylist."""

    def __init__(self, keywords: list[str]):
        self._keywords = [k.lower() for k in keywords if k]

    @property
    def keywords(self) -> list[str]:
        return list(self._keywords)

    def find_matches(self, text: str) -> list[str]:
        """Return every denylisted keyword contained in ``text``."""
        lowered = text.lower()
        return [k for k in self._keywords if k in lowered]

    def is_suspicious(self, text: str) -> bool:
        lowered = text.lower()
        return any(k in lowered for k in self._keywords)


class AdmissionController:
    """Decides whether a chat request may reach the provider.

    Checks run in order and the first failure wins:
    - the message must be a non-empty string within the length limit
    - the client must be under its sliding window quota
    - the message must not contain a denylisted keyword

    A message rejected by the content check has already been counted by the
    rate limiter.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        rate_limiter: SlidingWindowRateLimiter | None = None,
        screener: ContentScreener | None = None,
    ):
        """Initialize the admission controller.

        Args:
            settings: Application settings.
            rate_limiter: Sliding window rate limiter.
            screener: Content screener (built from settings if not provided).
        """
        self._settings = settings or get_settings()
        self._rate_limiter = rate_limiter or SlidingWindowRateLimiter(self._settings)
        self._screener = screener or ContentScreener(self._settings.chat_suspicious_keywords)
        self.max_message_length = self._settings.chat_max_message_length

    @property
    def rate_limiter(self) -> SlidingWindowRateLimiter:
        return self._rate_limiter

    def validate_message(self, message_text: Any) -> AdmissionResult | None:
        """Validate the raw message.

        Args:
            message_text: Message as received from the client.

        Returns:
            A rejection, or None when the message is valid.
        """
        if not isinstance(message_text, str) or not message_text.strip():
            return AdmissionResult(decision=AdmissionDecision.INVALID_INPUT)

        trimmed = message_text.strip()
        if len(trimmed) > self.max_message_length:
            return AdmissionResult(
                decision=AdmissionDecision.MESSAGE_TOO_LONG,
                current_length=len(trimmed),
                max_length=self.max_message_length,
            )

        return None

    async def check_admission(
        self,
        client_key: str,
        message_text: Any,
        now_ms: int | None = None,
    ) -> AdmissionResult:
        """Run admission control for one chat request.

        Args:
            client_key: Client identifier.
            message_text: Raw message from the request body.
            now_ms: Current time in milliseconds (wall clock when omitted).

        Returns:
            Admission result.
        """
        if now_ms is None:
            now_ms = now_millis()

        rejection = self.validate_message(message_text)
        if rejection is not None:
            return rejection

        trimmed = message_text.strip()

        status = await self._rate_limiter.check(client_key, now_ms)
        if status.is_rate_limited:
            logger.warning(
                "Rate limit exceeded for client: %s",
                client_key,
                extra={
                    "client_key": client_key,
                    "requests_in_window": status.requests_in_window,
                    "limit": status.limit,
                },
            )
            return AdmissionResult(
                decision=AdmissionDecision.RATE_LIMITED,
                message=trimmed,
                retry_after=status.retry_after_seconds,
            )

        matches = self._screener.find_matches(trimmed)
        if matches:
            logger.warning(
                "Suspicious content detected for client %s (keywords=%s): %s",
                client_key,
                ", ".join(matches),
                trimmed[:100],
                extra={
                    "client_key": client_key,
                    "keywords": matches,
                    "message_preview": trimmed[:100],
                },
            )
            return AdmissionResult(
                decision=AdmissionDecision.SUSPICIOUS_CONTENT,
                message=trimmed,
            )

        return AdmissionResult(
            decision=AdmissionDecision.ADMITTED,
            message=trimmed,
            current_length=len(trimmed),
            max_length=self.max_message_length,
        )


# Global admission controller instance
_controller: AdmissionController | None = None


def get_admission_controller() -> AdmissionController:
    """Get the global admission controller instance.

    Returns:
        AdmissionController instance.
    """
    global _controller
    if _controller is None:
        _controller = AdmissionController(rate_limiter=get_rate_limiter())
    return _controller
