"""Rate limiting data models."""

from pydantic import BaseModel, Field


class RateLimitStatus(BaseModel):
    """Outcome of a sliding window check for one client."""

    client_key: str = Field(..., description="Client identifier")
    requests_in_window: int = Field(
        0, description="Admitted requests in the current window, this one included"
    )
    limit: int = Field(..., description="Requests allowed per window")
    window_seconds: int = Field(..., description="Sliding window length")
    is_rate_limited: bool = Field(False, description="Whether the request was rejected")
    retry_after_seconds: int | None = Field(
        None, description="Seconds until the oldest request leaves the window"
    )
