"""Analytics Schemas — tracking payload posted by booth clients.

Invariants:
    - event selects the tracking verb; field requirements per verb are enforced
      by the model validator (analytics_id for session_complete/event, event_type for event)
"""

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class TrackRequest(BaseModel):
    event: Literal["session_start", "session_complete", "event"]
    analytics_id: UUID | None = None
    session_id: str | None = Field(None, max_length=64)
    url_path: str | None = Field(None, max_length=30)
    user_agent: str | None = Field(None, max_length=1000)
    booth_session_id: UUID | None = None
    email: str | None = Field(None, max_length=255)
    duration_ms: int | None = Field(None, ge=0)
    event_type: str | None = Field(None, max_length=40)
    media_type: Literal["photo", "video"] | None = None
    filter: str | None = Field(None, max_length=40)
    metadata: dict[str, Any] | None = None

    @model_validator(mode="after")
    def check_required_fields(self) -> "TrackRequest":
        if self.event in ("session_complete", "event") and self.analytics_id is None:
            raise ValueError(f"analytics_id is required for {self.event}")
        if self.event == "event" and not self.event_type:
            raise ValueError("event_type is required for event")
        return self
