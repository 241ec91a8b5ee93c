"""Journey Schemas — journey pages and saved journey templates."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class JourneyPage(BaseModel):
    """One interstitial page in an attendee journey."""
    id: str = Field(min_length=1, max_length=64)
    title: str = Field("", max_length=200)
    content: str = Field("", max_length=5000)
    background_image: str | None = None
    button_text: str = Field("Continue", max_length=100)
    button_image: str | None = None


class JourneySave(BaseModel):
    id: UUID | None = None
    name: str = Field(min_length=1, max_length=200)
    pages: list[JourneyPage] = Field(default_factory=list, max_length=50)


class JourneyActivate(BaseModel):
    event_url_id: UUID | None = None


class JourneyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    pages: list[dict]
    created_at: datetime
    updated_at: datetime
