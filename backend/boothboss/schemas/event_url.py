"""Event URL Schemas — create/update payloads for booth slugs.

Invariants:
    - url_path is lowercased and stripped here; rule checks (length, charset,
      reserved words) live in core/event_url_rules.py so services share them
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from boothboss.core.event_url_rules import sanitize_url_path


class EventUrlCreate(BaseModel):
    url_path: str = Field(min_length=1, max_length=60)
    event_name: str = Field(min_length=2, max_length=200)
    event_start_date: datetime | None = None
    event_end_date: datetime | None = None
    is_active: bool = True

    @field_validator("url_path")
    @classmethod
    def clean_path(cls, v: str) -> str:
        return sanitize_url_path(v)


class EventUrlUpdate(BaseModel):
    url_path: str | None = Field(None, min_length=1, max_length=60)
    event_name: str | None = Field(None, min_length=2, max_length=200)
    event_start_date: datetime | None = None
    event_end_date: datetime | None = None
    is_active: bool | None = None

    @field_validator("url_path")
    @classmethod
    def clean_path(cls, v: str | None) -> str | None:
        return sanitize_url_path(v) if v is not None else v


class EventUrlResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    url_path: str
    event_name: str
    is_active: bool
    event_start_date: datetime | None
    event_end_date: datetime | None
    created_at: datetime
    updated_at: datetime
