"""Booth Schemas — capture response returned to the booth client."""

from uuid import UUID

from pydantic import BaseModel


class CaptureResponse(BaseModel):
    success: bool = True
    session_id: UUID
    media_url: str
    full_url: str
    provider: str
    fallback_used: bool
    email_sent: bool
