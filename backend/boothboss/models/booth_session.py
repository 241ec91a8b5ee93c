"""BoothSession ORM — one attendee capture and its delivery status.

Invariants:
    - user_id is the event owner (tenant), not the attendee
    - event_url_id is cleared (not cascaded) when the event URL is deleted;
      event_url_path keeps the slug for history
    - email_sent flips to True only after a successful attendee delivery
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from boothboss.db.base import Base


class BoothSession(Base):
    __tablename__ = "booth_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True, index=True,
    )
    event_url_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("event_urls.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    event_url_path: Mapped[str | None] = mapped_column(String(30), nullable=True)
    user_name: Mapped[str] = mapped_column(String(200), nullable=False)
    user_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    media_url: Mapped[str] = mapped_column(Text, nullable=False)
    media_type: Mapped[str] = mapped_column(String(10), nullable=False, default="photo")
    filter: Mapped[str] = mapped_column(String(40), nullable=False, default="normal")
    storage_provider: Mapped[str] = mapped_column(String(10), nullable=False, default="local")
    event_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    template_used: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    shared: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc), index=True,
    )
