"""EventUrlSettings ORM — junction linking an event URL to the settings it serves.

Invariants:
    - At most one active link per event URL (enforced by settings_service.link_settings_to_event_url)
    - (event_url_id, settings_id) pairs are unique
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from boothboss.db.base import Base


class EventUrlSettings(Base):
    __tablename__ = "event_url_settings"
    __table_args__ = (
        UniqueConstraint("event_url_id", "settings_id", name="uq_event_url_settings_pair"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    event_url_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("event_urls.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    settings_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("settings.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
