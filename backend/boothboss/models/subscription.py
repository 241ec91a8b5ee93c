"""Subscription ORM — one plan per user with per-row feature overrides.

Invariants:
    - Exactly one row per user (user_id unique)
    - Feature columns mirror core/subscription_features.TierFeatures; a NULL column
      means "use the tier default"
    - Dates are timezone-aware UTC
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from boothboss.db.base import Base


class Subscription(Base):
    __tablename__ = "subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    tier: Mapped[str] = mapped_column(String(20), nullable=False, default="FREE")
    duration: Mapped[str] = mapped_column(String(20), nullable=False, default="TRIAL")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="TRIAL")
    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    trial_end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    max_media: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_emails: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_video_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    custom_domain: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    analytics_access: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    filter_access: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    video_access: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    ai_enhancement: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    journey_builder: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    branding_removal: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    priority_support: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship("User", back_populates="subscription")
