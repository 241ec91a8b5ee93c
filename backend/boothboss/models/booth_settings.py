"""BoothSettings ORM — booth presentation, capture, email and storage configuration.

Invariants:
    - Column names match the keys of core/settings_rules.DEFAULT_SETTINGS
    - A user's base settings have event_url_id NULL; event-specific settings carry
      the event URL they were forked for. Which settings an event URL actually
      serves is decided by its active EventUrlSettings link
    - journey_config is a JSON list of journey pages (never a string once stored)
    - At most one row has is_default=True (system template, user_id NULL)
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from boothboss.db.base import Base


class BoothSettings(Base):
    __tablename__ = "settings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True, index=True,
    )
    # Set only on event-specific settings; NULL marks the owner's base settings.
    event_url_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("event_urls.id", ondelete="CASCADE"),
        nullable=True, index=True,
    )
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Event & email
    event_name: Mapped[str] = mapped_column(String(200), nullable=False, default="Photo Booth Event")
    admin_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    countdown_time: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    reset_time: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    email_subject: Mapped[str] = mapped_column(String(255), nullable=False, default="Your Photo Booth Pictures")
    email_template: Mapped[str] = mapped_column(
        Text, nullable=False,
        default="Thank you for using our photo booth! Here's your picture.",
    )
    smtp_host: Mapped[str] = mapped_column(String(255), nullable=False, default="smtp.example.com")
    smtp_port: Mapped[int] = mapped_column(Integer, nullable=False, default=587)
    smtp_user: Mapped[str] = mapped_column(String(255), nullable=False, default="user")
    smtp_password: Mapped[str] = mapped_column(String(255), nullable=False, default="password")

    # Branding & theme
    company_name: Mapped[str] = mapped_column(String(200), nullable=False, default="Bureau of Internet Culture")
    company_logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    theme: Mapped[str] = mapped_column(String(20), nullable=False, default="custom")
    primary_color: Mapped[str] = mapped_column(String(9), nullable=False, default="#3B82F6")
    secondary_color: Mapped[str] = mapped_column(String(9), nullable=False, default="#1E40AF")
    background_color: Mapped[str] = mapped_column(String(9), nullable=False, default="#FFFFFF")
    border_color: Mapped[str] = mapped_column(String(9), nullable=False, default="#E5E7EB")
    button_color: Mapped[str] = mapped_column(String(9), nullable=False, default="#3B82F6")
    text_color: Mapped[str] = mapped_column(String(9), nullable=False, default="#111827")
    show_booth_boss_logo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    custom_css: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Journey & splash page
    custom_journey_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    journey_config: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    active_journey_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    journey_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    splash_page_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    splash_page_title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    splash_page_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    splash_page_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    splash_page_button_text: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Capture
    capture_mode: Mapped[str] = mapped_column(String(10), nullable=False, default="photo")
    photo_orientation: Mapped[str] = mapped_column(String(40), nullable=False, default="portrait-standard")
    photo_device: Mapped[str] = mapped_column(String(40), nullable=False, default="ipad")
    photo_resolution: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    photo_effect: Mapped[str] = mapped_column(String(40), nullable=False, default="none")
    printer_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ai_image_correction: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    video_orientation: Mapped[str] = mapped_column(String(40), nullable=False, default="portrait-standard")
    video_device: Mapped[str] = mapped_column(String(40), nullable=False, default="ipad")
    video_resolution: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    video_effect: Mapped[str] = mapped_column(String(40), nullable=False, default="none")
    video_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    filters_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    enabled_filters: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Storage
    storage_provider: Mapped[str] = mapped_column(String(10), nullable=False, default="auto")
    blob_vercel_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    local_upload_path: Mapped[str] = mapped_column(String(200), nullable=False, default="uploads")
    storage_base_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def as_dict(self) -> dict[str, Any]:
        data = {c.key: getattr(self, c.key) for c in self.__table__.columns}
        data["id"] = str(self.id)
        data["user_id"] = str(self.user_id) if self.user_id else None
        data["event_url_id"] = str(self.event_url_id) if self.event_url_id else None
        for key in ("created_at", "updated_at"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data

    @classmethod
    def column_names(cls) -> frozenset[str]:
        return frozenset(c.key for c in cls.__table__.columns)
