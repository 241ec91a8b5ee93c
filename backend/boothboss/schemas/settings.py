"""Settings Schemas — partial update payload for booth settings.

Invariants:
    - Every field optional; only fields explicitly sent are applied (exclude_unset)
    - Numeric bounds: countdown 1-10 s, reset 10-300 s, SMTP port 1-65535, video 5-60 s
    - Colors are #RGB or #RRGGBB hex
    - Boolean flags accept loose input ("true", "1", 1) and are coerced with ensure_boolean
"""

from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from boothboss.core.settings_rules import BOOLEAN_FIELDS, DEFAULT_SETTINGS, ensure_boolean
from boothboss.schemas.journey import JourneyPage

HEX_COLOR = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"


class SettingsUpdate(BaseModel):
    event_name: str | None = Field(None, min_length=1, max_length=200)
    admin_email: EmailStr | Literal[""] | None = None
    countdown_time: int | None = Field(None, ge=1, le=10)
    reset_time: int | None = Field(None, ge=10, le=300)
    email_subject: str | None = Field(None, min_length=1, max_length=255)
    email_template: str | None = Field(None, max_length=10_000)
    smtp_host: str | None = Field(None, max_length=255)
    smtp_port: int | None = Field(None, ge=1, le=65535)
    smtp_user: str | None = Field(None, max_length=255)
    smtp_password: str | None = Field(None, max_length=255)

    company_name: str | None = Field(None, max_length=200)
    company_logo: str | None = None
    theme: Literal["midnight", "pastel", "bw", "custom"] | None = None
    primary_color: str | None = Field(None, pattern=HEX_COLOR)
    secondary_color: str | None = Field(None, pattern=HEX_COLOR)
    background_color: str | None = Field(None, pattern=HEX_COLOR)
    border_color: str | None = Field(None, pattern=HEX_COLOR)
    button_color: str | None = Field(None, pattern=HEX_COLOR)
    text_color: str | None = Field(None, pattern=HEX_COLOR)
    show_booth_boss_logo: Any = None
    custom_css: str | None = Field(None, max_length=20_000)

    custom_journey_enabled: Any = None
    journey_config: list[JourneyPage] | None = None
    active_journey_id: str | None = None
    journey_name: str | None = Field(None, max_length=200)
    splash_page_enabled: Any = None
    splash_page_title: str | None = Field(None, max_length=200)
    splash_page_content: str | None = Field(None, max_length=5000)
    splash_page_image: str | None = None
    splash_page_button_text: str | None = Field(None, max_length=100)

    capture_mode: Literal["photo", "video"] | None = None
    photo_orientation: str | None = Field(None, max_length=40)
    photo_device: str | None = Field(None, max_length=40)
    photo_resolution: str | None = Field(None, max_length=20)
    photo_effect: str | None = Field(None, max_length=40)
    printer_enabled: Any = None
    ai_image_correction: Any = None
    video_orientation: str | None = Field(None, max_length=40)
    video_device: str | None = Field(None, max_length=40)
    video_resolution: str | None = Field(None, max_length=20)
    video_effect: str | None = Field(None, max_length=40)
    video_duration: int | None = Field(None, ge=5, le=60)
    filters_enabled: Any = None
    enabled_filters: str | None = None

    storage_provider: Literal["auto", "local", "vercel"] | None = None
    blob_vercel_enabled: Any = None
    local_upload_path: str | None = Field(None, pattern=r"^[A-Za-z0-9_\-/]{1,200}$")
    storage_base_url: str | None = Field(None, max_length=500)

    notes: str | None = None

    @field_validator(*[f for f in BOOLEAN_FIELDS if f != "is_default"], mode="before")
    @classmethod
    def coerce_flags(cls, v: Any) -> bool | None:
        return None if v is None else ensure_boolean(v)

    def to_update(self) -> dict[str, Any]:
        """Fields the client actually sent, with journey pages as plain dicts."""
        data = self.model_dump(exclude_unset=True)
        # An explicit null on a field that has a non-null default means "leave unchanged".
        return {
            k: v for k, v in data.items()
            if v is not None or DEFAULT_SETTINGS.get(k) is None
        }
