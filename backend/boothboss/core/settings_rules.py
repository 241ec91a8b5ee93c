"""Settings Rules — defaults, normalization and client shaping for booth settings.

Invariants:
    - BOOLEAN_FIELDS are normalized with ensure_boolean on every write and every client read
    - parse_journey_config always returns a list (never raises on bad input)
    - process_settings_for_client never exposes smtp_password
    - DEFAULT_SETTINGS is never mutated; callers get copies via build_default_settings()

Design Decisions:
    - Settings handled as plain dicts in core: services convert ORM rows with
      BoothSettings.as_dict() so these rules stay free of SQLAlchemy
"""

import json
import time
from typing import Any

BOOLEAN_FIELDS: tuple[str, ...] = (
    "custom_journey_enabled",
    "splash_page_enabled",
    "printer_enabled",
    "filters_enabled",
    "ai_image_correction",
    "show_booth_boss_logo",
    "blob_vercel_enabled",
    "is_default",
)

# Fields a tenant may never overwrite through an update payload.
PROTECTED_FIELDS: frozenset[str] = frozenset({
    "id", "user_id", "event_url_id", "is_default", "created_at", "updated_at",
})

# Fields kept out of the public booth payload.
PRIVATE_FIELDS: frozenset[str] = frozenset({
    "smtp_host", "smtp_port", "smtp_user", "smtp_password", "admin_email",
    "notes", "local_upload_path", "storage_base_url", "blob_vercel_enabled",
    "storage_provider", "user_id", "event_url_id", "is_default",
})

DEFAULT_SETTINGS: dict[str, Any] = {
    "event_name": "Photo Booth Event",
    "admin_email": "",
    "countdown_time": 3,
    "reset_time": 30,
    "email_subject": "Your Photo Booth Pictures",
    "email_template": "Thank you for using our photo booth! Here's your picture.",
    "smtp_host": "smtp.example.com",
    "smtp_port": 587,
    "smtp_user": "user",
    "smtp_password": "password",
    "company_name": "Bureau of Internet Culture",
    "company_logo": None,
    "theme": "custom",
    "primary_color": "#3B82F6",
    "secondary_color": "#1E40AF",
    "background_color": "#FFFFFF",
    "border_color": "#E5E7EB",
    "button_color": "#3B82F6",
    "text_color": "#111827",
    "custom_journey_enabled": False,
    "journey_config": [],
    "active_journey_id": None,
    "journey_name": None,
    "splash_page_enabled": False,
    "splash_page_title": None,
    "splash_page_content": None,
    "splash_page_image": None,
    "splash_page_button_text": None,
    "capture_mode": "photo",
    "photo_orientation": "portrait-standard",
    "photo_device": "ipad",
    "photo_resolution": "medium",
    "photo_effect": "none",
    "printer_enabled": False,
    "ai_image_correction": False,
    "video_orientation": "portrait-standard",
    "video_device": "ipad",
    "video_resolution": "medium",
    "video_effect": "none",
    "video_duration": 10,
    "filters_enabled": True,
    "enabled_filters": None,
    "storage_provider": "auto",
    "blob_vercel_enabled": True,
    "local_upload_path": "uploads",
    "storage_base_url": None,
    "show_booth_boss_logo": True,
    "custom_css": None,
    "notes": None,
    "is_default": False,
}


def ensure_boolean(value: Any) -> bool:
    """Coerce loosely-typed flags: bool, number (!= 0), 'true'/'1' strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1")
    return False


def normalize_booleans(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy with every present boolean field coerced."""
    normalized = dict(data)
    for name in BOOLEAN_FIELDS:
        if name in normalized:
            normalized[name] = ensure_boolean(normalized[name])
    return normalized


def parse_journey_config(value: Any) -> list[dict]:
    """Decode stored journey pages into a list.

    Accepts a list (returned as-is), a JSON string, a single dict (wrapped)
    or nothing. Malformed JSON yields an empty journey.
    """
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return [value]
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return []
        if isinstance(parsed, list):
            return parsed
        if isinstance(parsed, dict):
            return [parsed]
    return []


def build_default_settings(**overrides: Any) -> dict[str, Any]:
    """Fresh copy of DEFAULT_SETTINGS with overrides applied and normalized."""
    data = {**DEFAULT_SETTINGS, "journey_config": []}
    data.update(overrides)
    return normalize_booleans(data)


def sanitize_update(data: dict[str, Any]) -> dict[str, Any]:
    """Drop protected keys, normalize flags, serialize journey pages."""
    clean = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}
    clean = normalize_booleans(clean)
    if "journey_config" in clean:
        clean["journey_config"] = parse_journey_config(clean["journey_config"])
    return clean


def parse_enabled_filters(value: str | None) -> list[str]:
    """Comma-separated filter ids → list; empty means every filter."""
    if not value:
        return []
    return [f.strip() for f in value.split(",") if f.strip()]


def process_settings_for_client(
    settings: dict[str, Any] | None, now_ms: int | None = None,
) -> dict[str, Any] | None:
    """Shape a settings dict for API consumers.

    Booleans normalized, journey pages decoded into journey_pages, the SMTP
    password removed and a cache_version stamp added so clients can bust
    cached booth configs.
    """
    if settings is None:
        return None
    processed = normalize_booleans(settings)
    processed.pop("smtp_password", None)
    processed["journey_pages"] = parse_journey_config(processed.get("journey_config"))
    processed["cache_version"] = now_ms if now_ms is not None else int(time.time() * 1000)
    return processed


def public_booth_settings(settings: dict[str, Any]) -> dict[str, Any]:
    """Subset of processed settings that is safe to serve on a public booth page."""
    public = {k: v for k, v in settings.items() if k not in PRIVATE_FIELDS}
    if not public.get("custom_journey_enabled"):
        public["journey_pages"] = []
    public["enabled_filters"] = parse_enabled_filters(settings.get("enabled_filters"))
    return public


def changed_fields(current: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Entries of update whose value differs from current."""
    return {k: v for k, v in update.items() if current.get(k) != v}


def required_features(changes: dict[str, Any]) -> list[str]:
    """Subscription flags needed to apply a settings change set."""
    needed = []
    if changes.get("custom_journey_enabled") is True:
        needed.append("journey_builder")
    if changes.get("show_booth_boss_logo") is False:
        needed.append("branding_removal")
    if changes.get("capture_mode") == "video":
        needed.append("video_access")
    if changes.get("filters_enabled") is True:
        needed.append("filter_access")
    return needed
