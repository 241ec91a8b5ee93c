"""Domain Types — enums and identity types shared across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching in services
    - UserId, EventUrlId, SettingsId wrap UUIDs
    - Enum values are the exact strings stored in the DB and sent over the wire

Design Decisions:
    - str Enums serialize to JSON without custom encoders
    - NewType over dataclass wrappers: zero runtime cost
"""

from datetime import datetime, timezone
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
EventUrlId = NewType("EventUrlId", UUID)
SettingsId = NewType("SettingsId", UUID)


# ─── Accounts & Subscriptions ────────────────────────────────────

class UserRole(str, Enum):
    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"


class SubscriptionTier(str, Enum):
    """Plan tiers, ordered from cheapest to unlimited."""
    FREE = "FREE"
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    ADMIN = "ADMIN"


class SubscriptionDuration(str, Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    ANNUAL = "ANNUAL"
    TRIAL = "TRIAL"


class SubscriptionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAST_DUE = "PAST_DUE"
    CANCELED = "CANCELED"
    EXPIRED = "EXPIRED"
    TRIAL = "TRIAL"


# ─── Booth ───────────────────────────────────────────────────────

class MediaType(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"


class ThemeName(str, Enum):
    MIDNIGHT = "midnight"
    PASTEL = "pastel"
    BW = "bw"
    CUSTOM = "custom"


class StorageProviderName(str, Enum):
    """Configured storage choice; AUTO resolves to LOCAL or VERCEL at runtime."""
    AUTO = "auto"
    LOCAL = "local"
    VERCEL = "vercel"


# ─── Authorization ───────────────────────────────────────────────

class Action(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"
    EMAIL = "email"


class ResourceType(str, Enum):
    USER = "user"
    EVENT_URL = "event_url"
    SESSION = "session"
    SETTINGS = "settings"
    JOURNEY = "journey"


# ─── Analytics ───────────────────────────────────────────────────

class TrackEvent(str, Enum):
    """Top-level analytics tracking verbs accepted by the tracking endpoint."""
    SESSION_START = "session_start"
    SESSION_COMPLETE = "session_complete"
    EVENT = "event"


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on round-trip)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
