"""Event URL Rules — slug validation, reserved words and per-tier URL limits.

Invariants:
    - Valid paths are 3-30 chars of [a-z0-9-] and not a reserved route name
    - sanitize_url_path is applied before every validation and lookup
    - validate_url_path returns an error string or None (never raises)
"""

import re
from datetime import datetime

from boothboss.core.domain_types import SubscriptionTier, ensure_utc

URL_PATH_MIN_LENGTH = 3
URL_PATH_MAX_LENGTH = 30
URL_PATH_PATTERN = re.compile(r"^[a-z0-9-]+$")

RESERVED_PATHS: frozenset[str] = frozenset({
    "admin", "api", "auth", "booth", "dashboard", "login", "logout",
    "register", "setup", "settings", "subscription", "support", "verify",
    "verify-email", "verify-success", "e",
})

EVENT_URL_LIMITS: dict[SubscriptionTier, int] = {
    SubscriptionTier.FREE: 1,
    SubscriptionTier.BRONZE: 1,
    SubscriptionTier.SILVER: 2,
    SubscriptionTier.GOLD: 5,
    SubscriptionTier.PLATINUM: 10,
    SubscriptionTier.ADMIN: 999,
}


def sanitize_url_path(url_path: str) -> str:
    return url_path.strip().lower()


def validate_url_path(url_path: str) -> str | None:
    """Return a human-readable problem with the path, or None if it is usable."""
    path = sanitize_url_path(url_path)
    if len(path) < URL_PATH_MIN_LENGTH:
        return f"URL path must be at least {URL_PATH_MIN_LENGTH} characters"
    if len(path) > URL_PATH_MAX_LENGTH:
        return f"URL path must be at most {URL_PATH_MAX_LENGTH} characters"
    if not URL_PATH_PATTERN.match(path):
        return "URL path can only contain lowercase letters, numbers, and hyphens"
    if path in RESERVED_PATHS:
        return "This URL path is reserved"
    return None


def get_event_url_limit(tier: SubscriptionTier | str | None) -> int:
    """Max event URLs for a tier; unknown tiers get the FREE allowance."""
    try:
        return EVENT_URL_LIMITS[SubscriptionTier(tier)]
    except ValueError:
        return EVENT_URL_LIMITS[SubscriptionTier.FREE]


def can_create_more_event_urls(
    current_count: int, tier: SubscriptionTier | str | None,
) -> bool:
    return current_count < get_event_url_limit(tier)


def validate_event_dates(
    start: datetime | None, end: datetime | None,
) -> str | None:
    start, end = ensure_utc(start), ensure_utc(end)
    if start and end and end < start:
        return "Event end date cannot be before the start date"
    return None
