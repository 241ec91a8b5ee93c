"""Domain Types — verifies enum values and the UTC helper.

Tests:
    - Enum values are the exact wire/DB strings
    - Tiers are declared cheapest first
    - ensure_utc attaches UTC to naive values and leaves aware ones alone
"""

from datetime import datetime, timedelta, timezone

from boothboss.core.domain_types import (
    MediaType, StorageProviderName, SubscriptionTier, ThemeName, TrackEvent,
    UserRole, ensure_utc,
)


def test_enums_serialize_to_strings():
    assert UserRole.ADMIN == "ADMIN"
    assert MediaType.VIDEO.value == "video"
    assert StorageProviderName.AUTO.value == "auto"
    assert TrackEvent("session_complete") is TrackEvent.SESSION_COMPLETE


def test_tier_order():
    assert [t.value for t in SubscriptionTier] == [
        "FREE", "BRONZE", "SILVER", "GOLD", "PLATINUM", "ADMIN",
    ]


def test_theme_names():
    assert {t.value for t in ThemeName} == {"midnight", "pastel", "bw", "custom"}


def test_ensure_utc():
    naive = datetime(2026, 5, 1, 12, 0)
    assert ensure_utc(naive).tzinfo is timezone.utc
    aware = datetime(2026, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert ensure_utc(aware) is aware
    assert ensure_utc(None) is None
