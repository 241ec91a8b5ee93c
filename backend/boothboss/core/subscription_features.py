"""Subscription Features — per-tier feature matrix, pricing and feature checks.

Invariants:
    - Every tier defines every key in TierFeatures
    - ADMIN limits are UNLIMITED (-1); is_within_limit treats -1 as no limit
    - has_feature: explicit subscription value first, tier default second,
      FREE defaults when there is no subscription at all
    - Prices are integer cents; TRIAL and FREE/ADMIN prices are 0
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Any, Mapping

from boothboss.core.domain_types import SubscriptionDuration, SubscriptionTier

UNLIMITED = -1

LIMIT_FIELDS: tuple[str, ...] = (
    "max_media", "max_emails", "max_video_duration", "max_days",
)
FLAG_FIELDS: tuple[str, ...] = (
    "custom_domain", "analytics_access", "filter_access", "video_access",
    "ai_enhancement", "journey_builder", "branding_removal", "priority_support",
)


@dataclass(frozen=True)
class TierFeatures:
    max_media: int
    max_emails: int
    max_video_duration: int
    max_days: int
    custom_domain: bool = False
    analytics_access: bool = False
    filter_access: bool = False
    video_access: bool = False
    ai_enhancement: bool = False
    journey_builder: bool = False
    branding_removal: bool = False
    priority_support: bool = False

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


TIER_FEATURES: dict[SubscriptionTier, TierFeatures] = {
    SubscriptionTier.FREE: TierFeatures(
        max_media=5, max_emails=5, max_video_duration=10, max_days=1,
        video_access=True,
    ),
    SubscriptionTier.BRONZE: TierFeatures(
        max_media=100, max_emails=100, max_video_duration=15, max_days=30,
        analytics_access=True, filter_access=True, video_access=True,
    ),
    SubscriptionTier.SILVER: TierFeatures(
        max_media=500, max_emails=500, max_video_duration=30, max_days=30,
        custom_domain=True, analytics_access=True, filter_access=True,
        video_access=True, ai_enhancement=True,
    ),
    SubscriptionTier.GOLD: TierFeatures(
        max_media=2000, max_emails=2000, max_video_duration=60, max_days=30,
        custom_domain=True, analytics_access=True, filter_access=True,
        video_access=True, ai_enhancement=True, journey_builder=True,
        branding_removal=True,
    ),
    SubscriptionTier.PLATINUM: TierFeatures(
        max_media=10000, max_emails=10000, max_video_duration=120, max_days=30,
        custom_domain=True, analytics_access=True, filter_access=True,
        video_access=True, ai_enhancement=True, journey_builder=True,
        branding_removal=True, priority_support=True,
    ),
    SubscriptionTier.ADMIN: TierFeatures(
        max_media=UNLIMITED, max_emails=UNLIMITED,
        max_video_duration=UNLIMITED, max_days=UNLIMITED,
        custom_domain=True, analytics_access=True, filter_access=True,
        video_access=True, ai_enhancement=True, journey_builder=True,
        branding_removal=True, priority_support=True,
    ),
}

# Cents, by tier then duration.
TIER_PRICING: dict[SubscriptionTier, dict[SubscriptionDuration, int]] = {
    SubscriptionTier.BRONZE: {
        SubscriptionDuration.MONTHLY: 2900,
        SubscriptionDuration.QUARTERLY: 7900,
        SubscriptionDuration.ANNUAL: 29900,
    },
    SubscriptionTier.SILVER: {
        SubscriptionDuration.MONTHLY: 4900,
        SubscriptionDuration.QUARTERLY: 13900,
        SubscriptionDuration.ANNUAL: 49900,
    },
    SubscriptionTier.GOLD: {
        SubscriptionDuration.MONTHLY: 9900,
        SubscriptionDuration.QUARTERLY: 27900,
        SubscriptionDuration.ANNUAL: 99900,
    },
    SubscriptionTier.PLATINUM: {
        SubscriptionDuration.MONTHLY: 19900,
        SubscriptionDuration.QUARTERLY: 54900,
        SubscriptionDuration.ANNUAL: 199900,
    },
}

DURATION_DAYS: dict[SubscriptionDuration, int] = {
    SubscriptionDuration.MONTHLY: 30,
    SubscriptionDuration.QUARTERLY: 90,
    SubscriptionDuration.ANNUAL: 365,
    SubscriptionDuration.TRIAL: 1,
}

TIER_NAMES: dict[SubscriptionTier, str] = {
    SubscriptionTier.FREE: "Free Trial",
    SubscriptionTier.BRONZE: "Bronze",
    SubscriptionTier.SILVER: "Silver",
    SubscriptionTier.GOLD: "Gold",
    SubscriptionTier.PLATINUM: "Platinum",
    SubscriptionTier.ADMIN: "Admin",
}

DURATION_NAMES: dict[SubscriptionDuration, str] = {
    SubscriptionDuration.MONTHLY: "Monthly",
    SubscriptionDuration.QUARTERLY: "Quarterly",
    SubscriptionDuration.ANNUAL: "Annual",
    SubscriptionDuration.TRIAL: "Trial",
}

PUBLIC_TIERS: tuple[SubscriptionTier, ...] = (
    SubscriptionTier.FREE, SubscriptionTier.BRONZE, SubscriptionTier.SILVER,
    SubscriptionTier.GOLD, SubscriptionTier.PLATINUM,
)


def get_features(tier: SubscriptionTier | str) -> TierFeatures:
    return TIER_FEATURES[SubscriptionTier(tier)]


def get_price(tier: SubscriptionTier | str, duration: SubscriptionDuration | str) -> int:
    """Price in cents; 0 for trials and for tiers that are not sold."""
    return TIER_PRICING.get(SubscriptionTier(tier), {}).get(
        SubscriptionDuration(duration), 0,
    )


def format_price(cents: int) -> str:
    return f"${cents / 100:.2f}"


def get_tier_name(tier: SubscriptionTier | str) -> str:
    return TIER_NAMES[SubscriptionTier(tier)]


def get_duration_name(duration: SubscriptionDuration | str) -> str:
    return DURATION_NAMES[SubscriptionDuration(duration)]


def calculate_end_date(
    start: datetime, duration: SubscriptionDuration | str,
) -> datetime:
    return start + timedelta(days=DURATION_DAYS[SubscriptionDuration(duration)])


def has_feature(subscription: Mapping[str, Any] | None, feature: str) -> bool:
    """Whether a subscription grants a boolean feature.

    subscription is a mapping with at least "tier"; feature columns present
    on it (not None) override the tier default.
    """
    if feature not in FLAG_FIELDS:
        raise ValueError(f"Unknown feature: {feature}")
    if not subscription:
        return getattr(TIER_FEATURES[SubscriptionTier.FREE], feature)
    override = subscription.get(feature)
    if override is not None:
        return bool(override)
    return getattr(get_features(subscription["tier"]), feature)


def get_limit(subscription: Mapping[str, Any] | None, limit_name: str) -> int:
    """Numeric limit with the same override order as has_feature."""
    if limit_name not in LIMIT_FIELDS:
        raise ValueError(f"Unknown limit: {limit_name}")
    if not subscription:
        return getattr(TIER_FEATURES[SubscriptionTier.FREE], limit_name)
    override = subscription.get(limit_name)
    if override is not None:
        return int(override)
    return getattr(get_features(subscription["tier"]), limit_name)


def is_within_limit(used: int, limit: int) -> bool:
    """True while another unit may be consumed."""
    return limit == UNLIMITED or used < limit


def compare_tiers() -> list[dict[str, Any]]:
    """Feature/pricing table for the public tiers (pricing page)."""
    rows = []
    for tier in PUBLIC_TIERS:
        rows.append({
            "tier": tier.value,
            "name": get_tier_name(tier),
            "features": get_features(tier).as_dict(),
            "pricing": {
                d.value: get_price(tier, d)
                for d in (
                    SubscriptionDuration.MONTHLY,
                    SubscriptionDuration.QUARTERLY,
                    SubscriptionDuration.ANNUAL,
                )
            },
        })
    return rows
