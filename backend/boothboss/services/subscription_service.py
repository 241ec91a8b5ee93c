"""Subscription Service — plan lookup, trial creation, tier changes and usage checks.

Invariants:
    - Every user has at most one Subscription row; get_or_create_subscription adds a
      FREE trial when it is missing
    - Feature decisions go through core/subscription_features (override → tier → FREE)
    - Admin actors bypass feature gates and quotas
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.core.domain_types import (
    SubscriptionDuration, SubscriptionStatus, SubscriptionTier, ensure_utc,
)
from boothboss.core.errors import FeatureNotAvailableError
from boothboss.core.permissions import Actor
from boothboss.core.subscription_features import (
    FLAG_FIELDS, LIMIT_FIELDS, calculate_end_date, get_features, get_limit,
    get_tier_name, get_duration_name, has_feature,
)
from boothboss.models.subscription import Subscription
from boothboss.models.user import User

logger = logging.getLogger(__name__)


def subscription_view(subscription: Subscription | None) -> dict[str, Any] | None:
    """Mapping consumed by core feature checks."""
    if subscription is None:
        return None
    return {
        "tier": subscription.tier,
        **{name: getattr(subscription, name) for name in LIMIT_FIELDS + FLAG_FIELDS},
    }


def build_trial_subscription(now: datetime | None = None) -> Subscription:
    now = now or datetime.now(timezone.utc)
    end = calculate_end_date(now, SubscriptionDuration.TRIAL)
    return Subscription(
        tier=SubscriptionTier.FREE.value,
        duration=SubscriptionDuration.TRIAL.value,
        status=SubscriptionStatus.TRIAL.value,
        start_date=now,
        end_date=end,
        trial_end_date=end,
        **get_features(SubscriptionTier.FREE).as_dict(),
    )


async def get_subscription(db: AsyncSession, user_id) -> Subscription | None:
    result = await db.execute(
        select(Subscription).where(Subscription.user_id == user_id),
    )
    return result.scalar_one_or_none()


async def get_or_create_subscription(db: AsyncSession, user: User) -> Subscription:
    subscription = await get_subscription(db, user.id)
    if subscription is None:
        subscription = build_trial_subscription()
        subscription.user_id = user.id
        db.add(subscription)
        await db.flush()
        logger.info("Created missing trial subscription", extra={"user_id": str(user.id)})
    return subscription


async def change_tier(
    db: AsyncSession, user: User,
    tier: SubscriptionTier | str, duration: SubscriptionDuration | str,
) -> Subscription:
    """Move a user to a tier, resetting feature columns and the billing window."""
    tier = SubscriptionTier(tier)
    duration = SubscriptionDuration(duration)
    subscription = await get_or_create_subscription(db, user)
    now = datetime.now(timezone.utc)
    subscription.tier = tier.value
    subscription.duration = duration.value
    subscription.status = (
        SubscriptionStatus.TRIAL.value if duration == SubscriptionDuration.TRIAL
        else SubscriptionStatus.ACTIVE.value
    )
    subscription.start_date = now
    subscription.end_date = calculate_end_date(now, duration)
    for name, value in get_features(tier).as_dict().items():
        setattr(subscription, name, value)
    logger.info(
        f"Subscription changed to {tier.value}/{duration.value}",
        extra={"user_id": str(user.id)},
    )
    return subscription


async def require_feature(
    db: AsyncSession, actor: Actor, owner_id, feature: str,
) -> None:
    if actor.is_admin:
        return
    subscription = await get_subscription(db, owner_id)
    if not has_feature(subscription_view(subscription), feature):
        raise FeatureNotAvailableError(feature)


async def owner_limit(db: AsyncSession, owner_id, limit_name: str) -> int:
    subscription = await get_subscription(db, owner_id)
    return get_limit(subscription_view(subscription), limit_name)


def summarize_subscription(subscription: Subscription | None, user: User) -> dict[str, Any]:
    """Plan + usage block for account and admin views."""
    view = subscription_view(subscription)
    tier = subscription.tier if subscription else SubscriptionTier.FREE.value
    summary: dict[str, Any] = {
        "tier": tier,
        "tier_name": get_tier_name(tier),
        "duration": subscription.duration if subscription else None,
        "duration_name": get_duration_name(subscription.duration) if subscription else None,
        "status": subscription.status if subscription else None,
        "end_date": (
            ensure_utc(subscription.end_date).isoformat()
            if subscription and subscription.end_date else None
        ),
        "features": {name: has_feature(view, name) for name in FLAG_FIELDS},
        "limits": {name: get_limit(view, name) for name in LIMIT_FIELDS},
    }
    summary["usage"] = {
        "media_count": user.media_count,
        "max_media": summary["limits"]["max_media"],
        "emails_sent": user.emails_sent,
        "max_emails": summary["limits"]["max_emails"],
    }
    return summary
