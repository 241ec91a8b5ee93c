"""Admin Service — user management and system-wide reporting.

Invariants:
    - Every operation calls require_admin first
    - Admin-created users are verified immediately and start on a FREE trial
    - Deleting a user removes everything they own in one transaction;
      an admin can never delete their own account
"""

import logging
import math
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.config import Settings
from boothboss.core.domain_types import MediaType, UserRole, ensure_utc
from boothboss.core.errors import ResourceNotFoundError, ValidationFailedError
from boothboss.core.permissions import Actor, require_admin
from boothboss.models.booth_analytics import BoothAnalytics, BoothEventLog
from boothboss.models.booth_session import BoothSession
from boothboss.models.booth_settings import BoothSettings
from boothboss.models.event_url import EventUrl
from boothboss.models.event_url_settings import EventUrlSettings
from boothboss.models.journey import Journey
from boothboss.models.subscription import Subscription
from boothboss.models.user import User
from boothboss.schemas.admin import AdminUserCreate, AdminUserUpdate
from boothboss.services import auth_service
from boothboss.services.account_service import profile_dict
from boothboss.services.subscription_service import change_tier, summarize_subscription

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


async def _get_user(db: AsyncSession, user_id: UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User", str(user_id))
    return user


async def _count(db: AsyncSession, model, *where) -> int:
    return (await db.execute(
        select(func.count()).select_from(model).where(*where),
    )).scalar_one()


async def list_users(
    db: AsyncSession, actor: Actor, app_settings: Settings,
    search: str | None = None, page: int = 1, limit: int = 20,
) -> dict[str, Any]:
    require_admin(actor)
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    filters = []
    if search:
        pattern = f"%{search.strip().lower()}%"
        filters.append(or_(
            func.lower(User.name).like(pattern),
            func.lower(User.email).like(pattern),
            func.lower(User.username).like(pattern),
        ))

    total = await _count(db, User, *filters)
    event_urls = (
        select(func.count()).select_from(EventUrl)
        .where(EventUrl.user_id == User.id).scalar_subquery()
    )
    sessions = (
        select(func.count()).select_from(BoothSession)
        .where(BoothSession.user_id == User.id).scalar_subquery()
    )
    result = await db.execute(
        select(User, event_urls, sessions, Subscription.tier)
        .outerjoin(Subscription, Subscription.user_id == User.id)
        .where(*filters)
        .order_by(User.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit),
    )
    users = [
        {
            **profile_dict(user, app_settings),
            "event_url_count": url_count,
            "session_count": session_count,
            "tier": tier,
            "media_count": user.media_count,
            "emails_sent": user.emails_sent,
        }
        for user, url_count, session_count, tier in result.all()
    ]
    return {
        "users": users,
        "pagination": {
            "total_count": total,
            "page": page,
            "limit": limit,
            "total_pages": math.ceil(total / limit) if total else 0,
        },
    }


async def create_user(db: AsyncSession, actor: Actor, body: AdminUserCreate) -> User:
    require_admin(actor)
    user = await auth_service.create_user(
        db, name=body.name, email=body.email, password=body.password,
        role=UserRole(body.role), verified=True,
    )
    await db.commit()
    await db.refresh(user)
    logger.info(
        f"Admin created {body.role} account",
        extra={"user_id": str(actor.id), "recipient": user.email},
    )
    return user


async def get_user_detail(
    db: AsyncSession, actor: Actor, app_settings: Settings, user_id: UUID,
) -> dict[str, Any]:
    require_admin(actor)
    user = await _get_user(db, user_id)
    urls = (await db.execute(
        select(EventUrl).where(EventUrl.user_id == user.id).order_by(EventUrl.created_at.desc()),
    )).scalars().all()
    return {
        "user": profile_dict(user, app_settings),
        "subscription": summarize_subscription(user.subscription, user),
        "event_urls": [
            {
                "id": str(u.id),
                "url_path": u.url_path,
                "event_name": u.event_name,
                "is_active": u.is_active,
            }
            for u in urls
        ],
        "session_count": await _count(db, BoothSession, BoothSession.user_id == user.id),
    }


async def update_user(
    db: AsyncSession, actor: Actor, user_id: UUID, body: AdminUserUpdate,
) -> User:
    require_admin(actor)
    user = await _get_user(db, user_id)
    if body.name:
        user.name = body.name.strip()
    if body.role:
        if user.id == actor.id and body.role != UserRole.ADMIN.value:
            raise ValidationFailedError("You cannot remove your own admin role", "role")
        user.role = body.role
    if body.tier:
        await change_tier(db, user, body.tier, body.duration)
    await db.commit()
    await db.refresh(user)
    return user


async def delete_user(db: AsyncSession, actor: Actor, user_id: UUID) -> None:
    require_admin(actor)
    if user_id == actor.id:
        raise ValidationFailedError("You cannot delete your own account", "user_id")
    user = await _get_user(db, user_id)

    url_ids = select(EventUrl.id).where(EventUrl.user_id == user.id)
    settings_ids = select(BoothSettings.id).where(BoothSettings.user_id == user.id)
    analytics_ids = select(BoothAnalytics.id).where(BoothAnalytics.user_id == user.id)
    await db.execute(delete(BoothEventLog).where(BoothEventLog.analytics_id.in_(analytics_ids)))
    await db.execute(delete(BoothAnalytics).where(BoothAnalytics.user_id == user.id))
    await db.execute(delete(BoothSession).where(BoothSession.user_id == user.id))
    await db.execute(delete(EventUrlSettings).where(or_(
        EventUrlSettings.event_url_id.in_(url_ids),
        EventUrlSettings.settings_id.in_(settings_ids),
    )))
    await db.execute(delete(BoothSettings).where(BoothSettings.user_id == user.id))
    await db.execute(delete(Journey).where(Journey.user_id == user.id))
    await db.execute(delete(EventUrl).where(EventUrl.user_id == user.id))
    await db.delete(user)
    await db.commit()
    logger.info("User deleted with all owned data", extra={"user_id": str(user_id)})


async def system_analytics(db: AsyncSession, actor: Actor) -> dict[str, Any]:
    require_admin(actor)
    tiers = await db.execute(
        select(Subscription.tier, func.count()).group_by(Subscription.tier),
    )
    emails = (await db.execute(select(func.coalesce(func.sum(User.emails_sent), 0)))).scalar_one()
    latest = (await db.execute(
        select(BoothSession.created_at).order_by(BoothSession.created_at.desc()).limit(1),
    )).scalar_one_or_none()
    return {
        "total_users": await _count(db, User),
        "verified_users": await _count(db, User, User.email_verified_at.is_not(None)),
        "total_event_urls": await _count(db, EventUrl),
        "active_event_urls": await _count(db, EventUrl, EventUrl.is_active.is_(True)),
        "total_sessions": await _count(db, BoothSession),
        "photo_sessions": await _count(
            db, BoothSession, BoothSession.media_type == MediaType.PHOTO.value,
        ),
        "video_sessions": await _count(
            db, BoothSession, BoothSession.media_type == MediaType.VIDEO.value,
        ),
        "emails_sent": int(emails),
        "analytics_sessions": await _count(db, BoothAnalytics),
        "tier_distribution": {tier: count for tier, count in tiers.all()},
        "last_capture_at": ensure_utc(latest).isoformat() if latest else None,
    }
