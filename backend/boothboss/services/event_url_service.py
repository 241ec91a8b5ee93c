"""Event URL Service — CRUD for public booth slugs with tier limits.

Invariants:
    - Paths pass core/event_url_rules.validate_url_path and are unique system-wide
    - A user may own at most get_event_url_limit(tier) URLs (admins use the ADMIN limit)
    - Deleting a URL removes its settings links and event-specific settings;
      booth sessions keep their records with event_url_id cleared
    - Every operation is authorized through core/permissions
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.core.domain_types import Action, ResourceType, SubscriptionTier
from boothboss.core.errors import (
    ConflictError, QuotaExceededError, ResourceNotFoundError, ValidationFailedError,
)
from boothboss.core.event_url_rules import (
    can_create_more_event_urls, get_event_url_limit, sanitize_url_path,
    validate_event_dates, validate_url_path,
)
from boothboss.core.permissions import Actor, PermissionTarget, require_permission
from boothboss.models.booth_session import BoothSession
from boothboss.models.booth_settings import BoothSettings
from boothboss.models.event_url import EventUrl
from boothboss.models.event_url_settings import EventUrlSettings
from boothboss.models.user import User
from boothboss.schemas.event_url import EventUrlCreate, EventUrlUpdate
from boothboss.services.subscription_service import get_subscription

logger = logging.getLogger(__name__)


async def get_by_path(db: AsyncSession, url_path: str) -> EventUrl | None:
    result = await db.execute(
        select(EventUrl).where(EventUrl.url_path == sanitize_url_path(url_path)),
    )
    return result.scalar_one_or_none()


async def get_owned_event_url(
    db: AsyncSession, actor: Actor, event_url_id: UUID, action: Action,
) -> EventUrl:
    """Load an event URL and authorize action; missing URLs are 404."""
    event_url = await db.get(EventUrl, event_url_id)
    if event_url is None:
        raise ResourceNotFoundError("EventUrl", str(event_url_id))
    require_permission(
        actor,
        PermissionTarget(ResourceType.EVENT_URL, event_url.user_id, str(event_url_id)),
        action,
    )
    return event_url


async def list_event_urls(db: AsyncSession, user_id: UUID) -> list[EventUrl]:
    result = await db.execute(
        select(EventUrl)
        .where(EventUrl.user_id == user_id)
        .order_by(EventUrl.created_at.desc()),
    )
    return list(result.scalars().all())


async def check_availability(db: AsyncSession, url_path: str) -> dict:
    path = sanitize_url_path(url_path)
    problem = validate_url_path(path)
    if problem:
        return {"url_path": path, "available": False, "reason": problem}
    if await get_by_path(db, path):
        return {"url_path": path, "available": False, "reason": "This URL path is already taken"}
    return {"url_path": path, "available": True, "reason": None}


async def _ensure_path_usable(
    db: AsyncSession, path: str, exclude_id: UUID | None = None,
) -> None:
    problem = validate_url_path(path)
    if problem:
        raise ValidationFailedError(problem, "url_path")
    existing = await get_by_path(db, path)
    if existing is not None and existing.id != exclude_id:
        raise ConflictError("This URL path is already taken", "url_path")


async def _tier_for(db: AsyncSession, actor: Actor, user_id: UUID) -> SubscriptionTier:
    if actor.is_admin and actor.id == user_id:
        return SubscriptionTier.ADMIN
    subscription = await get_subscription(db, user_id)
    return SubscriptionTier(subscription.tier) if subscription else SubscriptionTier.FREE


async def create_event_url(
    db: AsyncSession, actor: Actor, user_id: UUID, body: EventUrlCreate,
    commit: bool = True,
) -> EventUrl:
    require_permission(
        actor, PermissionTarget(ResourceType.EVENT_URL, user_id), Action.CREATE,
    )
    await _ensure_path_usable(db, body.url_path)
    problem = validate_event_dates(body.event_start_date, body.event_end_date)
    if problem:
        raise ValidationFailedError(problem, "event_end_date")

    tier = await _tier_for(db, actor, user_id)
    count = (await db.execute(
        select(func.count()).select_from(EventUrl).where(EventUrl.user_id == user_id),
    )).scalar_one()
    if not can_create_more_event_urls(count, tier):
        raise QuotaExceededError("event URLs", get_event_url_limit(tier))

    event_url = EventUrl(
        user_id=user_id,
        url_path=body.url_path,
        event_name=body.event_name.strip(),
        is_active=body.is_active,
        event_start_date=body.event_start_date,
        event_end_date=body.event_end_date,
    )
    db.add(event_url)
    if commit:
        await db.commit()
        await db.refresh(event_url)
    else:
        await db.flush()
    logger.info(
        "Event URL created", extra={"user_id": str(user_id), "event_url": event_url.url_path},
    )
    return event_url


async def update_event_url(
    db: AsyncSession, actor: Actor, event_url_id: UUID, body: EventUrlUpdate,
) -> EventUrl:
    event_url = await get_owned_event_url(db, actor, event_url_id, Action.UPDATE)
    changes = body.model_dump(exclude_unset=True)

    if changes.get("url_path") and changes["url_path"] != event_url.url_path:
        await _ensure_path_usable(db, changes["url_path"], exclude_id=event_url.id)
        event_url.url_path = changes["url_path"]
    if changes.get("event_name"):
        event_url.event_name = changes["event_name"].strip()
    if changes.get("is_active") is not None:
        event_url.is_active = changes["is_active"]
    start: datetime | None = changes.get("event_start_date", event_url.event_start_date)
    end: datetime | None = changes.get("event_end_date", event_url.event_end_date)
    problem = validate_event_dates(start, end)
    if problem:
        raise ValidationFailedError(problem, "event_end_date")
    event_url.event_start_date = start
    event_url.event_end_date = end

    await db.commit()
    await db.refresh(event_url)
    return event_url


async def delete_event_url(db: AsyncSession, actor: Actor, event_url_id: UUID) -> None:
    event_url = await get_owned_event_url(db, actor, event_url_id, Action.DELETE)
    await db.execute(
        update(BoothSession)
        .where(BoothSession.event_url_id == event_url.id)
        .values(event_url_id=None),
    )
    await db.execute(
        delete(EventUrlSettings).where(EventUrlSettings.event_url_id == event_url.id),
    )
    await db.execute(
        delete(BoothSettings).where(BoothSettings.event_url_id == event_url.id),
    )
    await db.delete(event_url)
    await db.commit()
    logger.info(
        "Event URL deleted",
        extra={"user_id": str(actor.id), "event_url": event_url.url_path},
    )


async def list_all_event_urls(db: AsyncSession) -> list[dict]:
    """Admin view: every URL with its owner's email."""
    result = await db.execute(
        select(EventUrl, User.email)
        .join(User, User.id == EventUrl.user_id)
        .order_by(EventUrl.created_at.desc()),
    )
    return [
        {
            "id": str(event_url.id),
            "url_path": event_url.url_path,
            "event_name": event_url.event_name,
            "is_active": event_url.is_active,
            "owner_email": email,
            "created_at": event_url.created_at.isoformat(),
        }
        for event_url, email in result.all()
    ]
