"""Settings Service — resolve, create and update booth settings per user and per event URL.

Invariants:
    - An event URL serves the settings of its single active EventUrlSettings link
    - A user's base settings are their row with event_url_id NULL (oldest wins)
    - get_settings_by_event_url_id always returns settings for an existing event URL:
      active link → owner's base (linked on the fly) → fresh defaults named after the event
    - Updating per-event settings never mutates shared base settings: when the active
      link points at base (or nothing), an event-specific copy is forked and linked
    - id, user_id, event_url_id and is_default are never taken from update payloads
    - Feature gates apply only to values that actually change; admins bypass them
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.core.errors import FeatureNotAvailableError, ResourceNotFoundError
from boothboss.core.event_url_rules import sanitize_url_path
from boothboss.core.permissions import Actor, PermissionTarget, require_permission
from boothboss.core.domain_types import Action, ResourceType
from boothboss.core.settings_rules import (
    PROTECTED_FIELDS, build_default_settings, changed_fields,
    required_features, sanitize_update,
)
from boothboss.core.subscription_features import UNLIMITED
from boothboss.models.booth_settings import BoothSettings
from boothboss.models.event_url import EventUrl
from boothboss.models.event_url_settings import EventUrlSettings
from boothboss.services.subscription_service import owner_limit, require_feature

logger = logging.getLogger(__name__)


def _apply(row: BoothSettings, data: dict[str, Any]) -> None:
    columns = BoothSettings.column_names()
    for key, value in data.items():
        if key in columns and key not in PROTECTED_FIELDS:
            setattr(row, key, value)


def _new_settings(data: dict[str, Any], **owned: Any) -> BoothSettings:
    columns = BoothSettings.column_names()
    row = BoothSettings(**{k: v for k, v in data.items() if k in columns and k not in PROTECTED_FIELDS})
    for key, value in owned.items():
        setattr(row, key, value)
    return row


async def _active_link_settings(
    db: AsyncSession, event_url_id: UUID,
) -> BoothSettings | None:
    result = await db.execute(
        select(BoothSettings)
        .join(EventUrlSettings, EventUrlSettings.settings_id == BoothSettings.id)
        .where(
            EventUrlSettings.event_url_id == event_url_id,
            EventUrlSettings.is_active.is_(True),
        )
        .order_by(EventUrlSettings.created_at.desc())
        .limit(1),
    )
    return result.scalar_one_or_none()


async def get_base_settings(db: AsyncSession, user_id: UUID) -> BoothSettings | None:
    result = await db.execute(
        select(BoothSettings)
        .where(BoothSettings.user_id == user_id, BoothSettings.event_url_id.is_(None))
        .order_by(BoothSettings.created_at)
        .limit(1),
    )
    return result.scalar_one_or_none()


async def get_user_settings(
    db: AsyncSession, user_id: UUID, event_url_id: UUID | None = None,
) -> BoothSettings | None:
    """Event-specific settings when the user owns an actively linked event URL, else base."""
    if event_url_id is not None:
        event_url = await db.get(EventUrl, event_url_id)
        if event_url is not None and event_url.user_id == user_id:
            linked = await _active_link_settings(db, event_url_id)
            if linked is not None:
                return linked
    return await get_base_settings(db, user_id)


async def link_settings_to_event_url(
    db: AsyncSession, settings_id: UUID, event_url_id: UUID, commit: bool = True,
) -> bool:
    """Make settings_id the only active settings for event_url_id."""
    if await db.get(BoothSettings, settings_id) is None:
        return False
    if await db.get(EventUrl, event_url_id) is None:
        return False
    await db.execute(
        update(EventUrlSettings)
        .where(
            EventUrlSettings.event_url_id == event_url_id,
            EventUrlSettings.settings_id != settings_id,
        )
        .values(is_active=False),
    )
    result = await db.execute(
        select(EventUrlSettings).where(
            EventUrlSettings.event_url_id == event_url_id,
            EventUrlSettings.settings_id == settings_id,
        ),
    )
    link = result.scalar_one_or_none()
    if link is None:
        db.add(EventUrlSettings(
            event_url_id=event_url_id, settings_id=settings_id, is_active=True,
        ))
    else:
        link.is_active = True
    if commit:
        await db.commit()
    else:
        await db.flush()
    return True


async def get_settings_by_event_url_id(
    db: AsyncSession, event_url_id: UUID,
) -> BoothSettings | None:
    linked = await _active_link_settings(db, event_url_id)
    if linked is not None:
        return linked
    event_url = await db.get(EventUrl, event_url_id)
    if event_url is None:
        return None

    settings = await get_base_settings(db, event_url.user_id)
    if settings is None:
        settings = _new_settings(
            build_default_settings(event_name=event_url.event_name),
            user_id=event_url.user_id,
        )
        db.add(settings)
        await db.flush()
        logger.info(
            "Created default settings for event owner",
            extra={"user_id": str(event_url.user_id), "event_url": event_url.url_path},
        )
    await link_settings_to_event_url(db, settings.id, event_url.id)
    return settings


async def get_settings_by_url_path(
    db: AsyncSession, url_path: str,
) -> BoothSettings | None:
    result = await db.execute(
        select(EventUrl).where(
            EventUrl.url_path == sanitize_url_path(url_path),
            EventUrl.is_active.is_(True),
        ),
    )
    event_url = result.scalar_one_or_none()
    if event_url is None:
        return None
    return await get_settings_by_event_url_id(db, event_url.id)


async def get_default_settings(db: AsyncSession) -> BoothSettings | None:
    result = await db.execute(
        select(BoothSettings).where(BoothSettings.is_default.is_(True)).limit(1),
    )
    return result.scalar_one_or_none()


async def get_all_user_settings(db: AsyncSession, user_id: UUID) -> list[BoothSettings]:
    result = await db.execute(
        select(BoothSettings)
        .where(BoothSettings.user_id == user_id)
        .order_by(BoothSettings.created_at),
    )
    return list(result.scalars().all())


async def _enforce_feature_gates(
    db: AsyncSession, actor: Actor, owner_id: UUID,
    current: dict[str, Any], data: dict[str, Any],
) -> None:
    if actor.is_admin:
        return
    changes = changed_fields(current, data)
    for feature in required_features(changes):
        await require_feature(db, actor, owner_id, feature)
    if "video_duration" in changes:
        cap = await owner_limit(db, owner_id, "max_video_duration")
        if cap != UNLIMITED and changes["video_duration"] > cap:
            raise FeatureNotAvailableError(f"video duration over {cap}s")


async def update_user_settings(
    db: AsyncSession, actor: Actor, user_id: UUID, data: dict[str, Any],
    event_url_id: UUID | None = None,
) -> BoothSettings:
    """Apply a partial settings update for a user, optionally scoped to an event URL."""
    require_permission(
        actor, PermissionTarget(ResourceType.SETTINGS, user_id), Action.UPDATE,
    )
    data = sanitize_update(data)

    if event_url_id is not None:
        event_url = await db.get(EventUrl, event_url_id)
        if event_url is None or event_url.user_id != user_id:
            raise ResourceNotFoundError("EventUrl", str(event_url_id))
        linked = await _active_link_settings(db, event_url_id)
        if linked is not None and linked.event_url_id == event_url.id:
            await _enforce_feature_gates(db, actor, user_id, linked.as_dict(), data)
            _apply(linked, data)
            await db.commit()
            return linked

        source = linked or await get_base_settings(db, user_id)
        base_data = source.as_dict() if source else build_default_settings()
        await _enforce_feature_gates(db, actor, user_id, base_data, data)
        fork = _new_settings(
            {**base_data, "event_name": event_url.event_name, **data},
            user_id=user_id, event_url_id=event_url.id,
        )
        db.add(fork)
        await db.flush()
        await link_settings_to_event_url(db, fork.id, event_url.id, commit=False)
        await db.commit()
        logger.info(
            "Forked event-specific settings",
            extra={"user_id": str(user_id), "event_url": event_url.url_path},
        )
        return fork

    settings = await get_base_settings(db, user_id)
    if settings is not None:
        await _enforce_feature_gates(db, actor, user_id, settings.as_dict(), data)
        _apply(settings, data)
    else:
        defaults = build_default_settings()
        await _enforce_feature_gates(db, actor, user_id, defaults, data)
        settings = _new_settings({**defaults, **data}, user_id=user_id)
        db.add(settings)
    await db.commit()
    return settings


async def create_base_settings(
    db: AsyncSession, user_id: UUID, **overrides: Any,
) -> BoothSettings:
    """Insert base settings seeded from defaults (no gating, no commit)."""
    settings = _new_settings(build_default_settings(**overrides), user_id=user_id)
    db.add(settings)
    await db.flush()
    return settings


async def ensure_default_settings(db: AsyncSession) -> BoothSettings:
    """Return the system default settings row, inserting it when missing (no commit)."""
    settings = await get_default_settings(db)
    if settings is None:
        settings = _new_settings(build_default_settings(), is_default=True)
        db.add(settings)
        await db.flush()
        logger.info("Created system default settings")
    return settings
