"""Session Service — listing, inspection, deletion and email resend of booth sessions.

Invariants:
    - Customers see sessions owned by them (BoothSession.user_id); admins see all
    - Lists are newest first and paginated as {total_count, page, limit, total_pages}
    - Deleting a session also deletes its stored media; storage failures are logged only
    - resend_email requires the session's attendee email and counts against emails_sent
"""

import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.config import Settings
from boothboss.core.domain_types import Action, MediaType, ResourceType, ensure_utc
from boothboss.core.errors import (
    ResourceNotFoundError, ValidationFailedError,
)
from boothboss.core.permissions import (
    Actor, PermissionTarget, require_admin, require_permission,
)
from boothboss.core.repository_protocols import MailTransport
from boothboss.core.settings_rules import build_default_settings
from boothboss.infrastructure.storage import StorageRegistry
from boothboss.models.booth_session import BoothSession
from boothboss.models.event_url import EventUrl
from boothboss.models.user import User
from boothboss.services import notifications
from boothboss.services.booth_service import full_media_url
from boothboss.services.settings_service import (
    get_default_settings, get_settings_by_event_url_id, get_user_settings,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def session_dict(
    session: BoothSession, url_path: str | None = None, event_name: str | None = None,
) -> dict[str, Any]:
    return {
        "id": str(session.id),
        "user_id": str(session.user_id) if session.user_id else None,
        "event_url_id": str(session.event_url_id) if session.event_url_id else None,
        "event_url_path": url_path or session.event_url_path,
        "event_name": event_name or session.event_name,
        "user_name": session.user_name,
        "user_email": session.user_email,
        "media_url": session.media_url,
        "media_type": session.media_type,
        "filter": session.filter,
        "storage_provider": session.storage_provider,
        "template_used": session.template_used,
        "email_sent": session.email_sent,
        "shared": session.shared,
        "created_at": ensure_utc(session.created_at).isoformat(),
    }


async def list_sessions(
    db: AsyncSession, actor: Actor, page: int = 1, limit: int = 20,
    media_type: str | None = None, start_date: date | None = None,
    end_date: date | None = None, event_url_id: UUID | None = None,
) -> dict[str, Any]:
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    filters = []
    if not actor.is_admin:
        filters.append(BoothSession.user_id == actor.id)
    if media_type:
        filters.append(BoothSession.media_type == MediaType(media_type).value)
    if start_date:
        filters.append(BoothSession.created_at >= datetime(
            start_date.year, start_date.month, start_date.day, tzinfo=timezone.utc,
        ))
    if end_date:
        filters.append(BoothSession.created_at < datetime(
            end_date.year, end_date.month, end_date.day, tzinfo=timezone.utc,
        ) + timedelta(days=1))
    if event_url_id:
        filters.append(BoothSession.event_url_id == event_url_id)

    total = (await db.execute(
        select(func.count()).select_from(BoothSession).where(*filters),
    )).scalar_one()
    result = await db.execute(
        select(BoothSession, EventUrl.url_path, EventUrl.event_name)
        .outerjoin(EventUrl, EventUrl.id == BoothSession.event_url_id)
        .where(*filters)
        .order_by(BoothSession.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit),
    )
    return {
        "sessions": [session_dict(s, path, name) for s, path, name in result.all()],
        "pagination": {
            "total_count": total,
            "page": page,
            "limit": limit,
            "total_pages": math.ceil(total / limit) if total else 0,
        },
    }


async def get_session(
    db: AsyncSession, actor: Actor, session_id: UUID, action: Action = Action.READ,
) -> BoothSession:
    session = await db.get(BoothSession, session_id)
    if session is None:
        raise ResourceNotFoundError("BoothSession", str(session_id))
    require_permission(
        actor,
        PermissionTarget(ResourceType.SESSION, session.user_id, str(session_id)),
        action,
    )
    return session


async def _delete_media(storage: StorageRegistry, session: BoothSession) -> None:
    if not await storage.for_url(session.media_url).delete_file(session.media_url):
        logger.warning("Media not deleted", extra={"session_id": str(session.id)})


async def delete_session(
    db: AsyncSession, actor: Actor, storage: StorageRegistry, session_id: UUID,
) -> None:
    session = await get_session(db, actor, session_id, Action.DELETE)
    await _delete_media(storage, session)
    await db.delete(session)
    await db.commit()
    logger.info("Booth session deleted", extra={"session_id": str(session_id)})


async def _settings_for_session(db: AsyncSession, session: BoothSession) -> dict[str, Any]:
    if session.event_url_id is not None:
        settings = await get_settings_by_event_url_id(db, session.event_url_id)
        if settings is not None:
            return settings.as_dict()
    if session.user_id is not None:
        settings = await get_user_settings(db, session.user_id)
        if settings is not None:
            return settings.as_dict()
    default = await get_default_settings(db)
    return default.as_dict() if default else build_default_settings()


async def resend_email(
    db: AsyncSession, actor: Actor, mailer: MailTransport, app_settings: Settings,
    session_id: UUID,
) -> BoothSession:
    session = await get_session(db, actor, session_id, Action.EMAIL)
    if not session.user_email:
        raise ValidationFailedError("This session has no attendee email", "user_email")

    settings = await _settings_for_session(db, session)
    await notifications.send_session_resend_email(
        mailer, app_settings, settings, session.user_email, session.user_name,
        full_media_url(session.media_url, settings, app_settings),
        session.media_type == MediaType.VIDEO.value,
    )
    session.email_sent = True
    if session.user_id is not None:
        owner = await db.get(User, session.user_id)
        if owner is not None:
            owner.emails_sent += 1
    await db.commit()
    logger.info(
        "Session email resent",
        extra={"session_id": str(session.id), "recipient": session.user_email},
    )
    return session


async def bulk_delete(
    db: AsyncSession, actor: Actor, storage: StorageRegistry, ids: list[UUID],
) -> int:
    require_admin(actor)
    sessions = (await db.execute(
        select(BoothSession).where(BoothSession.id.in_(ids)),
    )).scalars().all()
    for session in sessions:
        await _delete_media(storage, session)
    await db.execute(delete(BoothSession).where(BoothSession.id.in_(ids)))
    await db.commit()
    logger.info(f"Bulk deleted {len(sessions)} booth sessions", extra={"user_id": str(actor.id)})
    return len(sessions)
