"""Analytics Service — booth visit tracking and dashboard aggregation.

Invariants:
    - session_start is idempotent per client session key (existing row id is returned)
    - session_complete / event require an existing analytics row (404 otherwise)
    - Aggregation math lives in core/analytics_stats; this module only loads rows
    - Users see analytics for their own event URLs; the admin dashboard is system-wide
"""

import json
import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.core import analytics_stats
from boothboss.core.domain_types import Action, ResourceType, TrackEvent, ensure_utc
from boothboss.core.errors import ResourceNotFoundError, ValidationFailedError
from boothboss.core.permissions import Actor, PermissionTarget, require_admin, require_permission
from boothboss.models.booth_analytics import BoothAnalytics, BoothEventLog
from boothboss.models.booth_session import BoothSession
from boothboss.schemas.analytics import TrackRequest
from boothboss.services.event_url_service import get_by_path
from boothboss.services.subscription_service import require_feature

logger = logging.getLogger(__name__)

RECENT_EVENTS_LIMIT = 20


async def _get_analytics(db: AsyncSession, analytics_id: UUID) -> BoothAnalytics:
    row = await db.get(BoothAnalytics, analytics_id)
    if row is None:
        raise ResourceNotFoundError("Analytics", str(analytics_id))
    return row


async def track(
    db: AsyncSession, body: TrackRequest, header_user_agent: str | None = None,
) -> dict[str, Any]:
    event = TrackEvent(body.event)
    if event == TrackEvent.SESSION_START:
        return await _start_session(db, body, header_user_agent)
    row = await _get_analytics(db, body.analytics_id)
    if event == TrackEvent.SESSION_COMPLETE:
        row.event_type = TrackEvent.SESSION_COMPLETE.value
        row.completed_at = datetime.now(timezone.utc)
        row.booth_session_id = body.booth_session_id or row.booth_session_id
        row.email_domain = analytics_stats.email_domain(body.email) or row.email_domain
        row.duration_ms = body.duration_ms if body.duration_ms is not None else row.duration_ms
        if body.media_type:
            row.media_type = body.media_type
        await db.commit()
        return {"success": True, "analytics_id": str(row.id)}

    log = BoothEventLog(
        analytics_id=row.id,
        event_type=body.event_type,
        event_metadata=json.dumps(body.metadata) if body.metadata else None,
    )
    db.add(log)
    await db.commit()
    return {"success": True, "analytics_id": str(row.id), "event_id": str(log.id)}


async def _start_session(
    db: AsyncSession, body: TrackRequest, header_user_agent: str | None,
) -> dict[str, Any]:
    session_key = body.session_id or uuid.uuid4().hex
    existing = (await db.execute(
        select(BoothAnalytics).where(BoothAnalytics.session_id == session_key),
    )).scalar_one_or_none()
    if existing is not None:
        return {"success": True, "analytics_id": str(existing.id)}

    owner_id = None
    event_url_path = None
    if body.url_path:
        event_url = await get_by_path(db, body.url_path)
        if event_url is None:
            raise ValidationFailedError("Unknown event URL", "url_path")
        owner_id, event_url_path = event_url.user_id, event_url.url_path

    row = BoothAnalytics(
        session_id=session_key,
        user_id=owner_id,
        event_url_path=event_url_path,
        event_type=TrackEvent.SESSION_START.value,
        user_agent=body.user_agent or header_user_agent,
        media_type=body.media_type,
        filter=body.filter,
    )
    db.add(row)
    await db.commit()
    return {"success": True, "analytics_id": str(row.id)}


async def record_media_upload(
    db: AsyncSession, analytics_id: UUID, session: BoothSession, email: str,
    metadata: dict[str, Any],
) -> None:
    """Tie a capture to its analytics visit and log the upload."""
    row = await _get_analytics(db, analytics_id)
    row.booth_session_id = session.id
    row.email_domain = analytics_stats.email_domain(email)
    row.media_type = session.media_type
    row.filter = session.filter
    db.add(BoothEventLog(
        analytics_id=row.id, event_type="media_upload", event_metadata=json.dumps(metadata),
    ))
    await db.commit()


# ─── Loading ────────────────────────────────────────────────────

async def _analytics_rows(
    db: AsyncSession, user_id: UUID | None, start: datetime, end: datetime,
) -> list[dict[str, Any]]:
    query = select(BoothAnalytics).where(
        BoothAnalytics.timestamp >= start, BoothAnalytics.timestamp <= end,
    )
    if user_id is not None:
        query = query.where(BoothAnalytics.user_id == user_id)
    rows = (await db.execute(query)).scalars().all()
    return [
        {
            "event_type": r.event_type,
            "duration_ms": r.duration_ms,
            "email_domain": r.email_domain,
            "timestamp": ensure_utc(r.timestamp),
        }
        for r in rows
    ]


async def _event_logs(
    db: AsyncSession, user_id: UUID | None, start: datetime, end: datetime,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    query = (
        select(BoothEventLog, BoothAnalytics.event_url_path)
        .join(BoothAnalytics, BoothAnalytics.id == BoothEventLog.analytics_id)
        .where(BoothEventLog.timestamp >= start, BoothEventLog.timestamp <= end)
        .order_by(BoothEventLog.timestamp.desc())
    )
    if user_id is not None:
        query = query.where(BoothAnalytics.user_id == user_id)
    if limit:
        query = query.limit(limit)
    result = await db.execute(query)
    return [
        {
            "id": str(log.id),
            "analytics_id": str(log.analytics_id),
            "event_type": log.event_type,
            "label": analytics_stats.event_label(log.event_type),
            "metadata": json.loads(log.event_metadata) if log.event_metadata else None,
            "event_url": path,
            "timestamp": ensure_utc(log.timestamp).isoformat(),
        }
        for log, path in result.all()
    ]


async def _media_types(
    db: AsyncSession, user_id: UUID | None, start: datetime, end: datetime,
) -> list[str]:
    query = select(BoothSession.media_type).where(
        BoothSession.created_at >= start, BoothSession.created_at <= end,
    )
    if user_id is not None:
        query = query.where(BoothSession.user_id == user_id)
    return list((await db.execute(query)).scalars().all())


# ─── Dashboards ─────────────────────────────────────────────────

async def _period(
    db: AsyncSession, user_id: UUID | None, start: datetime, end: datetime,
) -> dict[str, Any]:
    rows = await _analytics_rows(db, user_id, start, end)
    logs = await _event_logs(db, user_id, start, end)
    days = max((end.date() - start.date()).days + 1, 1)
    return {
        "summary": analytics_stats.summarize(rows),
        "journey_funnel": analytics_stats.journey_funnel(logs),
        "conversion_trend": analytics_stats.conversion_trend(rows, days, end.date()),
        "media_type_stats": analytics_stats.media_type_stats(
            await _media_types(db, user_id, start, end),
        ),
    }


def _day_start(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


async def dashboard(
    db: AsyncSession, user_id: UUID | None, days: int = 30,
    start_date: date | None = None, end_date: date | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Analytics dashboard for one owner (user_id) or the whole system (None)."""
    now = now or datetime.now(timezone.utc)
    if start_date and end_date:
        if end_date < start_date:
            raise ValidationFailedError("end_date must not be before start_date", "end_date")
        start = _day_start(start_date)
        end = _day_start(end_date) + timedelta(days=1) - timedelta(microseconds=1)
        period = await _period(db, user_id, start, end)
        return {
            "period": {
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "days": (end_date - start_date).days + 1,
            },
            **period,
        }

    today = _day_start(now.date())
    daily = await _analytics_rows(db, user_id, today, now)
    weekly = await _analytics_rows(db, user_id, today - timedelta(days=6), now)
    monthly_start = today - timedelta(days=days - 1)
    period = await _period(db, user_id, monthly_start, now)
    recent = await _event_logs(db, user_id, monthly_start, now, RECENT_EVENTS_LIMIT)
    return {
        "daily_summary": analytics_stats.summarize(daily),
        "weekly_summary": analytics_stats.summarize(weekly),
        "monthly_summary": period["summary"],
        "recent_events": recent,
        "event_types": analytics_stats.distinct_event_types(recent),
        "journey_funnel": period["journey_funnel"],
        "conversion_trend": period["conversion_trend"],
        "media_type_stats": period["media_type_stats"],
    }


async def user_dashboard(
    db: AsyncSession, actor: Actor, user_id: UUID, days: int = 30,
    start_date: date | None = None, end_date: date | None = None,
) -> dict[str, Any]:
    require_permission(
        actor, PermissionTarget(ResourceType.USER, user_id, str(user_id)), Action.READ,
    )
    await require_feature(db, actor, user_id, "analytics_access")
    return await dashboard(db, user_id, days, start_date, end_date)


async def admin_dashboard(
    db: AsyncSession, actor: Actor, days: int = 30,
    start_date: date | None = None, end_date: date | None = None,
) -> dict[str, Any]:
    require_admin(actor)
    return await dashboard(db, None, days, start_date, end_date)
