"""Booth Session Routes — the captures recorded for the signed-in user's events."""

from datetime import date
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.api.deps import (
    CurrentUser, get_app_settings, get_current_user, get_mailer, get_storage,
)
from boothboss.config import Settings
from boothboss.core.repository_protocols import MailTransport
from boothboss.infrastructure.database import get_db
from boothboss.infrastructure.storage import StorageRegistry
from boothboss.services import session_service

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


@router.get("")
async def list_sessions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    media_type: Literal["photo", "video"] | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    event_url_id: UUID | None = None,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await session_service.list_sessions(
        db, current.actor, page, limit, media_type, start_date, end_date, event_url_id,
    )


@router.get("/{session_id}")
async def get_session(
    session_id: UUID,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    session = await session_service.get_session(db, current.actor, session_id)
    return session_service.session_dict(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: UUID,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: StorageRegistry = Depends(get_storage),
):
    await session_service.delete_session(db, current.actor, storage, session_id)


@router.post("/{session_id}/resend-email")
async def resend_email(
    session_id: UUID,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    mailer: MailTransport = Depends(get_mailer),
    app_settings: Settings = Depends(get_app_settings),
):
    session = await session_service.resend_email(
        db, current.actor, mailer, app_settings, session_id,
    )
    return {"success": True, "session": session_service.session_dict(session)}
