"""Admin Routes — user management, system-wide listings and reporting.

Invariants:
    - Every handler depends on get_current_admin (403 for customers)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.api.deps import (
    CurrentUser, get_app_settings, get_current_admin, get_current_user, get_storage,
)
from boothboss.config import Settings
from boothboss.infrastructure.database import get_db
from boothboss.infrastructure.storage import StorageRegistry
from boothboss.schemas.admin import AdminUserCreate, AdminUserUpdate, BulkDeleteRequest
from boothboss.services import admin_service, event_url_service, session_service
from boothboss.services.account_service import profile_dict

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/check")
async def check_admin(current: CurrentUser = Depends(get_current_user)):
    return {"is_admin": current.actor.is_admin}


@router.get("/users")
async def list_users(
    search: str | None = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current: CurrentUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
):
    return await admin_service.list_users(db, current.actor, app_settings, search, page, limit)


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: AdminUserCreate,
    current: CurrentUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
):
    user = await admin_service.create_user(db, current.actor, body)
    return {"user": profile_dict(user, app_settings)}


@router.get("/users/{user_id}")
async def get_user(
    user_id: UUID,
    current: CurrentUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
):
    return await admin_service.get_user_detail(db, current.actor, app_settings, user_id)


@router.patch("/users/{user_id}")
async def update_user(
    user_id: UUID,
    body: AdminUserUpdate,
    current: CurrentUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
):
    await admin_service.update_user(db, current.actor, user_id, body)
    return await admin_service.get_user_detail(db, current.actor, app_settings, user_id)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    current: CurrentUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await admin_service.delete_user(db, current.actor, user_id)


@router.get("/event-urls")
async def list_event_urls(
    current: CurrentUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return {"event_urls": await event_url_service.list_all_event_urls(db)}


@router.get("/sessions")
async def list_sessions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current: CurrentUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await session_service.list_sessions(db, current.actor, page, limit)


@router.post("/sessions/bulk-delete")
async def bulk_delete_sessions(
    body: BulkDeleteRequest,
    current: CurrentUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    storage: StorageRegistry = Depends(get_storage),
):
    deleted = await session_service.bulk_delete(db, current.actor, storage, body.ids)
    return {"success": True, "deleted": deleted}


@router.get("/analytics")
async def system_analytics(
    current: CurrentUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await admin_service.system_analytics(db, current.actor)
