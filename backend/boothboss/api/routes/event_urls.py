"""Event URL Routes — CRUD for the signed-in user's booth slugs.

Invariants:
    - Customers act on their own URLs; admins may pass user_id to act for another user
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.api.deps import CurrentUser, get_current_user
from boothboss.core.domain_types import Action
from boothboss.infrastructure.database import get_db
from boothboss.schemas.event_url import EventUrlCreate, EventUrlResponse, EventUrlUpdate
from boothboss.services import event_url_service

router = APIRouter(prefix="/api/v1/event-urls", tags=["event-urls"])


@router.get("", response_model=list[EventUrlResponse])
async def list_event_urls(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await event_url_service.list_event_urls(db, current.user.id)


@router.get("/check")
async def check_availability(
    url_path: str = Query(min_length=1, max_length=60),
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await event_url_service.check_availability(db, url_path)


@router.post("", response_model=EventUrlResponse, status_code=status.HTTP_201_CREATED)
async def create_event_url(
    body: EventUrlCreate,
    user_id: UUID | None = None,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await event_url_service.create_event_url(
        db, current.actor, user_id or current.user.id, body,
    )


@router.get("/{event_url_id}", response_model=EventUrlResponse)
async def get_event_url(
    event_url_id: UUID,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await event_url_service.get_owned_event_url(
        db, current.actor, event_url_id, Action.READ,
    )


@router.patch("/{event_url_id}", response_model=EventUrlResponse)
async def update_event_url(
    event_url_id: UUID,
    body: EventUrlUpdate,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await event_url_service.update_event_url(db, current.actor, event_url_id, body)


@router.delete("/{event_url_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_url(
    event_url_id: UUID,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await event_url_service.delete_event_url(db, current.actor, event_url_id)
