"""Journey Routes — saved journey templates and activation onto booth settings."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.api.deps import CurrentUser, get_current_user
from boothboss.core.settings_rules import process_settings_for_client
from boothboss.infrastructure.database import get_db
from boothboss.schemas.journey import JourneyActivate, JourneyResponse, JourneySave
from boothboss.services import journey_service

router = APIRouter(prefix="/api/v1/journeys", tags=["journeys"])


@router.get("", response_model=list[JourneyResponse])
async def list_journeys(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await journey_service.list_journeys(db, current.user.id)


@router.post("", response_model=JourneyResponse)
async def save_journey(
    body: JourneySave,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await journey_service.save_journey(db, current.actor, current.user.id, body)


@router.get("/{journey_id}", response_model=JourneyResponse)
async def get_journey(
    journey_id: UUID,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await journey_service.get_journey(db, current.actor, journey_id)


@router.delete("/{journey_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_journey(
    journey_id: UUID,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await journey_service.delete_journey(db, current.actor, journey_id)


@router.post("/{journey_id}/activate")
async def activate_journey(
    journey_id: UUID,
    body: JourneyActivate,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    settings = await journey_service.activate_journey(
        db, current.actor, journey_id, body.event_url_id,
    )
    return {"success": True, "settings": process_settings_for_client(settings.as_dict())}
