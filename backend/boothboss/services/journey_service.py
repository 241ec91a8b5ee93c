"""Journey Service — saved journey templates and their activation on booth settings.

Invariants:
    - Journeys belong to one user; other customers get 403, missing ids 404
    - save upserts by id; a supplied id that does not exist creates a new journey
    - activate copies the pages (not a reference) into the resolved settings and
      requires the journey_builder feature
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.core.domain_types import Action, ResourceType
from boothboss.core.errors import ResourceNotFoundError
from boothboss.core.permissions import Actor, PermissionTarget, require_permission
from boothboss.models.booth_settings import BoothSettings
from boothboss.models.journey import Journey
from boothboss.schemas.journey import JourneySave
from boothboss.services.settings_service import update_user_settings
from boothboss.services.subscription_service import require_feature

logger = logging.getLogger(__name__)


async def list_journeys(db: AsyncSession, user_id: UUID) -> list[Journey]:
    result = await db.execute(
        select(Journey)
        .where(Journey.user_id == user_id)
        .order_by(Journey.updated_at.desc()),
    )
    return list(result.scalars().all())


async def get_journey(
    db: AsyncSession, actor: Actor, journey_id: UUID, action: Action = Action.READ,
) -> Journey:
    journey = await db.get(Journey, journey_id)
    if journey is None:
        raise ResourceNotFoundError("Journey", str(journey_id))
    require_permission(
        actor, PermissionTarget(ResourceType.JOURNEY, journey.user_id, str(journey_id)), action,
    )
    return journey


async def save_journey(
    db: AsyncSession, actor: Actor, user_id: UUID, body: JourneySave,
) -> Journey:
    pages = [page.model_dump() for page in body.pages]
    journey = await db.get(Journey, body.id) if body.id else None
    if journey is not None:
        require_permission(
            actor, PermissionTarget(ResourceType.JOURNEY, journey.user_id, str(journey.id)),
            Action.UPDATE,
        )
        journey.name = body.name.strip()
        journey.pages = pages
    else:
        require_permission(
            actor, PermissionTarget(ResourceType.JOURNEY, user_id), Action.CREATE,
        )
        journey = Journey(user_id=user_id, name=body.name.strip(), pages=pages)
        if body.id:
            journey.id = body.id
        db.add(journey)
    await db.commit()
    await db.refresh(journey)
    logger.info(
        f"Journey saved with {len(pages)} pages",
        extra={"user_id": str(journey.user_id)},
    )
    return journey


async def delete_journey(db: AsyncSession, actor: Actor, journey_id: UUID) -> None:
    journey = await get_journey(db, actor, journey_id, Action.DELETE)
    await db.delete(journey)
    await db.commit()


async def activate_journey(
    db: AsyncSession, actor: Actor, journey_id: UUID, event_url_id: UUID | None = None,
) -> BoothSettings:
    """Copy a journey into the owner's settings (event-specific when event_url_id is given)."""
    journey = await get_journey(db, actor, journey_id, Action.UPDATE)
    await require_feature(db, actor, journey.user_id, "journey_builder")
    data: dict[str, Any] = {
        "journey_config": [dict(page) for page in journey.pages],
        "active_journey_id": str(journey.id),
        "journey_name": journey.name,
        "custom_journey_enabled": True,
    }
    settings = await update_user_settings(db, actor, journey.user_id, data, event_url_id)
    logger.info(
        f"Journey '{journey.name}' activated",
        extra={"user_id": str(journey.user_id)},
    )
    return settings
