"""Settings Routes — read and update booth settings for the signed-in user.

Invariants:
    - Responses pass through process_settings_for_client (no SMTP password)
    - event_url_id scopes reads and writes to one event; absent means base settings
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.api.deps import CurrentUser, get_current_user
from boothboss.core.settings_rules import build_default_settings, process_settings_for_client
from boothboss.core.themes import THEMES, colors_from_settings, generate_theme_css
from boothboss.infrastructure.database import get_db
from boothboss.schemas.settings import SettingsUpdate
from boothboss.services import settings_service

router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


def _client_view(data: dict) -> dict:
    processed = process_settings_for_client(data)
    colors = colors_from_settings(processed)
    processed["theme_colors"] = colors
    processed["theme_css"] = generate_theme_css(colors)
    return processed


@router.get("")
async def get_settings(
    event_url_id: UUID | None = None,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    settings = await settings_service.get_user_settings(db, current.user.id, event_url_id)
    return _client_view(settings.as_dict() if settings else build_default_settings())


@router.put("")
async def update_settings(
    body: SettingsUpdate,
    event_url_id: UUID | None = None,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    settings = await settings_service.update_user_settings(
        db, current.actor, current.user.id, body.to_update(), event_url_id,
    )
    return _client_view(settings.as_dict())


@router.get("/all")
async def list_all_settings(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    rows = await settings_service.get_all_user_settings(db, current.user.id)
    return {"settings": [process_settings_for_client(r.as_dict()) for r in rows]}


@router.get("/themes")
async def list_themes():
    return {"themes": THEMES}
