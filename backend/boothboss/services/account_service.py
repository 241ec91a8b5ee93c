"""Account Service — the signed-in user's profile, password and first-run setup.

Invariants:
    - Usernames are unique system-wide (409 when taken)
    - change_password verifies the current password first (401 otherwise)
    - account_setup creates the event URL, base settings and their link in one commit
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.config import Settings
from boothboss.core.domain_types import ensure_utc
from boothboss.core.errors import AuthenticationError, ConflictError
from boothboss.core.permissions import Actor
from boothboss.infrastructure.security import hash_password, verify_password
from boothboss.models.user import User
from boothboss.schemas.account import AccountSetupRequest, AccountUpdate, PasswordChange
from boothboss.schemas.event_url import EventUrlCreate
from boothboss.services.auth_service import actor_for
from boothboss.services.event_url_service import create_event_url
from boothboss.services.settings_service import (
    create_base_settings, get_base_settings, link_settings_to_event_url,
)
from boothboss.services.subscription_service import (
    get_or_create_subscription, summarize_subscription,
)

logger = logging.getLogger(__name__)


def profile_dict(user: User, app_settings: Settings) -> dict[str, Any]:
    actor = actor_for(user, app_settings)
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "username": user.username,
        "role": user.role,
        "is_admin": actor.is_admin,
        "email_verified": user.email_verified,
        "organization_name": user.organization_name,
        "organization_size": user.organization_size,
        "industry": user.industry,
        "created_at": ensure_utc(user.created_at).isoformat(),
    }


async def get_account(db: AsyncSession, user: User, app_settings: Settings) -> dict[str, Any]:
    subscription = await get_or_create_subscription(db, user)
    await db.commit()
    return {
        "user": profile_dict(user, app_settings),
        "subscription": summarize_subscription(subscription, user),
    }


async def update_account(db: AsyncSession, user: User, body: AccountUpdate) -> User:
    changes = body.model_dump(exclude_unset=True)
    username = changes.pop("username", None)
    if username and username != user.username:
        taken = (await db.execute(
            select(User.id).where(User.username == username, User.id != user.id),
        )).scalar_one_or_none()
        if taken is not None:
            raise ConflictError("This username is already taken", "username")
        user.username = username
    for field, value in changes.items():
        if value is not None:
            setattr(user, field, value.strip() if isinstance(value, str) else value)
    await db.commit()
    await db.refresh(user)
    return user


async def change_password(db: AsyncSession, user: User, body: PasswordChange) -> None:
    if not verify_password(body.current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    user.password_hash = hash_password(body.new_password)
    await db.commit()
    logger.info("Password changed", extra={"user_id": str(user.id)})


async def account_setup(
    db: AsyncSession, actor: Actor, user: User, body: AccountSetupRequest,
) -> dict[str, Any]:
    """First-run wizard: an event URL plus branded base settings linked to it."""
    event_url = await create_event_url(
        db, actor, user.id,
        EventUrlCreate(url_path=body.url_path, event_name=body.event_name),
        commit=False,
    )
    overrides: dict[str, Any] = {"event_name": body.event_name}
    if body.company_name:
        overrides["company_name"] = body.company_name
    if body.primary_color:
        overrides["primary_color"] = body.primary_color
        overrides["button_color"] = body.primary_color
    if body.logo_url:
        overrides["company_logo"] = body.logo_url

    settings = await get_base_settings(db, user.id)
    if settings is None:
        settings = await create_base_settings(db, user.id, **overrides)
    else:
        for key, value in overrides.items():
            setattr(settings, key, value)
    await link_settings_to_event_url(db, settings.id, event_url.id, commit=False)
    await db.commit()
    logger.info(
        "Account setup completed",
        extra={"user_id": str(user.id), "event_url": event_url.url_path},
    )
    return {
        "event_url": {
            "id": str(event_url.id),
            "url_path": event_url.url_path,
            "event_name": event_url.event_name,
        },
        "settings_id": str(settings.id),
    }
