"""Route Dependencies — authentication and infrastructure singletons for handlers.

Invariants:
    - A missing or invalid bearer token is a 401 (AuthenticationError), never a 403
    - Storage, mailer and the email preview store are process-wide singletons
      reached only through these functions, so tests swap them with dependency_overrides
"""

from dataclasses import dataclass
from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.config import Settings, get_settings
from boothboss.core.errors import AuthenticationError
from boothboss.core.permissions import Actor, require_admin
from boothboss.core.repository_protocols import MailTransport
from boothboss.infrastructure.database import get_db
from boothboss.infrastructure.mailer import EmailPreviewStore, Mailer
from boothboss.infrastructure.storage import StorageRegistry, build_storage_registry
from boothboss.models.user import User
from boothboss.services.auth_service import actor_for, user_from_token

_bearer = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    user: User
    actor: Actor


def get_app_settings() -> Settings:
    return get_settings()


@lru_cache
def get_email_previews() -> EmailPreviewStore:
    return EmailPreviewStore(get_settings().email_preview_capacity)


@lru_cache
def _mailer() -> Mailer:
    return Mailer(get_settings(), get_email_previews())


def get_mailer() -> MailTransport:
    return _mailer()


@lru_cache
def get_storage() -> StorageRegistry:
    return build_storage_registry(get_settings())


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: AsyncSession = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")
    user = await user_from_token(db, credentials.credentials, app_settings)
    return CurrentUser(user=user, actor=actor_for(user, app_settings))


async def get_current_admin(
    current: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    require_admin(current.actor)
    return current
