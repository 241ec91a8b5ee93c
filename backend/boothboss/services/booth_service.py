"""Booth Service — public booth configuration and the attendee capture pipeline.

Invariants:
    - Unknown URL paths are 404; inactive URLs answer with active=False and a minimal config
    - The public config never includes SMTP, admin email, notes or storage internals
    - Capture order: validate → quota/feature checks → upload (Vercel falls back to local)
      → BoothSession + usage counter commit → analytics (best effort) → email (best effort)
    - Analytics and email failures never fail a capture whose media is stored
    - When the owner's email quota is exhausted the session is kept and no email is sent
    - Attendee names are collapsed to one line; emails with whitespace or control
      characters are a 400

Design Decisions:
    - Captures without an event URL fall back to the system default settings
      and have no owner, so no quota applies
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.config import Settings
from boothboss.core.domain_types import MediaType, StorageProviderName
from boothboss.core.errors import (
    BoothBossError, ErrorContext, FeatureNotAvailableError, MailDeliveryError,
    QuotaExceededError, ResourceNotFoundError, StorageError, ValidationFailedError,
)
from boothboss.core.media_naming import capture_filename
from boothboss.core.repository_protocols import (
    MailAttachment, MailTransport, StorageResult, UploadOptions,
)
from boothboss.core.settings_rules import (
    build_default_settings, process_settings_for_client, public_booth_settings,
)
from boothboss.core.subscription_features import has_feature, get_limit, is_within_limit
from boothboss.core.themes import colors_from_settings, generate_theme_css
from boothboss.infrastructure.storage import StorageRegistry, determine_provider
from boothboss.models.booth_session import BoothSession
from boothboss.models.event_url import EventUrl
from boothboss.models.user import User
from boothboss.schemas.booth import CaptureResponse
from boothboss.services import analytics_service, notifications
from boothboss.services.event_url_service import get_by_path
from boothboss.services.settings_service import (
    get_default_settings, get_settings_by_event_url_id,
)
from boothboss.services.subscription_service import get_subscription, subscription_view

logger = logging.getLogger(__name__)

CAPTURE_DIRECTORY = "booth"

_CONTROL = re.compile(r"[\x00-\x1f\x7f]")
_CONTROL_OR_SPACE = re.compile(r"[\x00-\x20\x7f]")


def _single_line(value: str) -> str:
    """Attendee names end up in mail subjects; line breaks become spaces."""
    return " ".join(_CONTROL.sub(" ", value).split())


@dataclass
class CaptureInput:
    data: bytes
    content_type: str | None
    is_video: bool
    name: str
    email: str
    url_path: str | None = None
    analytics_id: UUID | None = None
    filter: str = "normal"


async def get_booth_config(db: AsyncSession, url_path: str) -> dict[str, Any]:
    event_url = await get_by_path(db, url_path)
    if event_url is None:
        raise ResourceNotFoundError("EventUrl", url_path)
    settings = await get_settings_by_event_url_id(db, event_url.id)
    processed = process_settings_for_client(settings.as_dict())

    if not event_url.is_active:
        return {
            "active": False,
            "event_url": event_url.url_path,
            "event_name": event_url.event_name,
            "settings": {
                "countdown_time": processed["countdown_time"],
                "reset_time": processed["reset_time"],
                "capture_mode": processed["capture_mode"],
            },
        }

    colors = colors_from_settings(processed)
    return {
        "active": True,
        "event_url": event_url.url_path,
        "event_name": event_url.event_name,
        "event_url_id": str(event_url.id),
        "settings": public_booth_settings(processed),
        "theme_colors": colors,
        "theme_css": generate_theme_css(colors),
    }


async def _resolve_capture_context(
    db: AsyncSession, url_path: str | None,
) -> tuple[EventUrl | None, dict[str, Any]]:
    if not url_path:
        default = await get_default_settings(db)
        return None, default.as_dict() if default else build_default_settings()
    event_url = await get_by_path(db, url_path)
    if event_url is None:
        raise ResourceNotFoundError("EventUrl", url_path)
    if not event_url.is_active:
        raise ValidationFailedError(
            "This event is not accepting captures", "url_path",
            ErrorContext(event_url=event_url.url_path),
        )
    settings = await get_settings_by_event_url_id(db, event_url.id)
    return event_url, settings.as_dict()


def full_media_url(media_url: str, settings: dict[str, Any], app_settings: Settings) -> str:
    if media_url.startswith(("http://", "https://")):
        return media_url
    base = (
        settings.get("storage_base_url")
        or app_settings.storage_base_url
        or app_settings.public_base_url
    )
    return f"{base.rstrip('/')}/{media_url.lstrip('/')}"


async def store_media(
    storage: StorageRegistry, settings: dict[str, Any], app_settings: Settings,
    data: bytes, filename: str, content_type: str, directory: str = CAPTURE_DIRECTORY,
) -> tuple[StorageResult, bool]:
    """Upload with the configured provider; Vercel failures retry locally.

    Local writes go under the tenant's local_upload_path when it differs from the
    served upload root, so the file stays reachable through the StaticFiles mount.
    """
    provider_name = determine_provider(
        settings.get("storage_provider"), bool(settings.get("blob_vercel_enabled")),
        app_settings,
    )
    options = UploadOptions(directory=directory, content_type=content_type)
    local_options = UploadOptions(
        directory=local_directory(settings, storage.local.upload_path, directory),
        content_type=content_type,
    )
    if provider_name == StorageProviderName.LOCAL:
        return await storage.local.upload_file(data, filename, local_options), False
    try:
        return await storage.get(provider_name).upload_file(data, filename, options), False
    except StorageError:
        logger.warning(
            "Primary storage failed, falling back to local",
            extra={"provider": provider_name.value},
        )
        return await storage.local.upload_file(data, filename, local_options), True


def local_directory(settings: dict[str, Any], upload_root: str, directory: str) -> str:
    root = upload_root.strip("/")
    tenant = (settings.get("local_upload_path") or "").strip("/")
    if tenant.startswith(root + "/"):
        tenant = tenant[len(root) + 1:]
    if not tenant or tenant == root:
        return directory
    return f"{tenant}/{directory}" if directory else tenant


async def capture(
    db: AsyncSession, storage: StorageRegistry, mailer: MailTransport,
    app_settings: Settings, body: CaptureInput,
) -> CaptureResponse:
    name, email = _single_line(body.name), body.email.strip()
    if not body.data:
        raise ValidationFailedError("A photo or video file is required", "media")
    if not name or not email:
        raise ValidationFailedError("Name and email are required", "name")
    if _CONTROL_OR_SPACE.search(email):
        raise ValidationFailedError("Enter a valid email address", "email")

    event_url, settings = await _resolve_capture_context(db, body.url_path)
    owner: User | None = await db.get(User, event_url.user_id) if event_url else None
    view = subscription_view(await get_subscription(db, owner.id)) if owner else None

    if owner is not None:
        if body.is_video and not has_feature(view, "video_access"):
            raise FeatureNotAvailableError("video_access")
        max_media = get_limit(view, "max_media")
        if not is_within_limit(owner.media_count, max_media):
            raise QuotaExceededError("media uploads", max_media)

    now = datetime.now(timezone.utc)
    filename = capture_filename(name, body.is_video, now)
    content_type = body.content_type or ("video/mp4" if body.is_video else "image/jpeg")
    stored, fallback_used = await store_media(
        storage, settings, app_settings, body.data, filename, content_type,
    )
    full_url = full_media_url(stored.url, settings, app_settings)
    media_type = MediaType.VIDEO if body.is_video else MediaType.PHOTO

    session = BoothSession(
        user_id=owner.id if owner else None,
        event_url_id=event_url.id if event_url else None,
        event_url_path=event_url.url_path if event_url else None,
        user_name=name,
        user_email=email,
        media_url=stored.url,
        media_type=media_type.value,
        filter=body.filter or "normal",
        storage_provider=stored.provider,
        event_name=event_url.event_name if event_url else settings.get("event_name"),
        template_used=settings.get("theme"),
    )
    db.add(session)
    if owner is not None:
        owner.media_count += 1
    await db.commit()
    await db.refresh(session)
    logger.info(
        f"Captured {media_type.value} via {stored.provider}",
        extra={
            "session_id": str(session.id),
            "event_url": session.event_url_path,
            "provider": stored.provider,
            "media_type": media_type.value,
        },
    )

    if body.analytics_id is not None:
        await _record_capture_analytics(
            db, body.analytics_id, session, email, stored, fallback_used,
        )

    email_sent = await _deliver_capture_email(
        db, mailer, app_settings, settings, owner, view, session,
        full_url, body.data, content_type,
    )

    return CaptureResponse(
        session_id=session.id,
        media_url=stored.url,
        full_url=full_url,
        provider=stored.provider,
        fallback_used=fallback_used,
        email_sent=email_sent,
    )


async def _record_capture_analytics(
    db: AsyncSession, analytics_id: UUID, session: BoothSession, email: str,
    stored: StorageResult, fallback_used: bool,
) -> None:
    try:
        await analytics_service.record_media_upload(
            db, analytics_id, session, email,
            {"provider": stored.provider, "fallback_used": fallback_used, "url": stored.url},
        )
    except (BoothBossError, SQLAlchemyError) as e:
        await db.rollback()
        logger.warning(
            f"Capture analytics not recorded: {e}",
            extra={"session_id": str(session.id)},
        )


async def _deliver_capture_email(
    db: AsyncSession, mailer: MailTransport, app_settings: Settings,
    settings: dict[str, Any], owner: User | None, view: dict | None,
    session: BoothSession, full_url: str, data: bytes, content_type: str,
) -> bool:
    if owner is not None and not is_within_limit(owner.emails_sent, get_limit(view, "max_emails")):
        logger.warning(
            "Email quota exhausted, skipping attendee email",
            extra={"user_id": str(owner.id), "session_id": str(session.id)},
        )
        return False

    is_video = session.media_type == MediaType.VIDEO.value
    photo = None if is_video else MailAttachment("your-photo.jpg", data, content_type)
    try:
        await notifications.send_booth_media_email(
            mailer, app_settings, settings, session.user_email, session.user_name,
            full_url, is_video, photo,
        )
    except MailDeliveryError as e:
        logger.warning(
            f"Attendee email failed: {e.message}", extra={"session_id": str(session.id)},
        )
        return False

    session.email_sent = True
    if owner is not None:
        owner.emails_sent += 1
    await db.commit()

    try:
        await notifications.send_admin_notification(
            mailer, app_settings, settings, session.user_name, session.user_email,
            str(session.id), full_url, is_video,
        )
    except MailDeliveryError as e:
        logger.warning(
            f"Admin notification failed: {e.message}", extra={"session_id": str(session.id)},
        )
    return True
