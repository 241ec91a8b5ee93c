"""Upload Routes — authenticated asset uploads (logos, splash images, journey art, media).

Invariants:
    - directory is one of logos | splash | journey | media
    - Only image/* and video/* content types are accepted
    - Files over max_upload_bytes are rejected with 400 before any storage call, from
      the declared size when the client sends one; at most limit + 1 bytes are buffered
    - GET /status answers 404 when the owning provider no longer has the file
"""

import logging
from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.api.deps import CurrentUser, get_app_settings, get_current_user, get_storage
from boothboss.config import Settings
from boothboss.core.errors import ResourceNotFoundError, ValidationFailedError
from boothboss.core.media_naming import generate_unique_filename
from boothboss.core.settings_rules import build_default_settings
from boothboss.infrastructure.database import get_db
from boothboss.infrastructure.storage import StorageRegistry
from boothboss.services.booth_service import store_media
from boothboss.services.settings_service import get_user_settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/uploads", tags=["uploads"])

ALLOWED_PREFIXES = ("image/", "video/")


async def read_within_limit(upload: UploadFile, limit: int, message: str, field: str) -> bytes:
    """Read an upload, refusing it from the declared size before buffering when known."""
    if upload.size is not None and upload.size > limit:
        raise ValidationFailedError(message, field)
    data = await upload.read(limit + 1)
    if len(data) > limit:
        raise ValidationFailedError(message, field)
    return data


@router.post("")
async def upload_asset(
    file: UploadFile = File(...),
    directory: Literal["logos", "splash", "journey", "media"] = Form("media"),
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: StorageRegistry = Depends(get_storage),
    app_settings: Settings = Depends(get_app_settings),
):
    content_type = file.content_type or ""
    if not content_type.startswith(ALLOWED_PREFIXES):
        raise ValidationFailedError("Only image and video files can be uploaded", "file")
    data = await read_within_limit(
        file, app_settings.max_upload_bytes,
        f"File exceeds the {app_settings.max_upload_bytes // (1024 * 1024)} MB limit", "file",
    )
    if not data:
        raise ValidationFailedError("The uploaded file is empty", "file")

    settings = await get_user_settings(db, current.user.id)
    filename = generate_unique_filename(file.filename or "upload", datetime.now(timezone.utc))
    stored, fallback_used = await store_media(
        storage, settings.as_dict() if settings else build_default_settings(),
        app_settings, data, filename, content_type, directory,
    )
    logger.info(
        f"Asset uploaded to {directory}",
        extra={"user_id": str(current.user.id), "provider": stored.provider},
    )
    return {"success": True, "fallback_used": fallback_used, **stored.as_dict()}


@router.get("/status", dependencies=[Depends(get_current_user)])
async def upload_status(
    url: str,
    storage: StorageRegistry = Depends(get_storage),
):
    """Whether a stored media URL still resolves, asked of the provider that owns it."""
    info = await storage.for_url(url).get_file_info(url)
    if info is None:
        raise ResourceNotFoundError("StoredFile", url)
    return {"exists": True, **info.as_dict()}
