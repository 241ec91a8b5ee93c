"""Booth Routes — public booth configuration and attendee capture (no auth).

Invariants:
    - Exactly one of photo/video per capture request
    - Upload size is capped by max_upload_bytes before the service sees the data;
      a declared size over the cap is refused without reading the body
"""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.api.deps import get_app_settings, get_mailer, get_storage
from boothboss.config import Settings
from boothboss.core.errors import ValidationFailedError
from boothboss.core.repository_protocols import MailTransport
from boothboss.infrastructure.database import get_db
from boothboss.infrastructure.storage import StorageRegistry
from boothboss.schemas.booth import CaptureResponse
from boothboss.api.routes.uploads import read_within_limit
from boothboss.services import booth_service

router = APIRouter(prefix="/api/v1/booth", tags=["booth"])


@router.get("/{url_path}")
async def get_booth_config(url_path: str, db: AsyncSession = Depends(get_db)):
    return await booth_service.get_booth_config(db, url_path)


@router.post("/capture", response_model=CaptureResponse)
async def capture(
    name: str = Form(...),
    email: str = Form(...),
    url_path: str | None = Form(None),
    analytics_id: UUID | None = Form(None),
    filter: str = Form("normal"),
    photo: UploadFile | None = File(None),
    video: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    storage: StorageRegistry = Depends(get_storage),
    mailer: MailTransport = Depends(get_mailer),
    app_settings: Settings = Depends(get_app_settings),
):
    if (photo is None) == (video is None):
        raise ValidationFailedError("Send exactly one photo or video file", "media")
    upload = video or photo
    data = await read_within_limit(
        upload, app_settings.max_upload_bytes, "File is too large", "media",
    )

    return await booth_service.capture(
        db, storage, mailer, app_settings,
        booth_service.CaptureInput(
            data=data,
            content_type=upload.content_type,
            is_video=video is not None,
            name=name,
            email=email,
            url_path=url_path or None,
            analytics_id=analytics_id,
            filter=filter,
        ),
    )
