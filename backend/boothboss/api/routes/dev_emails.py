"""Dev Email Preview Routes — inspect mail captured while delivery is disabled.

Invariants:
    - Every endpoint answers 404 outside the development environment
"""

from fastapi import APIRouter, Depends

from boothboss.api.deps import get_app_settings, get_email_previews
from boothboss.config import Settings
from boothboss.core.errors import ResourceNotFoundError
from boothboss.infrastructure.mailer import EmailPreviewStore

router = APIRouter(prefix="/api/v1/dev/emails", tags=["dev"])


def _development_only(app_settings: Settings = Depends(get_app_settings)) -> None:
    if not app_settings.is_development:
        raise ResourceNotFoundError("Route", "/api/v1/dev/emails")


@router.get("", dependencies=[Depends(_development_only)])
async def list_previews(previews: EmailPreviewStore = Depends(get_email_previews)):
    items = previews.list()
    return {"count": len(items), "emails": [p.as_dict() for p in items]}


@router.get("/{preview_id}", dependencies=[Depends(_development_only)])
async def get_preview(
    preview_id: str, previews: EmailPreviewStore = Depends(get_email_previews),
):
    preview = previews.get(preview_id)
    if preview is None:
        raise ResourceNotFoundError("EmailPreview", preview_id)
    return preview.as_dict()


@router.delete("", dependencies=[Depends(_development_only)])
async def clear_previews(previews: EmailPreviewStore = Depends(get_email_previews)):
    previews.clear()
    return {"success": True}
