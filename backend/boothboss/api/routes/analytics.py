"""Analytics Routes — public tracking endpoint and owner/admin dashboards."""

from datetime import date

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.api.deps import CurrentUser, get_current_admin, get_current_user
from boothboss.infrastructure.database import get_db
from boothboss.schemas.analytics import TrackRequest
from boothboss.services import analytics_service

router = APIRouter(prefix="/api/v1/analytics", tags=["analytics"])


@router.post("/track")
async def track(
    body: TrackRequest,
    user_agent: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
):
    return await analytics_service.track(db, body, user_agent)


@router.get("/dashboard")
async def user_dashboard(
    days: int = Query(30, ge=1, le=365),
    start_date: date | None = None,
    end_date: date | None = None,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await analytics_service.user_dashboard(
        db, current.actor, current.user.id, days, start_date, end_date,
    )


@router.get("/admin")
async def admin_dashboard(
    days: int = Query(30, ge=1, le=365),
    start_date: date | None = None,
    end_date: date | None = None,
    current: CurrentUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await analytics_service.admin_dashboard(
        db, current.actor, days, start_date, end_date,
    )
