"""Subscription Routes — public tier table and the signed-in user's plan."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.api.deps import CurrentUser, get_current_user
from boothboss.core.subscription_features import compare_tiers, format_price
from boothboss.infrastructure.database import get_db
from boothboss.services.subscription_service import (
    get_or_create_subscription, summarize_subscription,
)

router = APIRouter(prefix="/api/v1/subscription", tags=["subscription"])


@router.get("/tiers")
async def list_tiers():
    tiers = compare_tiers()
    for row in tiers:
        row["display_pricing"] = {d: format_price(c) for d, c in row["pricing"].items()}
    return {"tiers": tiers}


@router.get("")
async def my_subscription(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    subscription = await get_or_create_subscription(db, current.user)
    await db.commit()
    return summarize_subscription(subscription, current.user)
