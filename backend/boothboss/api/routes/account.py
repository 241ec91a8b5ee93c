"""Account Routes — the signed-in user's profile, password and first-run setup."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.api.deps import CurrentUser, get_app_settings, get_current_user
from boothboss.config import Settings
from boothboss.infrastructure.database import get_db
from boothboss.schemas.account import AccountSetupRequest, AccountUpdate, PasswordChange
from boothboss.services import account_service

router = APIRouter(prefix="/api/v1/account", tags=["account"])


@router.get("")
async def get_account(
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
):
    return await account_service.get_account(db, current.user, app_settings)


@router.patch("")
async def update_account(
    body: AccountUpdate,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
):
    user = await account_service.update_account(db, current.user, body)
    return {"user": account_service.profile_dict(user, app_settings)}


@router.post("/password")
async def change_password(
    body: PasswordChange,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await account_service.change_password(db, current.user, body)
    return {"success": True}


@router.post("/setup", status_code=status.HTTP_201_CREATED)
async def account_setup(
    body: AccountSetupRequest,
    current: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await account_service.account_setup(db, current.actor, current.user, body)
