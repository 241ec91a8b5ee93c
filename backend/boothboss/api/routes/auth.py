"""Auth Routes — registration, email verification, login and the current user.

Invariants:
    - Responses carry UserPublic only (no hashes, no tokens other than the JWT)
    - resend-verification answers identically for known and unknown emails
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.api.deps import CurrentUser, get_app_settings, get_current_user, get_mailer
from boothboss.config import Settings
from boothboss.core.errors import MailDeliveryError
from boothboss.core.repository_protocols import MailTransport
from boothboss.infrastructure.database import get_db
from boothboss.schemas.auth import (
    LoginRequest, RegisterRequest, ResendVerificationRequest,
    TokenResponse, UserPublic, VerifyEmailRequest,
)
from boothboss.services import auth_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    mailer: MailTransport = Depends(get_mailer),
    app_settings: Settings = Depends(get_app_settings),
):
    user, email_sent = await auth_service.register(db, body, mailer, app_settings)
    return {
        "user": UserPublic.model_validate(user),
        "verification_email_sent": email_sent,
        "message": "Account created. Check your email to verify your address.",
    }


@router.post("/verify-email")
async def verify_email(body: VerifyEmailRequest, db: AsyncSession = Depends(get_db)):
    user = await auth_service.verify_email(db, body.token)
    return {"verified": True, "user": UserPublic.model_validate(user)}


@router.post("/resend-verification")
async def resend_verification(
    body: ResendVerificationRequest,
    db: AsyncSession = Depends(get_db),
    mailer: MailTransport = Depends(get_mailer),
    app_settings: Settings = Depends(get_app_settings),
):
    try:
        await auth_service.resend_verification(db, body.email, mailer, app_settings)
    except MailDeliveryError as e:
        logger.warning(f"Verification resend failed: {e.message}")
    return {"message": "If that account exists and is unverified, a new link has been sent."}


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
):
    user, token = await auth_service.login(db, body.email, body.password, app_settings)
    return TokenResponse(access_token=token, user=UserPublic.model_validate(user))


@router.get("/me")
async def me(current: CurrentUser = Depends(get_current_user)):
    return {
        "user": UserPublic.model_validate(current.user),
        "is_admin": current.actor.is_admin,
    }
