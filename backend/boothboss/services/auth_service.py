"""Auth Service — registration, email verification, login and token resolution.

Invariants:
    - Emails are unique (case-insensitive; stored lowercased)
    - Usernames derive from the email local part with a numeric suffix until unique
    - New users start unverified with a 24h verification token and a FREE trial
    - Login order: unknown user / bad password → 401, unverified → 403
    - resend_verification answers the same way whether or not the email exists
    - Registration succeeds even when the verification/welcome mail cannot be delivered

Design Decisions:
    - The system admin (ADMIN_EMAIL) is recognized by email on every request rather
      than by a stored flag, so promoting the configured admin needs no migration
"""

import logging
import re
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boothboss.config import Settings
from boothboss.core.domain_types import UserRole, ensure_utc
from boothboss.core.errors import (
    AuthenticationError, ConflictError, EmailNotVerifiedError,
    MailDeliveryError, ValidationFailedError,
)
from boothboss.core.permissions import Actor
from boothboss.core.repository_protocols import MailTransport
from boothboss.infrastructure.security import (
    create_access_token, decode_access_token, generate_verification_token,
    hash_password, verify_password,
)
from boothboss.models.user import User
from boothboss.schemas.auth import RegisterRequest
from boothboss.services import notifications
from boothboss.services.subscription_service import build_trial_subscription

logger = logging.getLogger(__name__)

_USERNAME_CHARS = re.compile(r"[^a-z0-9_-]+")


def actor_for(user: User, app_settings: Settings) -> Actor:
    role = UserRole(user.role) if user.role else UserRole.CUSTOMER
    is_system_admin = bool(
        app_settings.admin_email
        and user.email.lower() == app_settings.admin_email.strip().lower()
    )
    return Actor(id=user.id, role=role, is_system_admin=is_system_admin)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def generate_unique_username(db: AsyncSession, email: str) -> str:
    base = _USERNAME_CHARS.sub("", email.split("@", 1)[0].lower())[:24] or "user"
    if len(base) < 3:
        base = f"{base}user"
    candidate, counter = base, 0
    while True:
        result = await db.execute(select(User.id).where(User.username == candidate))
        if result.scalar_one_or_none() is None:
            return candidate
        counter += 1
        candidate = f"{base}{counter}"


async def create_user(
    db: AsyncSession, *, name: str, email: str, password: str,
    role: UserRole = UserRole.CUSTOMER, verified: bool = False,
    verification_hours: int = 24, **profile: str | None,
) -> User:
    """Insert a user with a trial subscription (no commit, no email)."""
    if await get_user_by_email(db, email):
        raise ConflictError("An account with this email already exists", "email")
    now = datetime.now(timezone.utc)
    user = User(
        name=name,
        email=email.strip().lower(),
        username=await generate_unique_username(db, email),
        password_hash=hash_password(password),
        role=role.value,
        email_verified_at=now if verified else None,
        verification_token=None if verified else generate_verification_token(),
        verification_token_expires=(
            None if verified else now + timedelta(hours=verification_hours)
        ),
        **profile,
    )
    user.subscription = build_trial_subscription(now)
    db.add(user)
    await db.flush()
    return user


async def register(
    db: AsyncSession, body: RegisterRequest,
    mailer: MailTransport, app_settings: Settings,
) -> tuple[User, bool]:
    """Create an unverified account and send verification + welcome emails.

    Returns the user and whether the verification email went out.
    """
    user = await create_user(
        db, name=body.name, email=body.email, password=body.password,
        verification_hours=app_settings.verification_token_hours,
        organization_name=body.organization_name,
        organization_size=body.organization_size,
        industry=body.industry,
    )
    await db.commit()
    await db.refresh(user)
    logger.info("User registered", extra={"user_id": str(user.id)})

    email_sent = True
    try:
        await notifications.send_verification_email(
            mailer, app_settings, user.email, user.name, user.verification_token,
        )
        await notifications.send_welcome_email(
            mailer, app_settings, user.email, user.name,
            ensure_utc(user.subscription.trial_end_date),
        )
    except MailDeliveryError as e:
        email_sent = False
        logger.warning(
            f"Registration email not delivered: {e.message}",
            extra={"user_id": str(user.id)},
        )
    return user, email_sent


async def verify_email(db: AsyncSession, token: str) -> User:
    result = await db.execute(select(User).where(User.verification_token == token))
    user = result.scalar_one_or_none()
    if user is None:
        raise ValidationFailedError("Invalid verification token", "token")
    expires = ensure_utc(user.verification_token_expires)
    if expires is None or expires < datetime.now(timezone.utc):
        raise ValidationFailedError("Verification token has expired", "token")
    user.email_verified_at = datetime.now(timezone.utc)
    user.verification_token = None
    user.verification_token_expires = None
    await db.commit()
    logger.info("Email verified", extra={"user_id": str(user.id)})
    return user


async def resend_verification(
    db: AsyncSession, email: str, mailer: MailTransport, app_settings: Settings,
) -> None:
    user = await get_user_by_email(db, email)
    if user is None or user.email_verified:
        return
    user.verification_token = generate_verification_token()
    user.verification_token_expires = datetime.now(timezone.utc) + timedelta(
        hours=app_settings.verification_token_hours,
    )
    await db.commit()
    await notifications.send_verification_email(
        mailer, app_settings, user.email, user.name, user.verification_token,
    )


async def login(
    db: AsyncSession, email: str, password: str, app_settings: Settings,
) -> tuple[User, str]:
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid email or password")
    if not user.email_verified:
        raise EmailNotVerifiedError()
    if not user.role:
        user.role = UserRole.CUSTOMER.value
        await db.commit()
    token = create_access_token(
        user.id, user.role, app_settings.jwt_secret,
        app_settings.jwt_algorithm, app_settings.jwt_expire_minutes,
    )
    logger.info("User logged in", extra={"user_id": str(user.id)})
    return user, token


async def user_from_token(
    db: AsyncSession, token: str, app_settings: Settings,
) -> User:
    claims = decode_access_token(token, app_settings.jwt_secret, app_settings.jwt_algorithm)
    user = await db.get(User, claims["sub"])
    if user is None:
        raise AuthenticationError("Account no longer exists")
    return user
