"""Seed Script — system default settings and the initial admin account.

Usage:
    python -m boothboss.seed

Invariants:
    - Idempotent: existing default settings and an existing admin are left untouched
    - The admin is created only when SEED_ADMIN_PASSWORD is set
"""

import asyncio
import logging

from boothboss.config import Settings, get_settings
from boothboss.core.domain_types import SubscriptionDuration, SubscriptionTier, UserRole
from boothboss.infrastructure.database import DatabaseSessionManager
from boothboss.infrastructure.observability import setup_logging
from boothboss.services.auth_service import create_user, get_user_by_email
from boothboss.services.settings_service import ensure_default_settings
from boothboss.services.subscription_service import change_tier

logger = logging.getLogger(__name__)


async def seed(app_settings: Settings) -> None:
    manager = DatabaseSessionManager(app_settings.database_url)
    async with manager.session() as db:
        await ensure_default_settings(db)

        email = app_settings.seed_admin_email.strip().lower()
        if not app_settings.seed_admin_password:
            logger.warning("SEED_ADMIN_PASSWORD not set, skipping admin account")
        elif await get_user_by_email(db, email):
            logger.info("Admin account already exists")
        else:
            admin = await create_user(
                db, name="BoothBoss Admin", email=email,
                password=app_settings.seed_admin_password,
                role=UserRole.ADMIN, verified=True,
            )
            await change_tier(db, admin, SubscriptionTier.ADMIN, SubscriptionDuration.ANNUAL)
            logger.info("Admin account created", extra={"user_id": str(admin.id)})
        await db.commit()
    await manager.dispose()


def main() -> None:
    app_settings = get_settings()
    setup_logging(app_settings.log_level, app_settings.log_format)
    asyncio.run(seed(app_settings))


if __name__ == "__main__":
    main()
