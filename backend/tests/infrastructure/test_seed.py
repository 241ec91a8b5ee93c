"""Seed Script — default settings and the initial admin account.

Tests:
    - Running twice leaves exactly one default settings row and one admin
    - Without SEED_ADMIN_PASSWORD only the default settings are created
"""

import pytest
from sqlalchemy import select

from boothboss.config import Settings
from boothboss.db.base import Base
from boothboss.infrastructure.database import DatabaseSessionManager
from boothboss.infrastructure.security import verify_password
from boothboss.models.booth_settings import BoothSettings
from boothboss.models.subscription import Subscription
from boothboss.models.user import User
from boothboss.seed import seed


@pytest.fixture
async def database_url(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path}/seed.db"
    manager = DatabaseSessionManager(url)
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await manager.dispose()
    return url


async def _rows(url, model):
    manager = DatabaseSessionManager(url)
    async with manager.session() as db:
        rows = (await db.execute(select(model))).scalars().all()
    await manager.dispose()
    return rows


async def test_seed_is_idempotent(database_url):
    app_settings = Settings(
        database_url=database_url,
        seed_admin_email=" Admin@Booth.test ",
        seed_admin_password="first-password",
    )
    await seed(app_settings)
    await seed(app_settings.model_copy(update={"seed_admin_password": "second-password"}))

    settings_rows = await _rows(database_url, BoothSettings)
    assert len(settings_rows) == 1
    assert settings_rows[0].is_default is True
    assert settings_rows[0].user_id is None

    users = await _rows(database_url, User)
    assert [u.email for u in users] == ["admin@booth.test"]
    assert users[0].role == "ADMIN"
    assert verify_password("first-password", users[0].password_hash)

    subscriptions = await _rows(database_url, Subscription)
    assert [s.tier for s in subscriptions] == ["ADMIN"]


async def test_seed_without_admin_password(database_url):
    await seed(Settings(database_url=database_url, seed_admin_password=""))
    assert len(await _rows(database_url, BoothSettings)) == 1
    assert await _rows(database_url, User) == []
