"""Database Session Manager — error translation and the readiness ping.

Tests:
    - A duplicate email committed through the manager surfaces as ConflictError
    - The session is usable again after the rollback
    - ping() reports latency for a live engine and None for a dead one
"""

import pytest
from sqlalchemy import select

from boothboss.core.errors import ConflictError, DatabaseError
from boothboss.db.base import Base
from boothboss.infrastructure.database import DatabaseSessionManager
from boothboss.models.user import User
from boothboss.services.auth_service import create_user


@pytest.fixture
async def manager(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path}/boothboss.db")
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.dispose()


async def test_duplicate_email_is_conflict(manager):
    async with manager.session() as db:
        await create_user(db, name="Ana", email="ana@example.com", password="secret123")
        await db.commit()

    with pytest.raises(ConflictError):
        async with manager.session() as db:
            db.add(User(name="Ana Again", email="ana@example.com", password_hash="x"))
            await db.commit()

    async with manager.session() as db:
        users = (await db.execute(select(User))).scalars().all()
    assert [u.email for u in users] == ["ana@example.com"]


async def test_conflict_is_not_a_database_error(manager):
    async with manager.session() as db:
        await create_user(db, name="Bo", email="bo@example.com", password="secret123")
        await db.commit()
    with pytest.raises(ConflictError) as exc:
        async with manager.session() as db:
            db.add(User(name="Bo", email="bo@example.com", password_hash="x"))
            await db.commit()
    assert not isinstance(exc.value, DatabaseError)
    assert exc.value.http_status == 409


async def test_ping(manager):
    assert await manager.ping() >= 0


async def test_ping_unreachable(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path}/missing/dir/db.sqlite")
    assert await manager.ping() is None
    await manager.dispose()
