"""Service test fixtures — async DB, FastAPI test client and in-memory IO fakes.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager initialized for code paths that bypass get_db (readiness probe)
    - Mail and storage are swapped through dependency_overrides: nothing leaves the process
    - Media written by the local provider lands in the test's tmp_path

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - The blob provider fake always fails uploads so the local fallback path is reachable
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from boothboss.api.deps import get_mailer, get_storage
from boothboss.config import get_settings
from boothboss.core.domain_types import (
    StorageProviderName, SubscriptionDuration, SubscriptionTier, UserRole,
)
from boothboss.core.errors import MailDeliveryError, StorageError
from boothboss.core.repository_protocols import MailResult, OutgoingMail, SmtpConfig
from boothboss.db.base import Base
from boothboss.infrastructure.database import get_db, DatabaseSessionManager
from boothboss.infrastructure.security import create_access_token
from boothboss.infrastructure.storage import LocalStorageProvider, StorageRegistry
from boothboss.services.auth_service import create_user
from boothboss.services.subscription_service import change_tier
import boothboss.infrastructure.database as db_module
from boothboss.main import app

TEST_PASSWORD = "secret123"


class RecordingMailer:
    """MailTransport fake: keeps every message, optionally fails like SMTP would."""

    def __init__(self):
        self.sent: list[tuple[OutgoingMail, SmtpConfig | None]] = []
        self.fail = False

    async def send(self, mail: OutgoingMail, smtp: SmtpConfig | None = None) -> MailResult:
        if self.fail:
            raise MailDeliveryError("SMTP server error")
        self.sent.append((mail, smtp))
        return MailResult(message_id=f"test-{len(self.sent)}", delivered=True)

    def to(self, address: str) -> list[OutgoingMail]:
        return [mail for mail, _ in self.sent if mail.to == address]


class UnavailableBlobProvider:
    name = StorageProviderName.VERCEL.value

    def __init__(self):
        self.deleted: list[str] = []

    async def upload_file(self, data, filename, options):
        raise StorageError("blob store unavailable", self.name)

    async def file_exists(self, url_or_path):
        return False

    async def delete_file(self, url_or_path):
        self.deleted.append(url_or_path)
        return True

    async def get_file_info(self, url_or_path):
        return None

    async def list_files(self, prefix=""):
        return []


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def storage(tmp_path):
    return StorageRegistry({
        StorageProviderName.LOCAL: LocalStorageProvider(str(tmp_path / "public"), "uploads"),
        StorageProviderName.VERCEL: UnavailableBlobProvider(),
    })


@pytest.fixture
async def client(test_engine, test_session_factory, mailer, storage):
    """FastAPI test client with DB, mail and storage dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_storage] = lambda: storage

    # Patch db_manager for code that uses it directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def make_user(test_db):
    """Factory for verified accounts, committed so routes can see them."""
    async def _make(
        email: str, *, role: UserRole = UserRole.CUSTOMER,
        tier: SubscriptionTier | None = None, name: str = "Test User",
    ):
        user = await create_user(
            test_db, name=name, email=email, password=TEST_PASSWORD,
            role=role, verified=True,
        )
        if tier is not None:
            await change_tier(test_db, user, tier, SubscriptionDuration.MONTHLY)
        await test_db.commit()
        return user
    return _make


@pytest.fixture
async def customer(make_user):
    return await make_user("owner@example.com", name="Event Owner")


@pytest.fixture
async def admin(make_user):
    return await make_user(
        "admin@example.com", role=UserRole.ADMIN, tier=SubscriptionTier.ADMIN,
        name="Site Admin",
    )


def headers_for(user) -> dict[str, str]:
    settings = get_settings()
    token = create_access_token(
        user.id, user.role, settings.jwt_secret, settings.jwt_algorithm,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(customer):
    return headers_for(customer)


@pytest.fixture
def admin_headers(admin):
    return headers_for(admin)


@pytest.fixture
async def event_url(client, customer_headers):
    """An active event URL owned by `customer`, created through the API."""
    resp = await client.post(
        "/api/v1/event-urls",
        json={"url_path": "summer-party", "event_name": "Summer Party"},
        headers=customer_headers,
    )
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
def auth_headers():
    """Bearer headers for any user object."""
    return headers_for
