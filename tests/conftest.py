"""Shared test fixtures and configuration."""
import pytest
import os
from pathlib import Path
from typing import List
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RESTAURANT_NAME", "QuickBite")
os.environ.setdefault("CURRENCY", "RM")

from quickbite.main import app
from quickbite.core.config import settings
from quickbite.core.dependencies import get_vision_client
from quickbite.db.database import get_db
from quickbite.db.models import Base
from quickbite.db.seed import seed_menu
from quickbite.services.cart import session_cart
from quickbite.services.chat.channel import BufferedChannel
from quickbite.services.menu.repository import MenuRepository
from quickbite.services.menu.in_memory_menu import InMemoryMenuProvider
from quickbite.services.persistence.users import UserPersistenceService
from quickbite.services.vision.tagging import VisionClient


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

MEMBER_EMAIL = "member@example.com"
MEMBER_PASSWORD = "member-pass"


class FakeVisionClient(VisionClient):
    """Vision client returning fixed tags."""

    def __init__(self, tags: List[str]):
        self.tags = tags
        self.calls: List[str] = []

    async def extract_tags(self, image_ref: str) -> List[str]:
        self.calls.append(image_ref)
        return list(self.tags)


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def test_menu_path():
    """Return path to test menu YAML file."""
    return Path(__file__).parent / "fixtures" / "test_menu.yaml"


@pytest.fixture
async def test_db(test_db_engine, test_menu_path):
    """Create test database session seeded with the test menu and admin account."""
    async_session = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        await seed_menu(session, test_menu_path)
        await UserPersistenceService(session).ensure_admin(settings.admin_email, settings.admin_password)
        yield session


@pytest.fixture
async def member(test_db):
    """A registered member account."""
    return await UserPersistenceService(test_db).create_user(
        MEMBER_EMAIL, "Test Member", MEMBER_PASSWORD, address="1 Test Street"
    )


@pytest.fixture
def test_menu_repository(test_menu_path):
    """Create menu repository with test data."""
    provider = InMemoryMenuProvider(menu_file=str(test_menu_path))
    return MenuRepository(provider)


@pytest.fixture
def channel():
    return BufferedChannel()


@pytest.fixture
def vision_client_factory():
    """Build a vision client that returns the given tags."""
    return FakeVisionClient


@pytest.fixture
def fake_vision_client(vision_client_factory):
    return vision_client_factory(["tiramisu"])


@pytest.fixture
def override_get_db(test_db):
    """Override get_db dependency with test database."""
    async def _override_get_db():
        yield test_db
    return _override_get_db


@pytest.fixture
async def client(override_get_db, fake_vision_client):
    """HTTP client for the app with the test database and a fake vision client."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_vision_client] = lambda: fake_vision_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as http_client:
        yield http_client

    # Clear overrides
    app.dependency_overrides.clear()


@pytest.fixture
async def member_client(client, member):
    """Client signed in as the test member."""
    response = await client.post(
        "/api/auth/login",
        json={"email": MEMBER_EMAIL, "password": MEMBER_PASSWORD},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
async def admin_client(client):
    """Client signed in as the seeded admin."""
    response = await client.post(
        "/api/auth/login",
        json={"email": settings.admin_email, "password": settings.admin_password},
    )
    assert response.status_code == 200
    return client


@pytest.fixture(autouse=True)
def clean_auth_sessions():
    """Clean up authentication sessions before and after tests."""
    from quickbite.api import auth
    auth._sessions.clear()
    yield
    auth._sessions.clear()


@pytest.fixture(autouse=True)
def clean_carts():
    """Clean up cart storage before and after tests."""
    session_cart._carts.clear()
    yield
    session_cart._carts.clear()
