# tests/conftest.py
import os

# Set up test environment variables BEFORE any other imports
os.environ.setdefault("TESTING", "true")
default_test_url = "sqlite+aiosqlite:///./test.db"
os.environ.setdefault("TEST_DATABASE_URL", default_test_url)
os.environ.setdefault("DATABASE_URL", os.environ.get("TEST_DATABASE_URL", default_test_url))
os.environ.setdefault("GEMINI_API_KEY", "")

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings
from app.core.security import TokenService
from app.database import get_db
from app.main import app
from app.services.model_provider import ChatProvider, get_chat_provider
from models import Base
from tests.factories import DEFAULT_REPLY, UserFactory, persist

TEST_DATABASE_URL = os.environ["TEST_DATABASE_URL"]


@pytest_asyncio.fixture
async def test_db():
    """Create a test database session."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    TestSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()

    # Clean up - drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def test_settings():
    """Settings with a configured provider key."""
    return Settings(gemini_api_key="test_api_key", secret_key="test-secret-key")


@pytest.fixture
def mock_provider():
    """Mock model provider answering every message with DEFAULT_REPLY."""
    provider = MagicMock(spec=ChatProvider)
    provider.is_configured = True
    provider.send = AsyncMock(return_value=DEFAULT_REPLY)
    provider.status.return_value = {"provider": "mock", "configured": True}
    return provider


@pytest_asyncio.fixture
async def client(test_db, mock_provider):
    """Create a test client with database and provider overrides."""
    app.dependency_overrides[get_db] = lambda: test_db
    app.dependency_overrides[get_chat_provider] = lambda: mock_provider
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def authenticated_client(client, auth_headers):
    """Test client sending the test user's token on every request."""
    client.headers.update(auth_headers)
    yield client


# User fixtures
@pytest_asyncio.fixture
async def test_user(test_db):
    """Create a test user whose password is ``password123``."""
    return await persist(test_db, UserFactory(username="testuser", email="test@example.com"))


@pytest_asyncio.fixture
async def test_user_2(test_db):
    """Create a second test user."""
    return await persist(test_db, UserFactory(username="testuser2", email="test2@example.com"))


@pytest.fixture
def auth_headers(test_user):
    """Headers carrying a valid token for ``test_user``."""
    token = TokenService().create_access_token(test_user.id)
    return {"auth-token": token}


@pytest.fixture
def auth_headers_2(test_user_2):
    """Headers carrying a valid token for ``test_user_2``."""
    token = TokenService().create_access_token(test_user_2.id)
    return {"auth-token": token}
