"""
Pytest configuration and fixtures for the Happy API tests.
"""
from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from happy.auth.jwt import JWTService
from happy.auth.models import User
from happy.auth.passwords import hash_password
from happy.config import Settings, get_settings
from happy.images.storage import InMemoryStorageProvider, get_storage_provider
from happy.main import app
from happy.orphanages.models import Image, Orphanage
from happy.shared.database import Base, commit, get_db_session, rollback

TEST_PASSWORD = "correct-horse-battery"

# Smallest valid PNG (1x1 transparent pixel)
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000010000000108060000001f15c489"
    "0000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        app_env="dev",
        debug=False,
        database_url="sqlite+aiosqlite:///:memory:",
        app_key="test-app-key-for-signing-tokens-only-in-tests",
        jwt_algorithm="HS256",
        jwt_expire_minutes=None,
        storage_backend="local",
        public_base_url="http://testserver",
        max_image_bytes=1024,
    )


@pytest_asyncio.fixture
async def db_engine(test_settings: Settings) -> AsyncGenerator[Any, None]:
    """Create test database engine."""
    engine = create_async_engine(
        test_settings.database_url,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: Any) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
def storage() -> InMemoryStorageProvider:
    """In-memory image storage."""
    return InMemoryStorageProvider()


@pytest.fixture
def jwt_service(test_settings: Settings) -> JWTService:
    """Create JWT service with test settings."""
    return JWTService(settings=test_settings)


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create test user in database."""
    user = User(
        name="Test Admin",
        email="admin@example.com",
        password_hash=hash_password(TEST_PASSWORD, iterations=1_000),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def valid_token(jwt_service: JWTService, test_user: User) -> str:
    """Create a valid token for the test user."""
    return jwt_service.create_token(test_user)


@pytest.fixture
def auth_headers(valid_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {valid_token}"}


@pytest.fixture
def expired_token(test_settings: Settings, test_user: User) -> str:
    """Create expired token."""
    payload = {
        "id": test_user.id,
        "name": test_user.name,
        "email": test_user.email,
        "exp": datetime.now(timezone.utc) - timedelta(hours=1),
    }
    return jwt.encode(
        payload,
        test_settings.app_key,
        algorithm=test_settings.jwt_algorithm,
    )


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def orphanage_form() -> dict[str, str]:
    """Valid listing fields as the front-end posts them."""
    return {
        "name": "Lar das Meninas",
        "latitude": "-27.2092052",
        "longitude": "-49.6401092",
        "about": "Presta assistencia a criancas de 06 a 15 anos.",
        "instructions": "Venha como se sentir a vontade e traga muito amor.",
        "opening_hours": "Das 8h as 18h",
        "open_on_weekends": "true",
    }


async def _add_orphanage(
    session: AsyncSession,
    storage: InMemoryStorageProvider,
    name: str,
    pending: bool,
    image_keys: tuple[str, ...] = (),
) -> Orphanage:
    for key in image_keys:
        await storage.save(key, PNG_BYTES, "image/png")
    orphanage = Orphanage(
        name=name,
        latitude=-27.2,
        longitude=-49.6,
        about=f"About {name}",
        instructions="Call ahead",
        opening_hours="9h-17h",
        open_on_weekends=False,
        pending=pending,
        images=[Image(path=key) for key in image_keys],
    )
    session.add(orphanage)
    await session.commit()
    await session.refresh(orphanage)
    return orphanage


@pytest_asyncio.fixture
async def approved_orphanage(
    db_session: AsyncSession,
    storage: InMemoryStorageProvider,
) -> Orphanage:
    """An approved listing with two stored images."""
    return await _add_orphanage(
        db_session,
        storage,
        "Approved Home",
        pending=False,
        image_keys=("a1-front.png", "a2-garden.png"),
    )


@pytest_asyncio.fixture
async def pending_orphanage(
    db_session: AsyncSession,
    storage: InMemoryStorageProvider,
) -> Orphanage:
    """A listing still waiting for approval."""
    return await _add_orphanage(
        db_session,
        storage,
        "Pending Home",
        pending=True,
        image_keys=("p1-door.png",),
    )


@pytest_asyncio.fixture
async def async_client(
    db_session: AsyncSession,
    test_settings: Settings,
    storage: InMemoryStorageProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API tests."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield db_session
            await commit(db_session)
        except Exception:
            await rollback(db_session)
            raise

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_storage_provider] = lambda: storage

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
