"""Pytest configuration and fixtures for Tumbi tests."""

import os

# Must be set before tumbi.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable, Dict, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from tumbi.core.rate_limit import limiter
from tumbi.core.security import create_access_token
from tumbi.crud.user import user_crud
from tumbi.db.base import Base
from tumbi.db.session import enable_sqlite_foreign_keys, get_db
from tumbi.models.user import UserRole
from tumbi.schemas.user import UserCreate
from tumbi.services.storage_service import StorageError, get_object_store
# Import all models to ensure they are registered with Base.metadata
from tumbi.models import User, Listing, SavedListing, Conversation, Message  # noqa: F401

# Using StaticPool ensures all connections share the same in-memory database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

limiter.enabled = False


class FakeObjectStore:
    """In-memory stand-in for the S3 bucket."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.fail = False

    async def put_image(self, data: bytes, *, owner_id: int, filename: Optional[str],
                        content_type: str) -> str:
        if self.fail:
            raise StorageError("bucket unavailable")
        key = f"listings/{owner_id}/{len(self.objects) + 1}-{filename}"
        self.objects[key] = data
        return f"https://cdn.tumbi.test/{key}"


@pytest_asyncio.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """A fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        echo=False,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def app(session_factory, object_store):
    """The application wired to the test database and fake bucket."""
    from tumbi.main import create_application

    # Create app without the lifespan that connects to production database
    @asynccontextmanager
    async def test_lifespan(app):
        yield

    test_app = create_application()
    test_app.router.lifespan_context = test_lifespan

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    test_app.dependency_overrides[get_db] = override_get_db
    test_app.dependency_overrides[get_object_store] = lambda: object_store

    yield test_app

    test_app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(session_factory) -> Callable:
    """Factory: create a user directly in the database, return (user, auth headers)."""

    async def _make_user(
        email: str,
        name: str = "Abebe Kebede",
        phone: Optional[str] = None,
        role: UserRole = UserRole.USER,
        password: str = "secret123",
    ):
        async with session_factory() as session:
            user = await user_crud.create(
                session,
                obj_in=UserCreate(
                    name=name,
                    email=email,
                    phone=phone,
                    password=password,
                    location="Addis Ababa",
                ),
            )
            user.role = role
            await session.commit()
        token = create_access_token(subject=user.id)
        return user, {"x-access-token": token}

    return _make_user


@pytest_asyncio.fixture
async def seller(make_user):
    return await make_user("seller@tumbi.et", name="Selam Building Supply", phone="+251911000001")


@pytest_asyncio.fixture
async def buyer(make_user):
    return await make_user("buyer@tumbi.et", name="Dawit Haile", phone="+251911000002")


@pytest.fixture
def listing_payload() -> Callable[..., dict]:
    """Factory for a valid listing request body."""

    def _payload(**overrides) -> dict:
        payload = {
            "title": "Dangote Cement 50kg",
            "price": 950.0,
            "unit": "bag",
            "location": "Addis Ababa",
            "main_category": "Materials",
            "sub_category": "Cement",
            "description": "Ordinary Portland cement, delivered on site.",
            "image_urls": ["https://cdn.tumbi.test/listings/1/cement.jpg"],
            "contact_phone": "+251911000001",
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def create_listing(client: AsyncClient, listing_payload) -> Callable:
    """Factory: create a listing over the API and return its id."""

    async def _create(headers: dict, **overrides) -> int:
        response = await client.post("/api/listings", json=listing_payload(**overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()["listing_id"]

    return _create


@pytest.fixture
def listing_json() -> Callable[..., dict]:
    """Factory for listing objects as the API returns them (for mocked transports)."""

    def _listing(listing_id: int, price: float = 100.0, **overrides) -> dict:
        data = {
            "id": listing_id,
            "title": f"Listing {listing_id}",
            "price": price,
            "unit": "bag",
            "location": "Addis Ababa",
            "main_category": "Materials",
            "sub_category": "Cement",
            "description": "Portland cement",
            "image_urls": [f"https://cdn.tumbi.test/{listing_id}.jpg"],
            "created_at": "2026-01-01T08:00:00Z",
            "seller_id": 1,
        }
        data.update(overrides)
        return data

    return _listing


@pytest.fixture
def message_json() -> Callable[..., dict]:
    """Factory for message objects as the API returns them."""

    def _message(message_id: int, created_at: str, content: Optional[str] = None,
                 conversation_id: int = 1) -> dict:
        return {
            "id": message_id,
            "conversation_id": conversation_id,
            "sender_id": 1,
            "receiver_id": 2,
            "content": content or f"message {message_id}",
            "created_at": created_at,
        }

    return _message
