"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh SQLite database file (aiosqlite) with the schema
created up front. Redis is disabled and image uploads go to an in-memory
fake, so the suite needs no external services.
"""

import os

os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.core.security import create_access_token, hash_password
from app.models.user import User
from app.models.event import Event
from app.services.image_service import get_image_uploader


class FakeImageUploader:
    """Records uploads instead of sending them to S3."""

    def __init__(self):
        self.uploads = []

    async def upload(self, file) -> str:
        data = await file.read()
        self.uploads.append((file.filename, file.content_type, data))
        return f"https://images.test/DevEvent/upload-{len(self.uploads)}.png"


@pytest.fixture
def event_payload() -> dict:
    """A complete, valid JSON event body."""
    return {
        "title": "PyCon Berlin 2025",
        "description": "Three days of talks and sprints about Python.",
        "overview": "The community conference for Pythonistas in Germany.",
        "image": "https://images.test/pycon.png",
        "venue": "BCC Berlin",
        "location": "Berlin, Germany",
        "date": "2025-11-7",
        "time": "09:30",
        "mode": "hybrid",
        "audience": "Python developers",
        "agenda": ["Keynote", "Talks", "Sprints"],
        "organizer": "Python Software Verband",
        "tags": ["python", "conference", "python"],
    }


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def image_uploader() -> FakeImageUploader:
    return FakeImageUploader()


@pytest_asyncio.fixture(scope="function")
async def client(
    db_session: AsyncSession, image_uploader: FakeImageUploader
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the DB session and image uploader overridden."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_uploader] = lambda: image_uploader

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user in the database."""
    user = User(
        name="Test User",
        email="test@example.com",
        hashed_password=hash_password("testpassword123"),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def auth_token(test_user: User) -> str:
    """Generate a JWT token for the test user."""
    return create_access_token(data={"sub": str(test_user.id)})


@pytest_asyncio.fixture
async def auth_headers(auth_token: str) -> dict:
    """Authorization headers with Bearer token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession) -> Event:
    """An already-normalized event stored directly in the database."""
    event = Event(
        title="Test Conf",
        slug="test-conf",
        description="A conference used throughout the tests.",
        overview="Overview of the test conference.",
        image="https://images.test/test-conf.png",
        venue="Test Hall",
        location="Test City",
        date="2025-06-01",
        time="10:00",
        mode="offline",
        audience="Testers",
        agenda=["Opening", "Closing"],
        organizer="Test Org",
        tags=["testing"],
    )
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event
