"""
Pytest fixtures for test database, client, authentication and catalog data.

Every test gets its own SQLite database file, so tests are isolated and
several sessions can hit the same database concurrently. Redis is disabled;
tests that exercise caching patch in a fake client.
"""

import os

os.environ["REDIS_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./flicktix_unused.db"
os.environ["ENVIRONMENT"] = "test"

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from flicktix.main import app
from flicktix.db.base import Base
from flicktix.db.session import get_db
from flicktix.core.security import create_access_token, hash_password
from flicktix.models.user import User
from flicktix.models.movie import Movie
from flicktix.models.showtime import Showtime


def make_get_db(session_factory):
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override_get_db


@pytest_asyncio.fixture
async def engine(tmp_path):
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'flicktix_test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get a fresh, committing session."""
    app.dependency_overrides[get_db] = make_get_db(session_factory)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    user = User(
        email="test@example.com",
        hashed_password=hash_password("testpassword123"),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    token = create_access_token(data={"sub": test_user.id})
    return {"Authorization": f"Bearer {token}"}


async def add_movie(db: AsyncSession, showtimes: list[dict] = (), **fields) -> Movie:
    start = datetime.now(timezone.utc) + timedelta(days=1)
    movie = Movie(
        **{
            "title": "Untitled",
            "genre": "Drama",
            "duration_minutes": 100,
            "rating": "PG",
            "language": "English",
            "cinema": "Screen 1 · City Mall",
            **fields,
        },
        showtimes=[
            Showtime(starts_at=start + timedelta(hours=3 * offset), **columns)
            for offset, columns in enumerate(showtimes)
        ],
    )
    db.add(movie)
    await db.commit()
    return movie


@pytest_asyncio.fixture
async def catalog(db_session: AsyncSession) -> dict[str, Movie]:
    """
    Three store-backed movies:
      comedy   - two showtimes, 100 seats and 3 seats, 8 per ticket
      scifi    - one showtime, 50 seats, 12 per ticket
      upcoming - coming soon, no showtimes
    """
    comedy = await add_movie(
        db_session,
        title="Laugh Out Loud",
        genre="Comedy",
        duration_minutes=105,
        rating="12A",
        cinema="Screen 3 · Grand Plaza",
        showtimes=[
            {"label": "16:00", "capacity": 100, "unit_price": 8},
            {"label": "19:15", "capacity": 3, "unit_price": 8},
        ],
    )
    scifi = await add_movie(
        db_session,
        title="Galactic Odyssey",
        genre="Sci-Fi",
        duration_minutes=132,
        is_trending=True,
        showtimes=[{"label": "21:30", "capacity": 50, "unit_price": 12}],
    )
    upcoming = await add_movie(
        db_session,
        title="Skyline Dreams",
        genre="Drama",
        duration_minutes=110,
        is_coming_soon=True,
    )
    return {"comedy": comedy, "scifi": scifi, "upcoming": upcoming}


@pytest_asyncio.fixture
async def big_showtime(catalog) -> Showtime:
    return catalog["comedy"].showtimes[0]


@pytest_asyncio.fixture
async def small_showtime(catalog) -> Showtime:
    """Capacity 3, nothing booked yet."""
    return catalog["comedy"].showtimes[1]
