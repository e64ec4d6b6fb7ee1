"""
Catalog Store: movie listings and showtime availability.

Read path, in order:
  1. Redis snapshot (if enabled and reachable)
  2. The database
  3. The built-in fallback catalog, when the database is unreachable or
     holds no movies

Listing never fails because of the store. Filtering runs in-process over
whichever snapshot was used, so the fallback honours the same filters as
live data. Showtime availability is always read from the database.
"""

from typing import Iterable, Iterator

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from flicktix.core.config import get_settings
from flicktix.core.exceptions import ShowtimeNotFoundError, translate_store_errors
from flicktix.core.logging import get_logger
from flicktix.core.metrics import record_catalog_read
from flicktix.models.movie import Movie
from flicktix.models.showtime import Showtime
from flicktix.schemas.movie import ALL_GENRES, CatalogFilter, MovieRead
from flicktix.services.cache_service import get_cached_catalog, set_cached_catalog
from flicktix.services.fallback_catalog import fallback_movies

logger = get_logger(__name__)
settings = get_settings()

SOURCE_STORE = "store"
SOURCE_CACHE = "cache"
SOURCE_FALLBACK = "fallback"


def matches(movie: MovieRead, filters: CatalogFilter) -> bool:
    if not filters.include_upcoming and movie.is_coming_soon:
        return False

    query = filters.query.strip().casefold()
    if query and query not in movie.title.casefold() and query not in movie.genre.casefold():
        return False

    genre = filters.genre.strip()
    if genre and genre.casefold() != ALL_GENRES.casefold():
        return movie.genre.casefold() == genre.casefold()
    return True


class Showings:
    """Lazy filtered view over one catalog snapshot. Iterate as often as needed."""

    def __init__(self, movies: Iterable[MovieRead], filters: CatalogFilter, source: str):
        self._movies = list(movies)
        self.filters = filters
        self.source = source

    def __iter__(self) -> Iterator[MovieRead]:
        return (movie for movie in self._movies if matches(movie, self.filters))

    def __repr__(self) -> str:
        return f"<Showings(source={self.source}, snapshot={len(self._movies)})>"


async def _read_store(db: AsyncSession) -> list[MovieRead]:
    result = await db.execute(select(Movie).order_by(Movie.id))
    return [MovieRead.model_validate(movie) for movie in result.scalars().all()]


async def load_catalog(db: AsyncSession) -> tuple[list[MovieRead], str]:
    """Return the current catalog snapshot and where it came from."""
    cached = await get_cached_catalog()
    if cached:
        return [MovieRead.model_validate(movie) for movie in cached], SOURCE_CACHE

    try:
        movies = await _read_store(db)
    except (SQLAlchemyError, OSError) as e:
        # Leave the session usable for the request's final commit
        await db.rollback()
        logger.warning("catalog_fallback", reason="store_unavailable", error=str(e))
        return fallback_movies(), SOURCE_FALLBACK

    if not movies:
        logger.info("catalog_fallback", reason="store_empty")
        return fallback_movies(), SOURCE_FALLBACK

    await set_cached_catalog([movie.model_dump(mode="json") for movie in movies])
    return movies, SOURCE_STORE


async def list_showings(db: AsyncSession, filters: CatalogFilter | None = None) -> Showings:
    movies, source = await load_catalog(db)
    record_catalog_read(source)
    return Showings(movies, filters or CatalogFilter(), source)


async def get_showtime(db: AsyncSession, showtime_id: int) -> Showtime:
    """Real-time availability for one showtime. Never served from cache."""
    with translate_store_errors(settings.STORE_RETRY_AFTER_SECONDS):
        result = await db.execute(
            select(Showtime)
            .options(joinedload(Showtime.movie))
            .where(Showtime.id == showtime_id)
        )
        showtime = result.scalar_one_or_none()

    if not showtime:
        raise ShowtimeNotFoundError(showtime_id)
    return showtime
