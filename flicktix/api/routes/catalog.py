"""
Catalog endpoints: movie listings and showtime availability.
"""

from itertools import islice

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from flicktix.db.session import get_db
from flicktix.schemas.movie import ALL_GENRES, CatalogFilter, MovieListResponse, ShowtimeResponse
from flicktix.services.catalog_service import list_showings, get_showtime

router = APIRouter(tags=["Catalog"])


@router.get("/movies", response_model=MovieListResponse)
async def list_movies_endpoint(
    q: str = Query("", max_length=100, description="Title or genre substring"),
    genre: str = Query(ALL_GENRES, max_length=50),
    include_upcoming: bool = Query(True),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """
    List movies, now showing and coming soon.
    Served from the built-in catalog when the store is down or empty.
    """
    showings = await list_showings(
        db, CatalogFilter(query=q, genre=genre, include_upcoming=include_upcoming)
    )
    offset = (page - 1) * page_size
    return MovieListResponse(
        movies=list(islice(showings, offset, offset + page_size)),
        page=page,
        page_size=page_size,
        source=showings.source,
    )


@router.get("/showtimes/{showtime_id}", response_model=ShowtimeResponse)
async def get_showtime_endpoint(showtime_id: int, db: AsyncSession = Depends(get_db)):
    """Seats left for one showtime. Not cached (needs real-time seat counts)."""
    return await get_showtime(db, showtime_id)
