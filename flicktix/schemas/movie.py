"""
Pydantic schemas for catalog listings and showtime availability.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

ALL_GENRES = "All"


class CatalogFilter(BaseModel):
    """
    Options recognised by the catalog listing.

    query: case-insensitive substring of the title or the genre
    genre: case-insensitive exact genre, or "All" for no genre filter
    include_upcoming: whether coming-soon movies are listed
    """

    query: str = ""
    genre: str = ALL_GENRES
    include_upcoming: bool = True


class ShowtimeSummary(BaseModel):
    id: int
    label: str
    starts_at: datetime
    capacity: int
    available: int

    model_config = {"from_attributes": True}


class MovieRead(BaseModel):
    id: int
    title: str
    genre: str
    duration_minutes: int
    rating: str = ""
    language: str = ""
    cinema: str = ""
    show_times: list[str] = Field(default_factory=list)
    is_trending: bool = False
    is_coming_soon: bool = False
    showtimes: list[ShowtimeSummary] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class MovieListResponse(BaseModel):
    movies: list[MovieRead]
    page: int
    page_size: int
    source: str  # store, cache, fallback


class ShowtimeResponse(BaseModel):
    id: int
    movie_id: int
    movie_title: Optional[str] = None
    label: str
    starts_at: datetime
    capacity: int
    booked: int
    available: int
    unit_price: int

    model_config = {"from_attributes": True}
