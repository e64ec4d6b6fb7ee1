from flicktix.schemas.user import UserCreate, UserResponse, UserLogin, Token
from flicktix.schemas.movie import (
    CatalogFilter, MovieRead, MovieListResponse, ShowtimeSummary, ShowtimeResponse,
)
from flicktix.schemas.booking import BookingCreate, BookingResponse

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token",
    "CatalogFilter", "MovieRead", "MovieListResponse", "ShowtimeSummary", "ShowtimeResponse",
    "BookingCreate", "BookingResponse",
]
