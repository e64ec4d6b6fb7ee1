"""
Built-in catalog served whenever the store cannot provide one.
"""

from flicktix.schemas.movie import MovieRead

FALLBACK_MOVIES: tuple[MovieRead, ...] = (
    MovieRead(
        id=1,
        title="Galactic Odyssey",
        genre="Sci-Fi",
        duration_minutes=132,
        rating="PG-13",
        language="English",
        cinema="Screen 1 · City Mall",
        show_times=["11:30", "14:15", "18:00", "21:30"],
        is_trending=True,
    ),
    MovieRead(
        id=2,
        title="Laugh Out Loud",
        genre="Comedy",
        duration_minutes=105,
        rating="12A",
        language="English",
        cinema="Screen 3 · Grand Plaza",
        show_times=["10:00", "13:00", "16:00", "19:15"],
    ),
    MovieRead(
        id=3,
        title="Midnight Chase",
        genre="Action",
        duration_minutes=118,
        rating="15",
        language="English",
        cinema="Screen 2 · City Mall",
        show_times=["12:45", "17:10", "20:45"],
        is_trending=True,
    ),
    MovieRead(
        id=4,
        title="Autumn Letters",
        genre="Drama",
        duration_minutes=124,
        rating="PG",
        language="English",
        cinema="Screen 5 · Central Cinemas",
        show_times=["09:30", "13:15", "18:20"],
    ),
    MovieRead(
        id=5,
        title="Skyline Dreams",
        genre="Drama",
        duration_minutes=110,
        rating="PG",
        language="English",
        cinema="Screen 4 · Grand Plaza",
        is_coming_soon=True,
    ),
    MovieRead(
        id=6,
        title="Quantum Heist",
        genre="Sci-Fi",
        duration_minutes=140,
        rating="15",
        language="English",
        cinema="Screen 6 · IMAX",
        is_trending=True,
        is_coming_soon=True,
    ),
)


def fallback_movies() -> list[MovieRead]:
    # Copies, so callers can't mutate the shared tuple entries
    return [movie.model_copy(deep=True) for movie in FALLBACK_MOVIES]
