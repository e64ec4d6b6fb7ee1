from flicktix.models.user import User
from flicktix.models.movie import Movie
from flicktix.models.showtime import Showtime
from flicktix.models.booking import Booking, PaymentMethod

__all__ = ["User", "Movie", "Showtime", "Booking", "PaymentMethod"]
