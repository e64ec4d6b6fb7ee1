"""
Showtime model with seat capacity accounting.

Key design decisions:
- `booked` is a counter on the showtime row so the capacity check and the
  increment happen in one guarded UPDATE (see booking_service)
- CHECK constraints hold 0 <= booked <= capacity at the DB level as the
  final safety net
- `unit_price` lives on the showtime so matinee pricing needs no schema change
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, CheckConstraint, inspect
from sqlalchemy.orm import relationship

from flicktix.core.config import get_settings
from flicktix.db.base import Base, TimestampMixin

settings = get_settings()


class Showtime(Base, TimestampMixin):
    __tablename__ = "showtimes"

    id = Column(Integer, primary_key=True, index=True)
    movie_id = Column(Integer, ForeignKey("movies.id"), nullable=False, index=True)
    label = Column(String(20), nullable=False)  # e.g. "18:00"
    starts_at = Column(DateTime(timezone=True), nullable=False)
    capacity = Column(Integer, nullable=False)
    booked = Column(Integer, nullable=False, default=0)
    unit_price = Column(Integer, nullable=False, default=lambda: settings.TICKET_PRICE)

    movie = relationship("Movie", back_populates="showtimes")

    __table_args__ = (
        CheckConstraint("capacity > 0", name="check_showtime_capacity_positive"),
        CheckConstraint("booked >= 0", name="check_showtime_booked_non_negative"),
        CheckConstraint("booked <= capacity", name="check_showtime_booked_lte_capacity"),
        CheckConstraint("unit_price >= 0", name="check_showtime_unit_price_non_negative"),
        Index("ix_showtimes_movie_starts_at", "movie_id", "starts_at"),
    )

    @property
    def available(self) -> int:
        return self.capacity - self.booked

    @property
    def movie_title(self) -> str | None:
        # Only when the movie was eager-loaded; async sessions cannot lazy load
        if "movie" in inspect(self).unloaded:
            return None
        return self.movie.title if self.movie else None

    def __repr__(self) -> str:
        return f"<Showtime(id={self.id}, movie={self.movie_id}, booked={self.booked}/{self.capacity})>"
