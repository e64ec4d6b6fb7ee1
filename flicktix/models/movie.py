"""
Movie catalog record. Read-only to clients once ingested.
"""

from sqlalchemy import Column, Integer, String, Boolean, CheckConstraint
from sqlalchemy.orm import relationship

from flicktix.db.base import Base, TimestampMixin


class Movie(Base, TimestampMixin):
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    genre = Column(String(50), nullable=False, index=True)
    duration_minutes = Column(Integer, nullable=False)
    rating = Column(String(20), nullable=False, default="")  # e.g. "PG-13"
    language = Column(String(50), nullable=False, default="English")
    cinema = Column(String(255), nullable=False, default="")  # e.g. "Screen 2 · City Mall"
    is_trending = Column(Boolean, nullable=False, default=False)
    is_coming_soon = Column(Boolean, nullable=False, default=False)

    showtimes = relationship(
        "Showtime",
        back_populates="movie",
        lazy="selectin",
        order_by="Showtime.starts_at",
    )

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="check_movie_duration_positive"),
    )

    @property
    def show_times(self) -> list[str]:
        return [showtime.label for showtime in self.showtimes]

    def __repr__(self) -> str:
        return f"<Movie(id={self.id}, title={self.title}, genre={self.genre})>"
