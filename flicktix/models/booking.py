"""
Booking model: a completed ticket purchase.

Key design decisions:
- Rows are insert-only; there is no status column because purchases are
  never cancelled or edited
- movie_title and cinema are snapshotted so booking history renders without
  joining back to the catalog
- Composite index on (user_id, created_at) serves the history query
"""

import enum
import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, CheckConstraint

from flicktix.db.base import Base, utcnow


class PaymentMethod(str, enum.Enum):
    CASH = "Cash"
    CARD = "Card"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    showtime_id = Column(Integer, ForeignKey("showtimes.id"), nullable=False, index=True)
    movie_title = Column(String(255), nullable=False)
    cinema = Column(String(255), nullable=False, default="")
    ticket_count = Column(Integer, nullable=False)
    total_price = Column(Integer, nullable=False)
    payment_method = Column(String(10), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("ticket_count > 0", name="check_booking_ticket_count_positive"),
        CheckConstraint("total_price >= 0", name="check_booking_total_price_non_negative"),
        CheckConstraint("payment_method IN ('Cash', 'Card')", name="check_booking_payment_method"),
        Index("ix_bookings_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, showtime={self.showtime_id}, tickets={self.ticket_count})>"
