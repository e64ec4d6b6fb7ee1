"""
Pydantic schemas for ticket purchase request/response validation.
"""

from datetime import datetime
from pydantic import BaseModel, Field

from flicktix.core.config import get_settings
from flicktix.models.booking import PaymentMethod

settings = get_settings()


class BookingCreate(BaseModel):
    showtime_id: int
    ticket_count: int = Field(default=1, gt=0, le=settings.MAX_TICKETS_PER_BOOKING)
    payment_method: PaymentMethod


class BookingResponse(BaseModel):
    id: str
    user_id: str
    showtime_id: int
    movie_title: str
    cinema: str
    ticket_count: int
    total_price: int
    payment_method: PaymentMethod
    created_at: datetime

    model_config = {"from_attributes": True}
