"""
Account Directory: a user's booking history.

A read projection over bookings written by booking_service; it keeps no
state of its own.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flicktix.core.config import get_settings
from flicktix.core.exceptions import translate_store_errors
from flicktix.models.booking import Booking

settings = get_settings()


async def list_bookings_for_user(db: AsyncSession, user_id: str) -> list[Booking]:
    """All bookings for a user, newest first. Ties on timestamp fall back to id."""
    with translate_store_errors(settings.STORE_RETRY_AFTER_SECONDS):
        result = await db.execute(
            select(Booking)
            .where(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return list(result.scalars().all())
