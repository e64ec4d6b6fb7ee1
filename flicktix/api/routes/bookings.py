"""
Ticket purchase and booking history endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from flicktix.db.session import get_db
from flicktix.schemas.booking import BookingCreate, BookingResponse
from flicktix.services.booking_service import purchase
from flicktix.services.account_service import list_bookings_for_user
from flicktix.services.cache_service import invalidate_catalog_cache
from flicktix.core.security import get_current_user_id

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Buy tickets for a showtime.

    Returns 409 when the showtime does not have enough seats left and 503
    when the store is unreachable (safe to retry).
    """
    booking = await purchase(
        db,
        user_id,
        booking_data.showtime_id,
        booking_data.ticket_count,
        booking_data.payment_method,
    )
    # purchase() has committed, so listings re-read after this see the sale
    await invalidate_catalog_cache()
    return booking


@router.get("/", response_model=list[BookingResponse])
async def list_user_bookings(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Booking history for the signed-in user, newest first."""
    return await list_bookings_for_user(db, user_id)
