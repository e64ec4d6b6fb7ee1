"""
Booking service with oversell-safe ticket purchase.

CONCURRENCY STRATEGY: Guarded Counter Update
============================================

Problem:
  Two customers try to buy the last seats of a showtime simultaneously.
  Both read booked=1/capacity=3, both add 2, both succeed.
  Result: 5 tickets sold for 3 seats.

Solution:
  The capacity check and the increment are one statement:

    UPDATE showtimes SET booked = booked + :n
    WHERE id = :showtime_id AND booked + :n <= capacity

  The database evaluates the WHERE clause against the row it is about to
  write while holding that row's write lock, so two such statements for the
  same showtime are serialized and the second one sees the first one's
  increment. rows_affected == 0 means not enough seats: OverbookedError,
  nothing written. Showtimes never contend with each other.

  The booking row is inserted in the same transaction as the counter
  update and purchase() commits that transaction itself, so a failure
  anywhere before the commit rolls back both and a returned Booking is
  always durable.

  CHECK (booked <= capacity) on the table is the final safety net.

Why no retry loop:
  The guarded UPDATE has no version predicate, so it cannot lose a race
  spuriously; a zero row count is always a real capacity conflict, and
  retrying an oversold showtime cannot succeed. Transient store faults
  surface as StoreUnavailableError for the caller to retry, never inside
  this module, so a purchase is never silently attempted twice.
"""

import time

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from flicktix.core.config import get_settings
from flicktix.core.exceptions import (
    BookingError,
    InvalidInputError,
    OverbookedError,
    ShowtimeNotFoundError,
    StoreUnavailableError,
    translate_store_errors,
)
from flicktix.core.logging import get_logger
from flicktix.core.metrics import booking_latency, record_booking_attempt, tickets_sold
from flicktix.models.booking import Booking, PaymentMethod
from flicktix.models.showtime import Showtime

logger = get_logger(__name__)
settings = get_settings()

_OUTCOMES = (
    (InvalidInputError, "invalid"),
    (ShowtimeNotFoundError, "not_found"),
    (OverbookedError, "overbooked"),
    (StoreUnavailableError, "unavailable"),
)


def _outcome(error: BookingError) -> str:
    for error_class, label in _OUTCOMES:
        if isinstance(error, error_class):
            return label
    return "error"


def validate_purchase(user_id: str, ticket_count: int, payment_method) -> PaymentMethod:
    """Check request shape before touching the store. Returns the parsed method."""
    if not user_id:
        raise InvalidInputError("A user identity is required")

    # bool is an int subclass; True is not a ticket count
    if isinstance(ticket_count, bool) or not isinstance(ticket_count, int) or ticket_count <= 0:
        raise InvalidInputError(f"Ticket count must be a positive integer, got {ticket_count!r}")

    try:
        return PaymentMethod(payment_method)
    except ValueError:
        allowed = ", ".join(method.value for method in PaymentMethod)
        raise InvalidInputError(f"Payment method must be one of: {allowed}") from None


async def purchase(
    db: AsyncSession,
    user_id: str,
    showtime_id: int,
    ticket_count: int,
    payment_method: PaymentMethod | str,
) -> Booking:
    """
    Sell `ticket_count` tickets for a showtime and record the booking.

    Commits before returning: outcome metrics and the caller see only
    durable sales.

    Raises InvalidInputError, ShowtimeNotFoundError, OverbookedError or
    StoreUnavailableError. Only the last one is worth retrying.
    """
    start = time.perf_counter()
    try:
        method = validate_purchase(user_id, ticket_count, payment_method)
        booking = await _purchase(db, user_id, showtime_id, ticket_count, method)
    except BookingError as e:
        record_booking_attempt(_outcome(e))
        raise
    finally:
        booking_latency.observe(time.perf_counter() - start)

    record_booking_attempt("success")
    tickets_sold.inc(ticket_count)
    return booking


async def _purchase(
    db: AsyncSession,
    user_id: str,
    showtime_id: int,
    ticket_count: int,
    method: PaymentMethod,
) -> Booking:
    with translate_store_errors(settings.STORE_RETRY_AFTER_SECONDS):
        result = await db.execute(
            select(Showtime)
            .options(joinedload(Showtime.movie))
            .where(Showtime.id == showtime_id)
        )
        showtime = result.scalar_one_or_none()

        if not showtime:
            logger.warning("booking_failed_not_found", showtime_id=showtime_id, user_id=user_id)
            raise ShowtimeNotFoundError(showtime_id)

        # Single atomic check-and-increment; see module docstring
        update_result = await db.execute(
            update(Showtime)
            .where(
                Showtime.id == showtime_id,
                Showtime.booked + ticket_count <= Showtime.capacity,
            )
            .values(booked=Showtime.booked + ticket_count)
            .execution_options(synchronize_session=False)
        )

        if update_result.rowcount == 0:
            await db.refresh(showtime, attribute_names=["booked"])
            logger.warning(
                "booking_failed_overbooked",
                showtime_id=showtime_id,
                user_id=user_id,
                requested=ticket_count,
                available=showtime.available,
            )
            raise OverbookedError(showtime_id, ticket_count, showtime.available)

        booking = Booking(
            user_id=user_id,
            showtime_id=showtime.id,
            movie_title=showtime.movie.title,
            cinema=showtime.movie.cinema,
            ticket_count=ticket_count,
            total_price=ticket_count * showtime.unit_price,
            payment_method=method.value,
        )
        db.add(booking)
        await db.flush()
        await db.refresh(booking)
        await db.refresh(showtime, attribute_names=["booked"])
        # Commit here so metrics and cache invalidation only ever see durable sales
        await db.commit()

    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=user_id,
        showtime_id=showtime_id,
        tickets=ticket_count,
        total_price=booking.total_price,
        payment_method=booking.payment_method,
        seats_left=showtime.available,
    )
    return booking
