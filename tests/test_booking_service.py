"""
Service-level tests for purchase and booking history, including concurrent
purchases against the same showtime from independent sessions.
"""

import asyncio

import pytest
from prometheus_client import REGISTRY
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from flicktix.core.exceptions import (
    InvalidInputError,
    OverbookedError,
    ShowtimeNotFoundError,
    StoreUnavailableError,
)
from flicktix.models.booking import Booking, PaymentMethod
from flicktix.models.showtime import Showtime
from flicktix.services.account_service import list_bookings_for_user
from flicktix.services.booking_service import purchase, validate_purchase


async def seats_booked(session_factory, showtime_id: int) -> int:
    async with session_factory() as session:
        result = await session.execute(select(Showtime.booked).where(Showtime.id == showtime_id))
        return result.scalar_one()


async def booking_count(session_factory) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(Booking))
        return result.scalar_one()


async def attempt(session_factory, user_id: str, showtime_id: int, tickets: int):
    """Buy in its own session and transaction, like one API request."""
    async with session_factory() as session:
        try:
            booking = await purchase(session, user_id, showtime_id, tickets, PaymentMethod.CARD)
            await session.commit()
            return booking
        except OverbookedError as e:
            await session.rollback()
            return e


@pytest.mark.asyncio
async def test_purchase_two_tickets_at_eight(session_factory, small_showtime):
    async with session_factory() as session:
        booking = await purchase(session, "user-1", small_showtime.id, 2, "Cash")
        await session.commit()

    assert booking.total_price == 16
    assert booking.ticket_count == 2
    assert booking.payment_method == "Cash"
    assert booking.user_id == "user-1"
    assert booking.created_at is not None
    assert await seats_booked(session_factory, small_showtime.id) == 2


@pytest.mark.asyncio
async def test_booking_ids_are_unique(session_factory, big_showtime):
    bookings = [await attempt(session_factory, "user-1", big_showtime.id, 1) for _ in range(5)]
    assert len({booking.id for booking in bookings}) == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("tickets", [0, -1, -100])
async def test_non_positive_ticket_count_is_invalid_and_mutates_nothing(
    session_factory, small_showtime, tickets
):
    async with session_factory() as session:
        with pytest.raises(InvalidInputError):
            await purchase(session, "user-1", small_showtime.id, tickets, "Card")

    assert await seats_booked(session_factory, small_showtime.id) == 0
    assert await booking_count(session_factory) == 0


@pytest.mark.parametrize(
    "user_id, tickets, method",
    [
        ("user-1", True, "Card"),
        ("user-1", 1.5, "Card"),
        ("user-1", "2", "Card"),
        ("user-1", 1, "Bitcoin"),
        ("user-1", 1, "card"),
        ("user-1", 1, None),
        ("", 1, "Card"),
    ],
)
def test_validate_purchase_rejects_bad_input(user_id, tickets, method):
    with pytest.raises(InvalidInputError):
        validate_purchase(user_id, tickets, method)


def test_validate_purchase_accepts_enum_and_value():
    assert validate_purchase("u", 1, PaymentMethod.CASH) is PaymentMethod.CASH
    assert validate_purchase("u", 1, "Card") is PaymentMethod.CARD


@pytest.mark.asyncio
async def test_unknown_showtime(session_factory, catalog):
    async with session_factory() as session:
        with pytest.raises(ShowtimeNotFoundError):
            await purchase(session, "user-1", 424242, 1, "Card")


@pytest.mark.asyncio
async def test_overbooked_reports_seats_left_and_mutates_nothing(session_factory, small_showtime):
    await attempt(session_factory, "user-1", small_showtime.id, 2)

    async with session_factory() as session:
        with pytest.raises(OverbookedError) as excinfo:
            await purchase(session, "user-2", small_showtime.id, 2, "Card")
        await session.rollback()

    assert excinfo.value.status_code == 409
    assert excinfo.value.requested == 2
    assert excinfo.value.available == 1
    assert await seats_booked(session_factory, small_showtime.id) == 2
    assert await booking_count(session_factory) == 1


@pytest.mark.asyncio
async def test_concurrent_purchases_for_last_seats(session_factory, small_showtime):
    """Capacity 3: two simultaneous orders of 2 -> one sale, one Overbooked."""
    results = await asyncio.gather(
        attempt(session_factory, "alice", small_showtime.id, 2),
        attempt(session_factory, "bob", small_showtime.id, 2),
    )

    sold = [r for r in results if isinstance(r, Booking)]
    rejected = [r for r in results if isinstance(r, OverbookedError)]
    assert len(sold) == 1
    assert len(rejected) == 1
    assert await seats_booked(session_factory, small_showtime.id) == 2
    assert await booking_count(session_factory) == 1


@pytest.mark.asyncio
async def test_booked_never_exceeds_capacity_under_contention(session_factory, small_showtime):
    results = await asyncio.gather(*[
        attempt(session_factory, f"user-{i}", small_showtime.id, 1) for i in range(8)
    ])

    sold = [r for r in results if isinstance(r, Booking)]
    assert len(sold) == 3
    assert await seats_booked(session_factory, small_showtime.id) == 3
    assert await booking_count(session_factory) == 3


@pytest.mark.asyncio
async def test_showtimes_do_not_share_capacity(session_factory, catalog):
    small = catalog["comedy"].showtimes[1]
    other = catalog["scifi"].showtimes[0]

    await attempt(session_factory, "user-1", small.id, 3)
    booking = await attempt(session_factory, "user-1", other.id, 3)

    assert isinstance(booking, Booking)
    assert await seats_booked(session_factory, other.id) == 3


def success_count() -> float:
    return REGISTRY.get_sample_value("booking_attempts_total", {"status": "success"}) or 0.0


@pytest.mark.asyncio
async def test_purchase_is_durable_without_caller_commit(session_factory, small_showtime):
    """A returned booking is already committed; the caller's rollback cannot undo it."""
    before = success_count()
    async with session_factory() as session:
        booking = await purchase(session, "user-1", small_showtime.id, 2, "Card")
        await session.rollback()

    assert success_count() == before + 1
    assert await seats_booked(session_factory, small_showtime.id) == 2
    async with session_factory() as session:
        history = await list_bookings_for_user(session, "user-1")
    assert [b.id for b in history] == [booking.id]


@pytest.mark.asyncio
async def test_failed_purchase_records_no_success(session_factory, small_showtime):
    before = success_count()
    async with session_factory() as session:
        with pytest.raises(OverbookedError):
            await purchase(session, "user-1", small_showtime.id, 4, "Card")

    assert success_count() == before


@pytest.mark.asyncio
async def test_store_unavailable_is_retryable(tmp_path):
    broken = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nowhere.db'}")
    async with async_sessionmaker(broken, class_=AsyncSession)() as session:
        with pytest.raises(StoreUnavailableError) as excinfo:
            await purchase(session, "user-1", 1, 1, "Card")

    assert excinfo.value.retryable is True
    assert excinfo.value.status_code == 503
    assert "Retry-After" in excinfo.value.headers


@pytest.mark.asyncio
async def test_history_is_newest_first(session_factory, catalog):
    showtime_ids = [
        catalog["comedy"].showtimes[0].id,
        catalog["comedy"].showtimes[1].id,
        catalog["scifi"].showtimes[0].id,
    ]
    created = [await attempt(session_factory, "user-1", sid, 1) for sid in showtime_ids]
    await attempt(session_factory, "someone-else", showtime_ids[0], 1)

    async with session_factory() as session:
        history = await list_bookings_for_user(session, "user-1")

    assert [b.id for b in history] == [b.id for b in reversed(created)]
    assert all(a.created_at > b.created_at for a, b in zip(history, history[1:]))


@pytest.mark.asyncio
async def test_history_empty_for_unknown_user(session_factory, catalog):
    async with session_factory() as session:
        assert await list_bookings_for_user(session, "nobody") == []
