"""
Tests for health, metrics and request correlation.
"""

import logging

import pytest
from httpx import AsyncClient

from flicktix.core.logging import add_service_context, setup_logging


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


@pytest.mark.asyncio
async def test_request_id_is_generated(client: AsyncClient):
    response = await client.get("/health")
    assert response.headers["X-Request-ID"]
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_request_id_is_propagated(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_metrics_exposes_booking_counters(client: AsyncClient, auth_headers, big_showtime):
    await client.post(
        "/api/v1/bookings/",
        json={"showtime_id": big_showtime.id, "ticket_count": 1, "payment_method": "Cash"},
        headers=auth_headers,
    )
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert 'booking_attempts_total{status="success"}' in response.text
    assert "catalog_reads_total" in response.text


def test_setup_logging_replaces_only_its_own_handler():
    root = logging.getLogger()
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        setup_logging()
        handler = setup_logging()
        ours = [h for h in root.handlers if h.get_name() == "flicktix"]
        assert ours == [handler]
        assert foreign in root.handlers
    finally:
        root.removeHandler(foreign)
        root.removeHandler(handler)


def test_log_events_carry_service_context():
    event = add_service_context(None, "info", {"event": "booking_created", "env": "override"})
    assert event["service"] == "FlickTix Booking API"
    assert event["version"]
    assert event["env"] == "override"
