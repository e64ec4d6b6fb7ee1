"""
Locust load test suite.

Needs a running API with at least one store-backed movie and showtime.

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Oversell protection
  locust -f locustfile.py --tags throughput   # Catalog cache
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests

Pin the contended showtime with SHOWTIME_ID=<id>; otherwise the first
showtime in the catalog is used.
"""

import os
import random
import uuid
from locust import HttpUser, task, between, tag

SHOWTIME_IDS = []
PASSWORD = "test123"


def random_email():
    return f"load_{uuid.uuid4().hex[:10]}@example.com"


def sign_in(client) -> dict:
    email = random_email()
    client.post("/api/v1/auth/register", json={
        "email": email,
        "password": PASSWORD,
        "confirm_password": PASSWORD,
    })
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    if resp.status_code == 200:
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}
    return {}


def remember_showtimes(movies: list[dict]):
    for movie in movies:
        for showtime in movie.get("showtimes", []):
            if showtime["id"] not in SHOWTIME_IDS:
                SHOWTIME_IDS.append(showtime["id"])


def contended_showtime_id():
    pinned = os.environ.get("SHOWTIME_ID")
    if pinned:
        return int(pinned)
    return SHOWTIME_IDS[0] if SHOWTIME_IDS else None


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - many users, one showtime

    Run: SHOWTIME_ID=1 locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT booked, capacity FROM showtimes WHERE id = X;
      SELECT SUM(ticket_count) FROM bookings WHERE showtime_id = X;
    Both sums must be equal and <= capacity
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = sign_in(self.client)
        if not SHOWTIME_IDS:
            resp = self.client.get("/api/v1/movies?page_size=100")
            if resp.status_code == 200:
                remember_showtimes(resp.json()["movies"])

    @tag("concurrency")
    @task
    def buy_contended_tickets(self):
        showtime_id = contended_showtime_id()
        if not showtime_id or not self.headers:
            return

        with self.client.post("/api/v1/bookings/",
            json={"showtime_id": showtime_id, "ticket_count": 1, "payment_method": "Card"},
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409 is the expected sold-out answer
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - catalog cache effectiveness

    Run once with Redis and once with REDIS_ENABLED=false, compare P95/P99.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def browse_catalog(self):
        genre = random.choice(["All", "Action", "Comedy", "Drama", "Sci-Fi"])
        self.client.get(f"/api/v1/movies?genre={genre}", name="/api/v1/movies [genre]")

    @tag("throughput", "read")
    @task(3)
    def showtime_availability(self):
        if SHOWTIME_IDS:
            self.client.get(f"/api/v1/showtimes/{random.choice(SHOWTIME_IDS)}",
                name="/api/v1/showtimes/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - the API must answer bad input with 4xx, never 5xx.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = sign_in(self.client)

    def _expect(self, payload, allowed, headers=None):
        with self.client.post("/api/v1/bookings/",
            json=payload,
            headers=self.headers if headers is None else headers,
            catch_response=True
        ) as resp:
            if resp.status_code in allowed:
                resp.success()
            else:
                resp.failure(f"Expected {allowed}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_showtime(self):
        self._expect({"showtime_id": 999999, "ticket_count": 1, "payment_method": "Cash"}, (404,))

    @tag("edge")
    @task
    def zero_tickets(self):
        self._expect({"showtime_id": 1, "ticket_count": 0, "payment_method": "Cash"}, (400, 422))

    @tag("edge")
    @task
    def unknown_payment_method(self):
        self._expect({"showtime_id": 1, "ticket_count": 1, "payment_method": "Bitcoin"}, (400, 422))

    @tag("edge")
    @task
    def missing_auth(self):
        self._expect({"showtime_id": 1, "ticket_count": 1, "payment_method": "Cash"}, (401,), headers={})


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload - mostly browsing, some purchases,
    history checks.
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = sign_in(self.client)

    @task(50)
    def browse(self):
        resp = self.client.get("/api/v1/movies")
        if resp.status_code == 200:
            remember_showtimes(resp.json()["movies"])

    @task(20)
    def view_showtime(self):
        if SHOWTIME_IDS:
            self.client.get(f"/api/v1/showtimes/{random.choice(SHOWTIME_IDS)}",
                name="/api/v1/showtimes/{id}")

    @task(10)
    def buy_tickets(self):
        if SHOWTIME_IDS and self.headers:
            self.client.post("/api/v1/bookings/",
                json={
                    "showtime_id": random.choice(SHOWTIME_IDS),
                    "ticket_count": random.randint(1, 3),
                    "payment_method": random.choice(["Cash", "Card"]),
                },
                headers=self.headers)

    @task(5)
    def booking_history(self):
        if self.headers:
            self.client.get("/api/v1/bookings/", headers=self.headers)
