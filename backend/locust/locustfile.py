"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags search       # City search + availability (cache)
  locust -f locustfile.py --tags booking      # Booking / inquiry writes
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests

Expects a seeded database (python -m cabservice.db.seed) with at least one
priced route; route pairs are discovered from the admin listing at startup.
"""

import random
from datetime import date, timedelta
from locust import HttpUser, task, between, tag, events

ADMIN_EMAIL = "admin@cabservice.in"
ADMIN_PASSWORD = "Admin@123"

# Shared state
CITY_IDS = []
PRICED_PAIRS = []  # (from_city_id, to_city_id, route_id, cab_type_id, price)
SEARCH_TERMS = ["mum", "pun", "del", "jai", "ben", "maha", "karn", "a"]


def future_date(days_ahead: int = 7) -> str:
    return (date.today() + timedelta(days=days_ahead)).isoformat()


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("SETUP: Discovering priced routes...")
    print("=" * 60)


class SearchUser(HttpUser):
    """
    TEST 1: Customer search funnel - city typeahead, availability, results

    Run twice:
      1. With Redis: locust -f locustfile.py --tags search -u 100 -r 20 --run-time 60s
      2. Without Redis (REDIS_ENABLED=false), run again

    Compare city search latency; availability is never cached, so it
    should not change.
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        resp = self.client.post("/api/v1/auth/login", json={
            "email": ADMIN_EMAIL,
            "password": ADMIN_PASSWORD,
        })
        if resp.status_code != 200 or PRICED_PAIRS:
            return

        headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}
        listing = self.client.get("/api/v1/admin/route-pricing?active=true", headers=headers,
                                  name="/api/v1/admin/route-pricing [setup]")
        if listing.status_code == 200:
            for row in listing.json()["data"]:
                if row["tripType"] == "ONE_WAY":
                    PRICED_PAIRS.append(
                        (row["fromCityId"], row["toCityId"], row["routeId"], row["cabTypeId"], row["price"])
                    )
            print(f"\n✓ Found {len(PRICED_PAIRS)} priced ONE_WAY routes\n")

    @tag("search", "read")
    @task(10)
    def search_cities(self):
        """Typeahead: hits the Redis-cached endpoint."""
        resp = self.client.get(f"/api/v1/cities?search={random.choice(SEARCH_TERMS)}",
                               name="/api/v1/cities [cached]")
        if resp.status_code == 200:
            for city in resp.json().get("data", []):
                if city["id"] not in CITY_IDS:
                    CITY_IDS.append(city["id"])

    @tag("search", "read")
    @task(5)
    def check_priced_route(self):
        if PRICED_PAIRS:
            from_id, to_id, *_ = random.choice(PRICED_PAIRS)
            self.client.get(f"/api/v1/check-route?from={from_id}&to={to_id}&tripType=ONE_WAY",
                            name="/api/v1/check-route [priced]")

    @tag("search", "read")
    @task(3)
    def check_random_pair(self):
        """Mostly unpriced pairs: the unavailable path."""
        if len(CITY_IDS) >= 2:
            from_id, to_id = random.sample(CITY_IDS, 2)
            self.client.get(f"/api/v1/check-route?from={from_id}&to={to_id}",
                            name="/api/v1/check-route [random]")

    @tag("search", "read")
    @task(2)
    def results_page(self):
        if PRICED_PAIRS:
            from_id, to_id, *_ = random.choice(PRICED_PAIRS)
            self.client.get(
                f"/api/v1/results?from={from_id}&to={to_id}&tripType=ONE_WAY"
                f"&startDate={future_date()}&startTime=09:00",
                name="/api/v1/results",
                allow_redirects=False,
            )

    @tag("search")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class BookingUser(HttpUser):
    """
    TEST 2: Writes - guest bookings and inquiries

    Run: locust -f locustfile.py --tags booking -u 50 -r 10 --run-time 60s

    Every booking should return 201 regardless of SMTP availability; the
    admin alert is sent after the response.
    """
    wait_time = between(0.5, 2)

    @tag("booking")
    @task(3)
    def book_priced_route(self):
        if not PRICED_PAIRS:
            return
        _, _, route_id, cab_type_id, price = random.choice(PRICED_PAIRS)
        with self.client.post("/api/v1/create-booking",
            json={
                "routeId": route_id,
                "cabTypeId": cab_type_id,
                "tripType": "ONE_WAY",
                "startDate": future_date(random.randint(1, 30)),
                "startTime": "08:30",
                "price": price,
                "name": f"Load Tester {random.randint(1, 10000)}",
                "phone": f"9{random.randint(100000000, 999999999)}",
            },
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("booking")
    @task(1)
    def send_inquiry(self):
        with self.client.post("/api/v1/inquiries",
            json={
                "tripType": "ONE_WAY",
                "fromLocation": "Load Town",
                "toLocation": "Test City",
                "startDate": future_date(10),
                "startTime": "07:00",
                "customerName": "Load Tester",
                "customerPhone": "9000000000",
                "requirements": "Bus for 30",
            },
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_cab_type(self):
        with self.client.post("/api/v1/create-booking",
            json={"cabTypeId": 999999, "tripType": "ONE_WAY", "startDate": future_date(),
                  "startTime": "09:00", "price": 100, "name": "X", "phone": "9000000000"},
            catch_response=True
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def negative_price(self):
        with self.client.post("/api/v1/create-booking",
            json={"cabTypeId": 1, "tripType": "ONE_WAY", "startDate": future_date(),
                  "startTime": "09:00", "price": -5, "name": "X", "phone": "9000000000"},
            catch_response=True
        ) as resp:
            self._expect(resp, [422])

    @tag("edge")
    @task
    def missing_city(self):
        with self.client.get("/api/v1/check-route?from=1", catch_response=True) as resp:
            self._expect(resp, [422])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/inquiries",
            data="not json at all",
            headers={"Content-Type": "application/json"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400, 422])

    @tag("edge")
    @task
    def admin_without_auth(self):
        with self.client.delete("/api/v1/admin/cities/1", catch_response=True) as resp:
            self._expect(resp, [401])
