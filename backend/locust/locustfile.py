"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags feed    # Cached feed and slug lookups
  locust -f locustfile.py --tags edge    # Bad input
  locust -f locustfile.py                # All tests
"""

import random
import string
from locust import HttpUser, task, between, tag

# Shared state
EVENT_SLUGS = []


def random_email():
    return f"load_{random.randint(10000, 99999)}@test.com"


def random_title():
    return "Load Conf " + "".join(random.choices(string.ascii_lowercase, k=8))


def event_body(title):
    return {
        "title": title,
        "description": "Generated by the load test suite.",
        "overview": "Load test event",
        "image": "https://images.test/load.png",
        "venue": "Load Hall",
        "location": "Internet",
        "date": "2026-12-01",
        "time": "18:00",
        "mode": "online",
        "audience": "Robots",
        "agenda": ["Warm up", "Hammer"],
        "organizer": "Locust",
        "tags": ["load"],
    }


def signup_and_login(client):
    email = random_email()
    client.post("/api/v1/auth/signup", json={
        "name": "Load User",
        "email": email,
        "password": "test123",
    })
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": "test123"})
    if resp.status_code == 200:
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}
    return {}


class FeedUser(HttpUser):
    """
    Feed throughput: mostly cached list reads, some slug lookups.

    Run: locust -f locustfile.py --tags feed -u 200 -r 50 --run-time 60s
    Compare /health cache hit_rate before and after.
    """
    wait_time = between(0.1, 0.5)

    @tag("feed")
    @task(10)
    def list_events(self):
        resp = self.client.get("/api/v1/events/")
        if resp.status_code == 200:
            for event in resp.json()["events"][:20]:
                if event["slug"] not in EVENT_SLUGS:
                    EVENT_SLUGS.append(event["slug"])

    @tag("feed")
    @task(3)
    def get_event_detail(self):
        if EVENT_SLUGS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_SLUGS)}", name="/api/v1/events/[slug]")

    @tag("feed")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """Bad input must come back as 4xx, never 5xx."""
    wait_time = between(0.5, 1)

    def on_start(self):
        self.headers = signup_and_login(self.client)

    @tag("edge")
    @task
    def unknown_slug(self):
        with self.client.get("/api/v1/events/does-not-exist", catch_response=True) as resp:
            if resp.status_code == 404:
                resp.success()
            else:
                resp.failure(f"Expected 404, got {resp.status_code}")

    @tag("edge")
    @task
    def invalid_time(self):
        body = event_body(random_title())
        body["time"] = "25:99"
        with self.client.post("/api/v1/events/", json=body, headers=self.headers,
                              catch_response=True) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Expected 400, got {resp.status_code}")

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/events/", data="{bad",
                              headers={**self.headers, "Content-Type": "application/json"},
                              catch_response=True) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Expected 400, got {resp.status_code}")

    @tag("edge")
    @task
    def booking_for_missing_event(self):
        with self.client.post("/api/v1/bookings/", json={
            "event_id": "00000000-0000-0000-0000-000000000000",
            "email": random_email(),
        }, catch_response=True) as resp:
            if resp.status_code == 404:
                resp.success()
            else:
                resp.failure(f"Expected 404, got {resp.status_code}")


class RealisticUser(HttpUser):
    """Mixed traffic: browse heavily, book sometimes, publish rarely."""
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = signup_and_login(self.client)

    @task(50)
    def browse_events(self):
        self.client.get("/api/v1/events/")

    @task(20)
    def view_event(self):
        if EVENT_SLUGS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_SLUGS)}", name="/api/v1/events/[slug]")

    @task(10)
    def book_event(self):
        if not EVENT_SLUGS:
            return
        resp = self.client.get(f"/api/v1/events/{random.choice(EVENT_SLUGS)}", name="/api/v1/events/[slug]")
        if resp.status_code == 200:
            self.client.post("/api/v1/bookings/", json={
                "event_id": resp.json()["id"],
                "email": random_email(),
            })

    @task(3)
    def create_event(self):
        resp = self.client.post("/api/v1/events/", json=event_body(random_title()), headers=self.headers)
        if resp.status_code == 201:
            EVENT_SLUGS.append(resp.json()["slug"])
