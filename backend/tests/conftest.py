import os

import pytest

os.environ.setdefault("EMAIL_SERVICE", "console")
os.environ.setdefault("RATE_LIMIT_BACKEND", "memory")
os.environ.setdefault("CORS_ORIGINS", "http://localhost")

from fastapi.testclient import TestClient

from contact_service.lib.rate_limit import InMemoryRateLimitStore, RateLimiter, get_rate_limiter
from contact_service.main import app


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(InMemoryRateLimitStore(clock=clock), max_requests=5, window_seconds=15 * 60, clock=clock)


@pytest.fixture
def client(limiter):
    # fresh rate-limit table per test
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def valid_form():
    return {
        "name": "יוסי כהן",
        "email": "yossi@example.com",
        "projectType": "בלוגים מקצועיים",
        "message": "אני מעוניין לבנות בלוג מקצועי לעסק שלי",
        "selectedPackage": "פרו",
    }
