import time

import pytest

from app.exceptions import RateLimitExceeded
from app.limits import FixedWindowRateLimiter
from app.main import app


def _small_limiter(monkeypatch, max_requests=3, window_seconds=60):
    limiter = FixedWindowRateLimiter(max_requests=max_requests, window_seconds=window_seconds)
    monkeypatch.setattr(app.state, "rate_limiter", limiter)
    return limiter


def test_requests_over_limit_get_429(client, monkeypatch):
    _small_limiter(monkeypatch, max_requests=3)

    for _ in range(3):
        r = client.get("/api/properties/stats/overview")
        assert r.status_code == 200, r.text

    r = client.get("/api/properties/stats/overview")
    assert r.status_code == 429
    body = r.json()
    assert body["error"] == "Too many requests from this IP, please try again later."
    assert 1 <= body["retry_after"] <= 60
    assert int(r.headers["Retry-After"]) == body["retry_after"]


def test_limit_is_shared_across_public_routers(client, monkeypatch):
    _small_limiter(monkeypatch, max_requests=2)
    assert client.get("/api/hero").status_code == 200
    assert client.get("/api/blog/categories").status_code == 200
    assert client.get("/api/team").status_code == 429


def test_health_and_admin_routes_are_not_counted(admin_client, monkeypatch):
    _small_limiter(monkeypatch, max_requests=1)
    for _ in range(3):
        assert admin_client.get("/health").status_code == 200
        assert admin_client.get("/api/admin/dashboard").status_code == 200
    assert admin_client.get("/api/hero").status_code == 200


def test_window_resets():
    limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=1)
    limiter.hit("10.0.0.1")
    with pytest.raises(RateLimitExceeded):
        limiter.hit("10.0.0.1")
    # other clients have their own window
    limiter.hit("10.0.0.2")

    time.sleep(1.1)
    limiter.hit("10.0.0.1")
    assert limiter.remaining("10.0.0.1") == 0


def test_reset_clears_counters():
    limiter = FixedWindowRateLimiter(max_requests=2, window_seconds=60)
    limiter.hit("a")
    assert limiter.remaining("a") == 1
    limiter.reset()
    assert limiter.remaining("a") == 2
