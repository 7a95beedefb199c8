from __future__ import annotations

from fastapi.testclient import TestClient

from recipes_backend.app import app
from recipes_backend.recommendations.cache import (
    cache_get,
    cache_set,
    clear_cache,
    get_cache_stats,
    invalidate,
)

client = TestClient(app)


def _login_admin(c):
    c.post("/auth/login", json={"username": "admin", "password": "admin123"})


def test_cache_miss_then_hit():
    clear_cache()
    resp1 = client.get("/recommendations", params={"type": "trending", "limit": 3})
    assert resp1.status_code == 200
    stats = get_cache_stats()
    assert stats["misses"] >= 1

    # Second identical call is served from the cache
    resp2 = client.get("/recommendations", params={"type": "trending", "limit": 3})
    assert resp2.json() == resp1.json()
    stats = get_cache_stats()
    assert stats["hits"] >= 1


def test_cache_different_queries_miss():
    clear_cache()
    client.get("/recommendations", params={"type": "trending"})
    client.get("/recommendations", params={"type": "occasion", "occasion": "party"})
    stats = get_cache_stats()
    assert stats["misses"] >= 2
    assert stats["hits"] == 0


def test_cache_keys_include_user():
    clear_cache()
    anon = TestClient(app)
    anon.get("/recommendations", params={"limit": 4})
    signed_in = TestClient(app)
    signed_in.post("/auth/login", json={"username": "user", "password": "user123"})
    signed_in.get("/recommendations", params={"limit": 4})
    assert get_cache_stats()["hits"] == 0


def test_expired_entries_are_dropped():
    clear_cache()
    cache_set({"q": 1}, "value")
    assert cache_get({"q": 1}) == "value"
    assert cache_get({"q": 1}, ttl=0) is None
    assert get_cache_stats()["size"] == 0


def test_set_sweeps_expired_entries_never_read_again():
    clear_cache()
    for i in range(5):
        cache_set({"q": i}, i)
    # an already-expired window sweeps every earlier entry on the next write
    cache_set({"q": "new"}, "value", ttl=0)
    assert get_cache_stats()["size"] == 1


def test_size_bound_evicts_oldest_entry():
    clear_cache()
    cache_set({"q": 1}, "one", max_entries=2)
    cache_set({"q": 2}, "two", max_entries=2)
    cache_set({"q": 3}, "three", max_entries=2)
    assert get_cache_stats()["size"] == 2
    assert cache_get({"q": 1}) is None
    assert cache_get({"q": 2}) == "two"
    assert cache_get({"q": 3}) == "three"


def test_rewriting_a_key_refreshes_its_position():
    clear_cache()
    cache_set({"q": 1}, "one", max_entries=2)
    cache_set({"q": 2}, "two", max_entries=2)
    cache_set({"q": 1}, "uno", max_entries=2)
    cache_set({"q": 3}, "three", max_entries=2)
    assert cache_get({"q": 1}) == "uno"
    assert cache_get({"q": 2}) is None


def test_invalidate_keeps_counters():
    clear_cache()
    cache_set({"q": 1}, "value")
    cache_get({"q": 1})
    invalidate()
    stats = get_cache_stats()
    assert stats["size"] == 0
    assert stats["hits"] == 1


def test_cache_stats_endpoint():
    clear_cache()
    client.get("/recommendations", params={"type": "new_users", "limit": 3})
    client.get("/recommendations", params={"type": "new_users", "limit": 3})
    c = TestClient(app)
    _login_admin(c)
    resp = c.get("/cache/stats")
    assert resp.status_code == 200
    body = resp.json()
    assert body["hits"] >= 1
    assert "hit_rate" in body
