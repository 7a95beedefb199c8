from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient

from recipes_backend.app import app
from recipes_backend.recommendations.cache import clear_cache

client = TestClient(app)


def _login(c):
    c.post("/auth/login", json={"username": "user", "password": "user123"})


def _ids(resp) -> list[str]:
    return [r["id"] for r in resp.json()["recommendations"]]


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_anonymous_personalized_returns_results():
    c = TestClient(app)
    resp = c.get("/recommendations")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["type"] == "personalized"
    assert body["count"] == len(body["recommendations"]) > 0
    first = body["recommendations"][0]
    assert {"id", "title", "image", "average_rating", "ratings_count", "author", "created_at"} <= set(first)


def test_recommendations_respects_limit():
    resp = client.get("/recommendations", params={"limit": 3})
    assert len(resp.json()["recommendations"]) <= 3


def test_recommendations_respects_exclude():
    resp = client.get("/recommendations", params={"exclude": "r1,r2, r3", "limit": 50})
    ids = _ids(resp)
    assert ids
    assert not {"r1", "r2", "r3"} & set(ids)


def test_unpublished_never_returned():
    for params in (
        {"type": "personalized", "limit": 50},
        {"type": "trending", "limit": 50, "period": "monthly"},
        {"type": "new_users", "limit": 50},
        {"type": "similar", "baseRecipeId": "r2", "limit": 50},
        {"type": "category", "category": "main_dishes", "limit": 50},
    ):
        resp = client.get("/recommendations", params=params)
        assert resp.status_code == 200
        assert "r14" not in _ids(resp)


def test_similar_excludes_base_recipe():
    resp = client.get("/recommendations", params={"type": "similar", "baseRecipeId": "r2"})
    ids = _ids(resp)
    assert ids
    assert "r2" not in ids


def test_similar_unknown_or_missing_base_is_empty():
    resp = client.get("/recommendations", params={"type": "similar", "baseRecipeId": "nonexistent-id"})
    assert resp.status_code == 200
    assert resp.json()["recommendations"] == []
    assert resp.json()["count"] == 0

    resp = client.get("/recommendations", params={"type": "similar"})
    assert resp.json()["recommendations"] == []


def test_trending_accepts_each_period():
    for period in ("daily", "weekly", "monthly"):
        resp = client.get("/recommendations", params={"type": "trending", "period": period})
        assert resp.status_code == 200
        assert resp.json()["type"] == "trending"


def test_occasion_matches_keywords():
    resp = client.get("/recommendations", params={"type": "occasion", "occasion": "party"})
    assert "r13" in _ids(resp)


def test_occasion_unknown_or_missing_is_empty():
    resp = client.get("/recommendations", params={"type": "occasion", "occasion": "not-a-real-tag"})
    assert resp.json()["recommendations"] == []
    resp = client.get("/recommendations", params={"type": "occasion"})
    assert resp.json()["recommendations"] == []


def test_category_trending():
    resp = client.get("/recommendations", params={"type": "category", "category": "desserts"})
    assert "r6" in _ids(resp)


def test_new_users_are_well_rated():
    resp = client.get("/recommendations", params={"type": "new_users", "limit": 50})
    items = resp.json()["recommendations"]
    assert items
    for item in items:
        assert item["average_rating"] >= 4.0
        assert item["ratings_count"] >= 3


def test_signed_in_user_gets_preference_matches():
    c = TestClient(app)
    _login(c)
    resp = c.get("/recommendations", params={"limit": 3})
    assert resp.status_code == 200
    # Demo user likes Italian food and highly rated pasta leads
    assert "r1" in _ids(resp)


def test_validation_rejects_bad_limit():
    assert client.get("/recommendations", params={"limit": 0}).status_code == 422
    assert client.get("/recommendations", params={"limit": 51}).status_code == 422


def test_validation_rejects_unknown_type_and_period():
    assert client.get("/recommendations", params={"type": "psychic"}).status_code == 422
    assert client.get(
        "/recommendations", params={"type": "trending", "period": "yearly"},
    ).status_code == 422


def test_taxonomy_listings():
    assert "romantic" in client.get("/recommendations/occasions").json()["occasions"]
    assert "african" in client.get("/recommendations/categories").json()["categories"]


@patch(
    "recipes_backend.recommendations.service.get_published_recipes",
    side_effect=RuntimeError("catalog unavailable"),
)
def test_failure_returns_500(mock_catalog):
    clear_cache()
    resp = client.get("/recommendations", params={"type": "trending", "limit": 7})
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Failed to fetch recommendations"}
