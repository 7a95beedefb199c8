from __future__ import annotations

import logging
import time
from typing import Any

from ..analytics.store import record_event
from ..auth.users import get_preferences
from ..catalog.store import get_published_recipes, get_user_ratings
from .cache import cache_get, cache_set
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .engine import RecipeRecommendationEngine
from .models import (
    RecipeWithDetails,
    RecommendationOut,
    RecommendationQuery,
    RecommendationsResponse,
    RecommendationType,
    UserPreferences,
)

logger = logging.getLogger(__name__)


def _user_signals(
    user: dict | None, config: RecommendationConfig,
) -> tuple[UserPreferences, list[str], dict[str, int]]:
    """Return (preferences, view history, rating map) for the requester."""
    if not user:
        return UserPreferences(), [], {}

    preferences = get_preferences(user["username"]).model_copy(
        update={"preferred_meal_types": list(config.default_meal_types)},
    )
    rated = get_user_ratings(user["id"])
    # Rated recipes double as the view history until views are tracked
    return preferences, list(rated), rated


def _select(engine: RecipeRecommendationEngine, query: RecommendationQuery) -> list[RecipeWithDetails]:
    kind = query.type
    if kind is RecommendationType.similar:
        if not query.base_recipe_id:
            return []
        return engine.get_similar_recipes(query.base_recipe_id, query.limit)
    if kind is RecommendationType.trending:
        return engine.get_trending_recipes(query.limit, query.period)
    if kind is RecommendationType.occasion:
        if not query.occasion:
            return []
        return engine.get_recipes_for_occasion(query.occasion, query.limit)
    if kind is RecommendationType.category:
        if not query.category:
            return []
        return engine.get_trending_by_category(query.category, query.limit)
    if kind is RecommendationType.new_users:
        return engine.get_trending_for_new_users(query.limit)
    return engine.get_recommendations(query.exclude, query.limit)


def _to_out(recipe: RecipeWithDetails) -> RecommendationOut:
    return RecommendationOut(
        id=recipe.id,
        title=recipe.title,
        description=recipe.description,
        image=recipe.image_url,
        prep_time=recipe.prep_time,
        cook_time=recipe.cook_time,
        servings=recipe.servings,
        average_rating=recipe.average_rating,
        ratings_count=recipe.ratings_count,
        author=recipe.author,
        created_at=recipe.created_at,
    )


def _record(query: RecommendationQuery, user: dict | None, count: int, start: float, cache_hit: bool) -> None:
    record_event("recommendation", {
        "query_type": query.type.value,
        "occasion": query.occasion,
        "category": query.category,
        "user_id": user["id"] if user else None,
        "results_returned": count,
        "response_time_ms": round((time.time() - start) * 1000, 1),
        "cache_hit": cache_hit,
    })


def get_recommendations(
    query: RecommendationQuery,
    user: dict | None = None,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> RecommendationsResponse:
    start_time = time.time()

    # --- Cache check ---
    cache_key: dict[str, Any] = query.model_dump(mode="json")
    cache_key["_user"] = user["id"] if user else None
    if config.cache_enabled:
        cached = cache_get(cache_key, ttl=config.cache_ttl_seconds)
        if cached is not None:
            _record(query, user, cached.count, start_time, cache_hit=True)
            return cached

    # --- Fresh engine over the current catalog ---
    recipes = get_published_recipes()
    preferences, view_history, rated = _user_signals(user, config)
    engine = RecipeRecommendationEngine(recipes, preferences, view_history, rated)

    logger.debug(
        "Recommending type=%s limit=%d over %d recipes for %s",
        query.type.value, query.limit, len(recipes), user["id"] if user else "anonymous",
    )
    selected = _select(engine, query)

    response = RecommendationsResponse(
        recommendations=[_to_out(r) for r in selected],
        type=query.type,
        count=len(selected),
    )

    if config.cache_enabled:
        cache_set(
            cache_key, response,
            ttl=config.cache_ttl_seconds, max_entries=config.cache_max_entries,
        )

    _record(query, user, response.count, start_time, cache_hit=False)
    return response
