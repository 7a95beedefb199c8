from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .auth.dependencies import get_current_user, require_admin, require_user
from .auth.users import authenticate, get_preferences, update_preferences
from .catalog.store import (
    InvalidRatingError,
    RecipeNotFoundError,
    get_recipe,
    get_user_rating,
    rate_recipe,
)
from .recommendations.cache import get_cache_stats, invalidate
from .recommendations.config import DEFAULT_RECOMMENDATION_CONFIG
from .recommendations.keywords import available_categories, available_occasions
from .recommendations.models import (
    LoginRequest,
    PreferencesUpdate,
    RatingRequest,
    RatingResponse,
    RecommendationQuery,
    RecommendationsResponse,
    RecommendationType,
    TrendingPeriod,
    UserPreferences,
)
from .recommendations.service import get_recommendations

logger = logging.getLogger(__name__)

app = FastAPI(title="Recipe Recommendation API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "recipes-secret-change-in-production"),
)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/recommendations", response_model=RecommendationsResponse)
def recommendations(
    type: RecommendationType = RecommendationType.personalized,
    limit: int = Query(
        default=DEFAULT_RECOMMENDATION_CONFIG.default_limit,
        ge=1,
        le=DEFAULT_RECOMMENDATION_CONFIG.max_limit,
    ),
    exclude: str | None = None,
    base_recipe_id: str | None = Query(default=None, alias="baseRecipeId"),
    occasion: str | None = None,
    category: str | None = None,
    period: TrendingPeriod = TrendingPeriod.weekly,
    user: dict | None = Depends(get_current_user),
):
    query = RecommendationQuery(
        type=type,
        limit=limit,
        exclude=[i.strip() for i in (exclude or "").split(",") if i.strip()],
        base_recipe_id=base_recipe_id,
        occasion=occasion,
        category=category,
        period=period,
    )
    try:
        return get_recommendations(query, user)
    except Exception:
        logger.exception("Error fetching recommendations")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to fetch recommendations"},
        )


@app.get("/recommendations/occasions")
def occasions() -> dict[str, list[str]]:
    return {"occasions": available_occasions()}


@app.get("/recommendations/categories")
def categories() -> dict[str, list[str]]:
    return {"categories": available_categories()}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── User endpoints ───────────────────────────────────────────────────────


@app.post("/recipes/{recipe_id}/rating", response_model=RatingResponse, status_code=201)
def rate(recipe_id: str, body: RatingRequest, user: dict = Depends(require_user)) -> RatingResponse:
    try:
        recipe = rate_recipe(user["id"], recipe_id, body.value)
    except RecipeNotFoundError:
        raise HTTPException(status_code=404, detail="Recipe not found")
    except InvalidRatingError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    # Averages changed, so cached rankings are stale
    invalidate()
    return RatingResponse(
        recipe_id=recipe.id,
        value=body.value,
        average_rating=recipe.average_rating,
        ratings_count=recipe.ratings_count,
    )


@app.get("/recipes/{recipe_id}/rating", response_model=RatingResponse)
def my_rating(recipe_id: str, user: dict = Depends(require_user)) -> RatingResponse:
    recipe = get_recipe(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    value = get_user_rating(user["id"], recipe_id)
    if value is None:
        raise HTTPException(status_code=404, detail="No rating found")
    return RatingResponse(
        recipe_id=recipe.id,
        value=value,
        average_rating=recipe.average_rating,
        ratings_count=recipe.ratings_count,
    )


@app.get("/profile/preferences", response_model=UserPreferences)
def read_preferences(user: dict = Depends(require_user)) -> UserPreferences:
    return get_preferences(user["username"])


@app.put("/profile/preferences", response_model=UserPreferences)
def write_preferences(body: PreferencesUpdate, user: dict = Depends(require_user)) -> UserPreferences:
    try:
        preferences = update_preferences(
            user["username"], body.favorites_cuisines, body.dietary_restrictions,
        )
    except KeyError:
        raise HTTPException(status_code=404, detail="User not found")
    invalidate()
    return preferences


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return get_cache_stats()
