from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RecipeAuthor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None = None
    image: str | None = None


class RecipeWithDetails(BaseModel):
    """A published-recipe snapshot with its rating aggregate already joined."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str | None = None
    created_at: datetime
    published: bool = True
    prep_time: int | None = None
    cook_time: int | None = None
    servings: int | None = None
    average_rating: float = 0.0
    ratings_count: int = 0
    image_url: str | None = None
    author: RecipeAuthor | None = None

    @property
    def total_time(self) -> int:
        return (self.prep_time or 0) + (self.cook_time or 0)


class UserPreferences(BaseModel):
    favorites_cuisines: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list)
    preferred_cook_time: int | None = None
    preferred_meal_types: list[str] = Field(default_factory=list)


class RecommendationScore(BaseModel):
    recipe_id: str
    score: float
    reasons: list[str] = Field(default_factory=list)


class TrendingPeriod(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"

    @property
    def days(self) -> int:
        return {"daily": 1, "weekly": 7, "monthly": 30}[self.value]


class RecommendationType(str, Enum):
    personalized = "personalized"
    similar = "similar"
    trending = "trending"
    occasion = "occasion"
    category = "category"
    new_users = "new_users"


# ── API models ───────────────────────────────────────────────────────────


class RecommendationQuery(BaseModel):
    type: RecommendationType = RecommendationType.personalized
    limit: int = Field(default=6, ge=1, le=50)
    exclude: list[str] = Field(default_factory=list)
    base_recipe_id: str | None = None
    occasion: str | None = None
    category: str | None = None
    period: TrendingPeriod = TrendingPeriod.weekly


class RecommendationOut(BaseModel):
    id: str
    title: str
    description: str | None
    image: str | None
    prep_time: int | None
    cook_time: int | None
    servings: int | None
    average_rating: float
    ratings_count: int
    author: RecipeAuthor | None
    created_at: datetime


class RecommendationsResponse(BaseModel):
    success: bool = True
    recommendations: list[RecommendationOut]
    type: RecommendationType
    count: int


class RatingRequest(BaseModel):
    value: int = Field(..., ge=1, le=5)


class RatingResponse(BaseModel):
    recipe_id: str
    value: int
    average_rating: float
    ratings_count: int


class PreferencesUpdate(BaseModel):
    favorites_cuisines: list[str] | None = None
    dietary_restrictions: list[str] | None = None


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
