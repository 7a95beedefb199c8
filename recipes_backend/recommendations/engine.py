"""
Recipe recommendation engine.

Built fresh per request from an in-memory snapshot of published recipes and
the requesting user's signals. Every query is a read-only projection over
that snapshot; the evaluation time is fixed when the engine is constructed so
repeated queries on one instance return identical results.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Mapping, Sequence

from .keywords import (
    category_keywords,
    cuisine_keywords,
    dietary_keywords,
    matches_any,
    meal_type_keywords,
    occasion_keywords,
)
from .models import RecipeWithDetails, RecommendationScore, TrendingPeriod, UserPreferences

_SECONDS_PER_DAY = 24 * 60 * 60


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _text_fields(recipe: RecipeWithDetails) -> tuple[str, str]:
    return recipe.title.lower(), (recipe.description or "").lower()


def _common_words(a: str, b: str) -> int:
    """Count words of *a* that also occur in *b* (space-split, repeats counted)."""
    words_b = b.lower().split(" ")
    return sum(1 for w in a.lower().split(" ") if w in words_b)


def _rank(
    recipes: Iterable[RecipeWithDetails],
    score: Callable[[RecipeWithDetails], float],
    limit: int,
) -> list[RecipeWithDetails]:
    if limit <= 0:
        return []
    scored = [(score(r), r) for r in recipes]
    # list.sort is stable, so equal scores keep input order
    scored.sort(key=lambda x: x[0], reverse=True)
    return [r for _, r in scored[:limit]]


class RecipeRecommendationEngine:
    """Score and rank recipes for one user at one point in time."""

    def __init__(
        self,
        recipes: Sequence[RecipeWithDetails],
        user_preferences: UserPreferences | None = None,
        view_history: Sequence[str] | None = None,
        rated_recipes: Mapping[str, int | float] | None = None,
        now: datetime | None = None,
    ) -> None:
        self.recipes: tuple[RecipeWithDetails, ...] = tuple(recipes)
        self.user_preferences = user_preferences or UserPreferences()
        self.view_history: tuple[str, ...] = tuple(view_history or ())
        self.rated_recipes: dict[str, float] = dict(rated_recipes or {})
        self.now = _as_utc(now) if now else datetime.now(timezone.utc)

    # --- public queries -------------------------------------------------

    def get_recommendations(
        self, exclude_ids: Iterable[str] = (), limit: int = 6,
    ) -> list[RecipeWithDetails]:
        """Personalised recommendations, highest score first."""
        if limit <= 0:
            return []
        by_id = {r.id: r for r in self.recipes}
        scores = sorted(self.score_recipes(exclude_ids), key=lambda s: s.score, reverse=True)
        return [by_id[s.recipe_id] for s in scores[:limit]]

    def get_similar_recipes(self, base_recipe_id: str, limit: int = 4) -> list[RecipeWithDetails]:
        """Recipes most similar to *base_recipe_id*; empty if the id is unknown."""
        base = next((r for r in self.recipes if r.id == base_recipe_id), None)
        if base is None:
            return []
        candidates = (r for r in self.recipes if r.id != base_recipe_id)
        return _rank(candidates, lambda r: self.similarity(base, r), limit)

    def get_trending_recipes(
        self,
        limit: int = 6,
        period: TrendingPeriod | str = TrendingPeriod.weekly,
    ) -> list[RecipeWithDetails]:
        """Published recipes ranked by trend score.

        *period* only moves the cutoff for the recency bonus; the decay and
        velocity windows inside the score are fixed. An unknown period gets no
        recency bonus at all.
        """
        since = self.period_start(period)
        published = (r for r in self.recipes if r.published)
        return _rank(published, lambda r: self.trend_score(r, since), limit)

    def get_trending_by_category(self, category: str, limit: int = 4) -> list[RecipeWithDetails]:
        keywords = category_keywords(category)
        since = self.now - timedelta(days=7)
        matching = (
            r for r in self.recipes
            if r.published and matches_any(*_text_fields(r), keywords)
        )
        return _rank(matching, lambda r: self.trend_score(r, since), limit)

    def get_trending_for_new_users(self, limit: int = 6) -> list[RecipeWithDetails]:
        """Well-established, highly rated recipes for users with no history."""
        eligible = (
            r for r in self.recipes
            if r.published and r.average_rating >= 4.0 and r.ratings_count >= 3
        )
        return _rank(eligible, self.new_user_score, limit)

    def get_recipes_for_occasion(self, occasion: str, limit: int = 6) -> list[RecipeWithDetails]:
        keywords = occasion_keywords(occasion)
        relevant = [
            r for r in self.recipes
            if r.published and self.occasion_relevance(r, keywords) > 0
        ]
        return _rank(relevant, lambda r: self.occasion_relevance(r, keywords), limit)

    # --- scoring --------------------------------------------------------

    def score_recipes(self, exclude_ids: Iterable[str] = ()) -> list[RecommendationScore]:
        """Score every published, non-excluded recipe in input order."""
        excluded = set(exclude_ids)
        return [
            self._score_recipe(r)
            for r in self.recipes
            if r.published and r.id not in excluded
        ]

    def _score_recipe(self, recipe: RecipeWithDetails) -> RecommendationScore:
        prefs = self.user_preferences
        reasons: list[str] = []
        score = recipe.average_rating * 10
        if recipe.average_rating >= 4.5:
            reasons.append("Highly rated")

        title, description = _text_fields(recipe)

        if prefs.favorites_cuisines and any(
            matches_any(title, description, cuisine_keywords(c)) for c in prefs.favorites_cuisines
        ):
            score += 25
            reasons.append("Matches your cuisine preferences")

        if prefs.dietary_restrictions and any(
            matches_any(title, description, dietary_keywords(d)) for d in prefs.dietary_restrictions
        ):
            score += 20
            reasons.append("Fits your dietary needs")

        if prefs.preferred_cook_time and recipe.total_time <= prefs.preferred_cook_time:
            score += 15
            reasons.append("Quick to make")

        if prefs.preferred_meal_types and any(
            matches_any(title, description, meal_type_keywords(m)) for m in prefs.preferred_meal_types
        ):
            score += 15
            reasons.append("Perfect for your preferred meal times")

        if recipe.ratings_count > 10:
            score += 10
            reasons.append("Popular choice")

        if self.days_since_created(recipe) <= 7:
            score += 8
            reasons.append("Recently added")

        score += self.self_consistency_score(recipe)

        return RecommendationScore(recipe_id=recipe.id, score=max(0.0, score), reasons=reasons)

    def self_consistency_score(self, recipe: RecipeWithDetails) -> float:
        """+10 when the user rates generously and the recipe is itself well rated.

        Only the user's own ratings are consulted; there is no cross-user signal.
        """
        if not self.rated_recipes:
            return 0.0
        user_average = sum(self.rated_recipes.values()) / len(self.rated_recipes)
        if user_average >= 4 and recipe.average_rating >= 4:
            return 10.0
        return 0.0

    def similarity(self, a: RecipeWithDetails, b: RecipeWithDetails) -> float:
        score = _common_words(a.title, b.title) * 5

        if a.description and b.description:
            score += _common_words(a.description, b.description) * 2

        time_diff = abs(a.total_time - b.total_time)
        if time_diff <= 15:
            score += 10
        elif time_diff <= 30:
            score += 5

        if abs((a.servings or 0) - (b.servings or 0)) <= 1:
            score += 5

        if abs(a.average_rating - b.average_rating) <= 0.5:
            score += 8

        return score

    def trend_score(self, recipe: RecipeWithDetails, since: datetime | None) -> float:
        days = self.days_since_created(recipe)
        rating = recipe.average_rating
        count = recipe.ratings_count

        score = rating * 20

        # linear decay over 30 days, never below 10% strength
        if since is not None and _as_utc(recipe.created_at) >= since:
            score += 40 * max(0.1, 1 - days / 30)

        if days > 0:
            score += min(count / max(days, 1) * 15, 50)

        score += min(math.log(count + 1) * 8, 60)

        if rating >= 4.5 and count >= 3:
            score += 35
        if days <= 7 and count >= 5:
            score += 25
        if rating >= 4.0 and count >= 2:
            score += 15

        return max(0.0, score)

    def new_user_score(self, recipe: RecipeWithDetails) -> float:
        rating = recipe.average_rating
        count = recipe.ratings_count
        score = rating * 30 + min(count * 3, 60)
        if rating >= 4.5 and count >= 5:
            score += 40
        if 0 < recipe.total_time <= 60:
            score += 20
        return score

    @staticmethod
    def occasion_relevance(recipe: RecipeWithDetails, keywords: Iterable[str]) -> int:
        title, description = _text_fields(recipe)
        relevance = 0
        for keyword in keywords:
            if keyword in title:
                relevance += 10
            if keyword in description:
                relevance += 5
        return relevance

    # --- time helpers ---------------------------------------------------

    def days_since_created(self, recipe: RecipeWithDetails) -> int:
        elapsed = (self.now - _as_utc(recipe.created_at)).total_seconds()
        return math.floor(elapsed / _SECONDS_PER_DAY)

    def period_start(self, period: TrendingPeriod | str) -> datetime | None:
        """Cutoff for the recency bonus, or None for an unknown period."""
        try:
            days = TrendingPeriod(period).days
        except ValueError:
            return None
        return self.now - timedelta(days=days)
