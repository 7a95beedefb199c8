from __future__ import annotations

import logging
import threading
from typing import Any

import pandas as pd

from ..recommendations.models import RecipeAuthor, RecipeWithDetails
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig

logger = logging.getLogger(__name__)

RECIPE_COLUMNS = [
    "id",
    "title",
    "description",
    "created_at",
    "published",
    "prep_time",
    "cook_time",
    "servings",
    "image_url",
    "author_id",
    "author_name",
    "author_image",
]
RATING_COLUMNS = ["recipe_id", "user_id", "value"]


class CatalogError(Exception):
    """Base class for catalog failures surfaced to the API layer."""


class RecipeNotFoundError(CatalogError):
    pass


class InvalidRatingError(CatalogError):
    pass


_lock = threading.Lock()
_config: CatalogConfig = DEFAULT_CATALOG_CONFIG
_recipes: pd.DataFrame | None = None
_ratings: pd.DataFrame | None = None


def _load_recipes(config: CatalogConfig) -> pd.DataFrame:
    df = pd.read_csv(
        config.recipes_path,
        dtype={"id": str, "author_id": str},
        keep_default_na=True,
    )
    df = df[RECIPE_COLUMNS].copy()
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True)
    df["published"] = df["published"].astype(str).str.lower() == "true"
    for col in ("prep_time", "cook_time", "servings"):
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("Int64")
    return df


def _load_ratings(config: CatalogConfig) -> pd.DataFrame:
    if not config.ratings_path.exists():
        return pd.DataFrame(columns=RATING_COLUMNS).astype({"value": "int64"})
    df = pd.read_csv(config.ratings_path, dtype={"recipe_id": str, "user_id": str})
    return df[RATING_COLUMNS].copy()


def _ensure_loaded() -> tuple[pd.DataFrame, pd.DataFrame]:
    global _recipes, _ratings
    if _recipes is None or _ratings is None:
        _recipes = _load_recipes(_config)
        _ratings = _load_ratings(_config)
        logger.info(
            "Loaded %d recipes and %d ratings from %s",
            len(_recipes), len(_ratings), _config.data_dir,
        )
    return _recipes, _ratings


def configure(config: CatalogConfig) -> None:
    """Point the catalog at another data directory and drop loaded state."""
    global _config
    with _lock:
        _config = config
        _reset()


def _reset() -> None:
    global _recipes, _ratings
    _recipes = None
    _ratings = None


def reset_catalog() -> None:
    with _lock:
        _reset()


def _optional(value: Any) -> Any:
    return None if pd.isna(value) else value


def _optional_int(value: Any) -> int | None:
    return None if pd.isna(value) else int(value)


def _with_rating_stats(recipes: pd.DataFrame, ratings: pd.DataFrame) -> pd.DataFrame:
    stats = (
        ratings.groupby("recipe_id")["value"]
        .agg(average_rating="mean", ratings_count="count")
        .reset_index()
    )
    merged = recipes.merge(stats, how="left", left_on="id", right_on="recipe_id")
    merged["average_rating"] = merged["average_rating"].fillna(0.0).astype(float)
    merged["ratings_count"] = merged["ratings_count"].fillna(0).astype(int)
    return merged


def _to_model(row: dict[str, Any]) -> RecipeWithDetails:
    author = None
    if _optional(row.get("author_id")):
        author = RecipeAuthor(
            id=str(row["author_id"]),
            name=_optional(row.get("author_name")),
            image=_optional(row.get("author_image")),
        )
    return RecipeWithDetails(
        id=str(row["id"]),
        title=str(row["title"]),
        description=_optional(row.get("description")),
        created_at=row["created_at"].to_pydatetime(),
        published=bool(row["published"]),
        prep_time=_optional_int(row.get("prep_time")),
        cook_time=_optional_int(row.get("cook_time")),
        servings=_optional_int(row.get("servings")),
        average_rating=float(row["average_rating"]),
        ratings_count=int(row["ratings_count"]),
        image_url=_optional(row.get("image_url")),
        author=author,
    )


def get_published_recipes() -> list[RecipeWithDetails]:
    """Return every published recipe with its rating aggregate, newest first."""
    with _lock:
        recipes, ratings = _ensure_loaded()
        published = recipes[recipes["published"]]
        merged = _with_rating_stats(published, ratings)
    merged = merged.sort_values("created_at", ascending=False, kind="stable")
    return [_to_model(row) for row in merged.to_dict("records")]


def get_recipe(recipe_id: str) -> RecipeWithDetails | None:
    with _lock:
        recipes, ratings = _ensure_loaded()
        match = recipes[recipes["id"] == recipe_id]
        if match.empty:
            return None
        merged = _with_rating_stats(match, ratings)
    return _to_model(merged.to_dict("records")[0])


def get_user_ratings(user_id: str) -> dict[str, int]:
    """Return ``{recipe_id: value}`` for every rating *user_id* has given."""
    with _lock:
        _, ratings = _ensure_loaded()
        mine = ratings[ratings["user_id"] == user_id]
    return {str(r): int(v) for r, v in zip(mine["recipe_id"], mine["value"])}


def get_user_rating(user_id: str, recipe_id: str) -> int | None:
    return get_user_ratings(user_id).get(recipe_id)


def rate_recipe(user_id: str, recipe_id: str, value: int) -> RecipeWithDetails:
    """Create or replace *user_id*'s rating of *recipe_id*.

    Returns the recipe with its refreshed rating aggregate.
    """
    global _ratings
    if not 1 <= value <= 5:
        raise InvalidRatingError("Rating must be between 1 and 5")

    with _lock:
        recipes, ratings = _ensure_loaded()
        match = recipes[recipes["id"] == recipe_id]
        if match.empty:
            raise RecipeNotFoundError(f"Recipe {recipe_id!r} not found")
        if match.iloc[0]["author_id"] == user_id:
            raise InvalidRatingError("You cannot rate your own recipe")

        existing = (ratings["recipe_id"] == recipe_id) & (ratings["user_id"] == user_id)
        if existing.any():
            ratings.loc[existing, "value"] = int(value)
        else:
            row = pd.DataFrame([{"recipe_id": recipe_id, "user_id": user_id, "value": int(value)}])
            ratings = pd.concat([ratings, row], ignore_index=True)
        _ratings = ratings

        merged = _with_rating_stats(match, ratings)

    logger.debug("User %s rated recipe %s with %d", user_id, recipe_id, value)
    return _to_model(merged.to_dict("records")[0])
