from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class RecommendationConfig:
    default_limit: int = 6
    max_limit: int = 50
    cache_ttl_seconds: float = float(os.getenv("RECOMMENDATION_CACHE_TTL", "300"))
    cache_enabled: bool = os.getenv("RECOMMENDATION_CACHE_ENABLED", "1") != "0"
    cache_max_entries: int = int(os.getenv("RECOMMENDATION_CACHE_MAX_ENTRIES", "512"))
    # Meal types assumed for every signed-in user until profiles store their own
    default_meal_types: tuple[str, ...] = ("Breakfast", "Lunch", "Dinner")


DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()
