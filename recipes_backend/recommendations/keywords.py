"""
Keyword taxonomies used by the recommendation engine.

Each table maps a tag name to lowercase substrings. Matching is plain
case-insensitive substring containment against a recipe's title and
description, so "vegan" also matches "veganism".
"""
from __future__ import annotations

from typing import Iterable

CUISINE_KEYWORDS: dict[str, list[str]] = {
    "Italian": ["pasta", "pizza", "italian", "parmesan", "basil", "tomato"],
    "Asian": ["asian", "stir", "soy", "ginger", "sesame", "rice"],
    "Mexican": ["mexican", "tacos", "salsa", "avocado", "lime", "cilantro"],
    "Mediterranean": ["mediterranean", "olive", "feta", "herbs", "lemon"],
    "American": ["american", "burger", "bbq", "classic"],
    "French": ["french", "cream", "butter", "wine", "herbs"],
    "Indian": ["indian", "curry", "spices", "turmeric", "cumin"],
    "Thai": ["thai", "coconut", "lime", "chili", "lemongrass"],
    "Chinese": ["chinese", "wok", "soy", "ginger", "garlic"],
    "Japanese": ["japanese", "sushi", "miso", "sake", "seaweed"],
}

DIETARY_KEYWORDS: dict[str, list[str]] = {
    "Vegetarian": ["vegetarian", "vegetable", "plant", "mushroom"],
    "Vegan": ["vegan", "plant", "coconut", "tofu", "cashew"],
    "Gluten-Free": ["gluten-free", "rice", "quinoa", "almond"],
    "Dairy-Free": ["dairy-free", "coconut", "almond", "oat"],
    "Keto": ["keto", "low-carb", "high-fat", "avocado"],
    "Low-Carb": ["low-carb", "protein", "meat", "fish"],
    "Paleo": ["paleo", "natural", "whole", "unprocessed"],
    "Halal": ["halal", "lamb", "chicken", "beef"],
}

MEAL_TYPE_KEYWORDS: dict[str, list[str]] = {
    "Breakfast": ["breakfast", "morning", "pancake", "eggs", "toast", "cereal"],
    "Lunch": ["lunch", "sandwich", "salad", "soup", "wrap"],
    "Dinner": ["dinner", "main", "entree", "roast", "steak", "pasta"],
    "Snack": ["snack", "appetizer", "bite", "finger", "quick"],
    "Dessert": ["dessert", "sweet", "cake", "cookie", "chocolate", "ice cream"],
    "Brunch": ["brunch", "weekend", "eggs", "pancake", "french toast"],
}

OCCASION_KEYWORDS: dict[str, list[str]] = {
    "quick_meals": ["quick", "fast", "easy", "simple", "15", "20", "30"],
    "comfort_food": ["comfort", "hearty", "warm", "cozy", "classic", "traditional"],
    "healthy": ["healthy", "light", "fresh", "nutritious", "low-fat", "vegetable"],
    "party": ["party", "crowd", "entertaining", "appetizer", "finger", "sharing"],
    "romantic": ["romantic", "elegant", "special", "date", "intimate", "fancy"],
    "family": ["family", "kid-friendly", "crowd", "large", "sharing", "traditional"],
    "weekend": ["weekend", "leisurely", "slow", "project", "special", "indulgent"],
}

CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "desserts": ["dessert", "cake", "cookie", "sweet", "chocolate", "ice cream", "pie"],
    "main_dishes": ["main", "dinner", "entree", "chicken", "beef", "pasta", "rice"],
    "appetizers": ["appetizer", "starter", "snack", "finger", "dip", "bite"],
    "breakfast": ["breakfast", "morning", "pancake", "eggs", "toast", "oatmeal"],
    "healthy": ["healthy", "light", "fresh", "salad", "vegetable", "low-fat"],
    "comfort": ["comfort", "hearty", "warm", "cozy", "classic", "traditional"],
    "quick": ["quick", "fast", "easy", "simple", "15", "20", "30 min"],
    "international": ["italian", "asian", "mexican", "french", "indian", "thai"],
    "african": ["african", "cameroon", "nigerian", "ghanaian", "ethiopian", "moroccan"],
    "vegetarian": ["vegetarian", "veggie", "plant", "meatless", "vegetable"],
}


def cuisine_keywords(cuisine: str) -> list[str]:
    return CUISINE_KEYWORDS.get(cuisine, [])


def dietary_keywords(diet: str) -> list[str]:
    return DIETARY_KEYWORDS.get(diet, [])


def meal_type_keywords(meal_type: str) -> list[str]:
    return MEAL_TYPE_KEYWORDS.get(meal_type, [])


def occasion_keywords(occasion: str) -> list[str]:
    return OCCASION_KEYWORDS.get(occasion, [])


def category_keywords(category: str) -> list[str]:
    return CATEGORY_KEYWORDS.get(category, [])


def matches_any(title: str, description: str, keywords: Iterable[str]) -> bool:
    """Return True if any keyword occurs in *title* or *description* (both already lowercased)."""
    return any(k in title or k in description for k in keywords)


def available_occasions() -> list[str]:
    return list(OCCASION_KEYWORDS)


def available_categories() -> list[str]:
    return list(CATEGORY_KEYWORDS)
