from recipes_backend.recommendations.keywords import (
    available_categories,
    available_occasions,
    category_keywords,
    cuisine_keywords,
    dietary_keywords,
    matches_any,
    meal_type_keywords,
    occasion_keywords,
)


def test_lookups_are_case_sensitive_on_tag():
    assert "pasta" in cuisine_keywords("Italian")
    assert cuisine_keywords("italian") == []


def test_unknown_tags_map_to_empty():
    assert dietary_keywords("Fruitarian") == []
    assert meal_type_keywords("Elevenses") == []
    assert occasion_keywords("not-a-real-tag") == []
    assert category_keywords("not-a-category") == []


def test_matches_any_is_plain_substring():
    # "vegan" also hits inside "veganism"
    assert matches_any("a guide to veganism", "", dietary_keywords("Vegan"))
    assert matches_any("stew", "with coconut milk", dietary_keywords("Dairy-Free"))
    assert not matches_any("beef stew", "", dietary_keywords("Vegan"))


def test_multi_word_keywords():
    assert matches_any("vanilla ice cream", "", meal_type_keywords("Dessert"))
    assert matches_any("ready in 30 minutes", "", category_keywords("quick"))


def test_available_tags():
    assert available_occasions() == [
        "quick_meals", "comfort_food", "healthy", "party", "romantic", "family", "weekend",
    ]
    assert "african" in available_categories()
    assert len(available_categories()) == 10
