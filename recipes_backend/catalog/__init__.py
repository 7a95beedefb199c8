"""
Recipe catalog.

Responsibilities:
- Load recipes and ratings from the bundled CSV files.
- Join each recipe with its average rating and rating count.
- Record user ratings (one per user per recipe).
"""
