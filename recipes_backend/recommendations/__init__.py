"""
Recipe recommendation engine.

Responsibilities:
- Score published recipes against a user's preferences and rating history.
- Find similar recipes, trending recipes, and recipes for an occasion.
- Shape ranked recipes into API responses and cache them briefly.
"""
