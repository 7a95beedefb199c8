from __future__ import annotations

import hashlib
import json
import time
from typing import Any

from .config import DEFAULT_RECOMMENDATION_CONFIG

_cache: dict[str, dict[str, Any]] = {}
_hits: int = 0
_misses: int = 0


def _make_key(query: dict) -> str:
    normalized = json.dumps(query, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(query: dict, ttl: float = DEFAULT_RECOMMENDATION_CONFIG.cache_ttl_seconds) -> Any | None:
    """Return the cached response for *query*, or ``None`` if absent or expired."""
    global _hits, _misses
    key = _make_key(query)
    entry = _cache.get(key)
    if entry and time.time() - entry["created_at"] < ttl:
        _hits += 1
        return entry["value"]
    if entry:
        del _cache[key]
    _misses += 1
    return None


def cache_set(
    query: dict,
    value: Any,
    ttl: float = DEFAULT_RECOMMENDATION_CONFIG.cache_ttl_seconds,
    max_entries: int = DEFAULT_RECOMMENDATION_CONFIG.cache_max_entries,
) -> None:
    """Store *value*, sweeping expired entries and evicting the oldest past *max_entries*."""
    now = time.time()
    for key in [k for k, e in _cache.items() if now - e["created_at"] >= ttl]:
        del _cache[key]

    key = _make_key(query)
    _cache.pop(key, None)
    _cache[key] = {"value": value, "created_at": now}

    # dicts keep insertion order, so the first key is the oldest entry
    while len(_cache) > max(max_entries, 1):
        del _cache[next(iter(_cache))]


def get_cache_stats() -> dict:
    total = _hits + _misses
    return {
        "size": len(_cache),
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def invalidate() -> None:
    """Drop cached responses but keep hit/miss counters (ratings or preferences changed)."""
    _cache.clear()


def clear_cache() -> None:
    global _hits, _misses
    _cache.clear()
    _hits = 0
    _misses = 0
