from __future__ import annotations

from collections import Counter
from typing import Any


def _rate(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    queries = [e for e in events if e["type"] == "recommendation"]
    total = len(queries)

    # Average response time
    times = [q["response_time_ms"] for q in queries if "response_time_ms" in q]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    type_counter: Counter[str] = Counter(q.get("query_type", "unknown") for q in queries)

    occasion_counter: Counter[str] = Counter(
        q["occasion"] for q in queries if q.get("occasion")
    )
    top_occasions = [{"name": n, "count": c} for n, c in occasion_counter.most_common(10)]

    category_counter: Counter[str] = Counter(
        q["category"] for q in queries if q.get("category")
    )
    top_categories = [{"name": n, "count": c} for n, c in category_counter.most_common(10)]

    empty_results = sum(1 for q in queries if q.get("results_returned", 0) == 0)
    authenticated = sum(1 for q in queries if q.get("user_id"))

    cache_hits = sum(1 for q in queries if q.get("cache_hit"))
    cache_misses = total - cache_hits

    return {
        "total_queries": total,
        "avg_response_time_ms": avg_time,
        "queries_by_type": dict(type_counter),
        "top_occasions": top_occasions,
        "top_categories": top_categories,
        "empty_result_rate": _rate(empty_results, total),
        "authenticated_rate": _rate(authenticated, total),
        "cache_stats": {
            "hits": cache_hits,
            "misses": cache_misses,
            "hit_rate": _rate(cache_hits, total),
        },
    }
