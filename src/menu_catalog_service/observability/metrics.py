"""Custom metrics for the menu catalog service."""

from opentelemetry import metrics

# Get meter for catalog service
meter = metrics.get_meter("menu-catalog-svc")

cache_hit_counter = meter.create_counter(
    name="catalog_cache_hits_total",
    description="Total number of cache lookups that returned a live entry",
    unit="1",
)

cache_miss_counter = meter.create_counter(
    name="catalog_cache_misses_total",
    description="Total number of cache lookups that found no live entry",
    unit="1",
)

cache_eviction_counter = meter.create_counter(
    name="catalog_cache_evictions_total",
    description="Total number of entries removed by expiry or capacity eviction",
    unit="1",
)

# Cache size gauge
cache_size = meter.create_up_down_counter(
    name="catalog_cache_entries",
    description="Current number of entries held in the cache",
    unit="1",
)

# Upstream API response time histogram
upstream_api_response_time = meter.create_histogram(
    name="upstream_api_response_time_seconds",
    description="Response time for upstream catalog API calls",
    unit="s",
)


def record_cache_hit() -> None:
    """Record a cache hit."""
    cache_hit_counter.add(1)


def record_cache_miss() -> None:
    """Record a cache miss."""
    cache_miss_counter.add(1)


def record_cache_eviction(reason: str, count: int = 1) -> None:
    """Record removed cache entries.

    Args:
        reason: Why entries were removed ("expired" or "capacity")
        count: Number of entries removed
    """
    cache_eviction_counter.add(count, {"reason": reason})


def record_cache_size_change(change: int) -> None:
    """Record a change in the number of cached entries.

    Args:
        change: Change in entry count (positive for additions, negative for removals)
    """
    cache_size.add(change)


def record_upstream_api_call(operation: str, duration_seconds: float, success: bool) -> None:
    """Record an upstream API call.

    Args:
        operation: The operation performed (e.g., "list_locations", "search_catalog_objects")
        duration_seconds: Duration in seconds
        success: Whether the call succeeded
    """
    upstream_api_response_time.record(
        duration_seconds, {"operation": operation, "success": success}
    )
