"""
Projection cache for day grids.

Entries are keyed per (court, date) and hold what ``availability.day_grid``
built from the database. The synchronizer and the row-change feed only
ever delete entries; nothing writes schedule state through here.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable, List, Tuple

from django.conf import settings  # type: ignore
from django.core.cache import cache  # type: ignore

CACHE_KEYS_STORAGE_KEY = "schedule:cached_day_keys"


def _is_cache_enabled() -> bool:
    return getattr(settings, "SCHEDULE_CACHE_ENABLED", False)


def _build_cache_key(court_id: int, day: date) -> str:
    prefix = getattr(settings, "SCHEDULE_CACHE_PREFIX", "schedule:day")
    return f"{prefix}:{court_id}:{day.isoformat()}"


def _register_cache_key(key: str) -> None:
    keys: List[str] | None = cache.get(CACHE_KEYS_STORAGE_KEY)
    if keys is None:
        cache.set(CACHE_KEYS_STORAGE_KEY, [key], None)
        return
    if key in keys:
        return
    keys.append(key)
    cache.set(CACHE_KEYS_STORAGE_KEY, keys, None)


def get_cached_day(court_id: int, day: date, builder: Callable[[], list]) -> list:
    """Return the cached grid for a court day, building it on a miss."""
    if not _is_cache_enabled():
        return builder()

    key = _build_cache_key(court_id, day)
    cached = cache.get(key)
    if cached is not None:
        return cached

    result = builder()
    timeout = getattr(settings, "SCHEDULE_CACHE_TIMEOUT", 60)
    cache.set(key, result, timeout)
    _register_cache_key(key)
    return result


def invalidate_day(court_id: int, day: date) -> None:
    cache.delete(_build_cache_key(court_id, day))


def invalidate_days(pairs: Iterable[Tuple[int, date]]) -> None:
    keys = [_build_cache_key(court_id, day) for court_id, day in set(pairs)]
    if keys:
        cache.delete_many(keys)


def invalidate_schedule_cache() -> None:
    """Remove every cached day grid."""
    keys: List[str] | None = cache.get(CACHE_KEYS_STORAGE_KEY)
    if keys:
        cache.delete_many(keys)
    cache.delete(CACHE_KEYS_STORAGE_KEY)


__all__ = [
    "get_cached_day",
    "invalidate_day",
    "invalidate_days",
    "invalidate_schedule_cache",
]
