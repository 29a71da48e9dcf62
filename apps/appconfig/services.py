"""Read-through cache over ``AppConfig`` rows.

The whole table is small, so it is loaded as a single snapshot and kept in
Django's cache. ``reload()`` is called by model signals whenever an admin
changes an entry; callers receive the store as an explicit dependency.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from django.conf import settings  # type: ignore
from django.core.cache import cache  # type: ignore

from .models import AppConfig

logger = logging.getLogger(__name__)

SNAPSHOT_CACHE_KEY = "appconfig:snapshot"

DEFAULTS: Dict[str, Any] = {
    AppConfig.Keys.TIME_MIN_BOOKING.value: {"vip": 0, "individual": 0, "group": 0},
    AppConfig.Keys.PERCENTAGE_PENALTY.value: 0,
    AppConfig.Keys.EXPIRED_DAYS.value: 0,
}

_MISSING = object()


class ConfigStore:
    """Process-wide view of the platform configuration."""

    def __init__(self, cache_backend=None, timeout: int | None = None):
        self._cache = cache_backend or cache
        self._timeout = timeout

    @property
    def timeout(self) -> int:
        if self._timeout is not None:
            return self._timeout
        return getattr(settings, "APP_CONFIG_CACHE_TIMEOUT", 300)

    def load(self) -> Dict[str, Any]:
        """Return the cached snapshot, reading the table on a cache miss."""
        snapshot = self._cache.get(SNAPSHOT_CACHE_KEY)
        if snapshot is None:
            snapshot = self.reload()
        return snapshot

    def reload(self) -> Dict[str, Any]:
        snapshot = dict(AppConfig.objects.values_list("key", "value"))
        self._cache.set(SNAPSHOT_CACHE_KEY, snapshot, self.timeout)
        logger.info(f"AppConfig reloaded: {sorted(snapshot)}")
        return snapshot

    def get(self, key: str, default: Any = _MISSING) -> Any:
        key = str(key)
        snapshot = self.load()
        if key in snapshot:
            return snapshot[key]
        if default is not _MISSING:
            return default
        if key in DEFAULTS:
            logger.warning(f"AppConfig key '{key}' is not set, using default {DEFAULTS[key]!r}")
            return DEFAULTS[key]
        raise KeyError(key)

    # --- Typed accessors -------------------------------------------------

    def time_min_booking(self) -> Dict[str, int]:
        value = self.get(AppConfig.Keys.TIME_MIN_BOOKING) or {}
        return {kind: int(value.get(kind) or 0) for kind in ("vip", "individual", "group")}

    def percentage_penalty(self) -> int:
        return int(self.get(AppConfig.Keys.PERCENTAGE_PENALTY) or 0)

    def expired_days(self) -> int:
        return int(self.get(AppConfig.Keys.EXPIRED_DAYS) or 0)


config_store = ConfigStore()
