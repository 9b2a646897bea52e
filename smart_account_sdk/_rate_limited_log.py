"""
Thread-safe rate-limited logging for the HTTP clients.

Identical warnings from a misbehaving remote service are logged once per
interval instead of once per request.
"""
import logging
import threading
from typing import Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

_log_caches = {}
_log_caches_lock = threading.RLock()


def _cache_for(interval: int) -> TTLCache:
    with _log_caches_lock:
        cache = _log_caches.get(interval)
        if cache is None:
            cache = TTLCache(maxsize=100, ttl=interval)
            _log_caches[interval] = cache
        return cache


def rate_limited_log(
    message: str,
    level: str = "warning",
    interval: int = 60,
    logger_instance: Optional[logging.Logger] = None
) -> bool:
    """
    Log a message unless the same message was logged at the same level
    within the last ``interval`` seconds.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        interval: Minimum interval between identical logs in seconds
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        True if the message was logged, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    key = f"{log_instance.name}:{level}:{message}"

    cache = _cache_for(interval)
    with _log_caches_lock:
        if key in cache:
            return False
        log_method(message)
        cache[key] = True
    return True


def reset_rate_limits() -> None:
    """Forget every previously logged message."""
    with _log_caches_lock:
        for cache in _log_caches.values():
            cache.clear()
