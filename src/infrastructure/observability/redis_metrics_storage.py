"""
Redis-backed metrics storage.

Counters live in Redis so every gunicorn worker contributes to one shared
view. Storage failures are logged and never propagate into request handling.
"""

import logging
import time

import redis.asyncio as aioredis
from config.settings import settings

logger = logging.getLogger(__name__)

REQUEST_COUNTS_KEY = "metrics:request_counts"
STATUS_COUNTS_KEY = "metrics:status_counts"
AUTH_EVENTS_KEY = "metrics:auth_events"
LATENCY_KEY_PREFIX = "metrics:latencies:"

AUTH_EVENTS = (
    "registrations",
    "activations",
    "authentications",
    "authenticated_requests",
    "anonymous_requests",
)


class RedisMetricsStorage:
    """
    Redis-backed metrics storage.

    Uses a HASH per counter family and a ZSET of recent latency samples per
    endpoint (scored by timestamp, trimmed to a fixed window).
    """

    def __init__(self, redis_client: aioredis.Redis | None = None):
        """
        Initialize Redis metrics storage.

        Args:
            redis_client: Optional Redis client (injected for testing)
        """
        self._redis: aioredis.Redis | None = redis_client
        self._metrics_ttl = 3600
        self._latency_window_size = 1000

    async def _get_redis(self) -> aioredis.Redis:
        if self._redis is None:
            self._redis = aioredis.from_url(
                f"redis://{settings.redis_host}:{settings.redis_port}/{settings.redis_db}",
                encoding="utf-8",
                decode_responses=True,
            )
        return self._redis

    async def _hincr(self, key: str, field: str) -> None:
        try:
            redis = await self._get_redis()
            await redis.hincrby(key, field, 1)
            await redis.expire(key, self._metrics_ttl)
        except Exception as e:
            logger.error(f"Failed to increment {key}[{field}]: {e}")

    async def increment_request_count(self, endpoint: str) -> None:
        await self._hincr(REQUEST_COUNTS_KEY, endpoint)

    async def increment_status_count(self, status_code: int) -> None:
        await self._hincr(STATUS_COUNTS_KEY, str(status_code))

    async def increment_auth_event(self, event: str) -> None:
        """
        Count an authentication event.

        Args:
            event: One of AUTH_EVENTS
        """
        await self._hincr(AUTH_EVENTS_KEY, event)

    async def add_latency(self, endpoint: str, duration_ms: float) -> None:
        try:
            redis = await self._get_redis()
            key = f"{LATENCY_KEY_PREFIX}{endpoint}"
            now = time.time()
            await redis.zadd(key, {f"{now}:{duration_ms}": now})
            await redis.zremrangebyrank(key, 0, -self._latency_window_size - 1)
            await redis.expire(key, self._metrics_ttl)
        except Exception as e:
            logger.error(f"Failed to add latency for {endpoint}: {e}")

    async def get_metrics(self) -> dict:
        """
        Get aggregated metrics from Redis.

        Returns:
            Counters plus p50/p95/p99 latency per endpoint
        """
        try:
            redis = await self._get_redis()

            request_counts = await redis.hgetall(REQUEST_COUNTS_KEY) or {}
            status_counts = await redis.hgetall(STATUS_COUNTS_KEY) or {}
            auth_events = await redis.hgetall(AUTH_EVENTS_KEY) or {}

            latencies = {}
            for key in await redis.keys(f"{LATENCY_KEY_PREFIX}*"):
                durations = sorted(
                    float(sample.split(":", 1)[1]) for sample in await redis.zrange(key, 0, -1)
                )
                if durations:
                    latencies[key.removeprefix(LATENCY_KEY_PREFIX)] = {
                        "count": len(durations),
                        "p50": percentile(durations, 50),
                        "p95": percentile(durations, 95),
                        "p99": percentile(durations, 99),
                    }

            return {
                "request_counts": {k: int(v) for k, v in request_counts.items()},
                "status_counts": {int(k): int(v) for k, v in status_counts.items()},
                "auth_events": {event: int(auth_events.get(event, 0)) for event in AUTH_EVENTS},
                "latencies": latencies,
            }
        except Exception as e:
            logger.error(f"Failed to get metrics: {e}")
            return empty_metrics()

    async def close(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None


def empty_metrics() -> dict:
    return {
        "request_counts": {},
        "status_counts": {},
        "auth_events": {event: 0 for event in AUTH_EVENTS},
        "latencies": {},
    }


def percentile(sorted_values: list[float], pct: int) -> float:
    """Linear-interpolated percentile of an ascending list."""
    if not sorted_values:
        return 0.0

    k = (len(sorted_values) - 1) * pct / 100
    f = int(k)
    c = f + 1
    if c >= len(sorted_values):
        return round(sorted_values[-1], 2)
    return round(sorted_values[f] * (c - k) + sorted_values[c] * (k - f), 2)


_metrics_storage: RedisMetricsStorage | None = None


def get_metrics_storage() -> RedisMetricsStorage:
    """Get or create the process-wide metrics storage."""
    global _metrics_storage
    if _metrics_storage is None:
        _metrics_storage = RedisMetricsStorage()
    return _metrics_storage
