"""
Redis-backed analytics event store.

Alternative to the in-memory ring buffer when several API workers must
share one event log. Events are kept in a capped Redis list per deployment
(newest first) and expire after EVENT_LOG_TTL seconds of inactivity.
"""
import redis.asyncio as redis
from redis.exceptions import RedisError
import os
import json
import logging
from typing import Optional, Dict, Any, List

from event_log import DEFAULT_CAPACITY, DEFAULT_QUERY_LIMIT, build_event

logger = logging.getLogger(__name__)


class RedisEventStore:
    """Async Redis event log manager."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self.redis: Optional[redis.Redis] = None
        self.capacity = capacity
        self.ttl = int(os.getenv("EVENT_LOG_TTL", "86400"))  # 1 day default
        self.key = os.getenv("EVENT_LOG_KEY", "captcha:events")

    async def connect(self):
        """Initialize Redis connection."""
        self.redis = redis.Redis(
            host=os.getenv("REDIS_HOST", "localhost"),
            port=int(os.getenv("REDIS_PORT", "6379")),
            password=os.getenv("REDIS_PASSWORD", None),
            db=int(os.getenv("REDIS_DB", "0")),
            decode_responses=False,  # We'll handle encoding manually
        )

    async def disconnect(self):
        """Close Redis connection."""
        if self.redis:
            await self.redis.close()

    async def record(self, session_id: str, event_type: str, **kwargs) -> Dict[str, Any]:
        """
        Push an event and trim the list to capacity.

        Returns:
            The stored event
        """
        event = build_event(session_id, event_type, **kwargs)
        if not self.redis:
            logger.warning("Redis event store not connected; dropping event")
            return event

        pipe = self.redis.pipeline()
        pipe.lpush(self.key, json.dumps(event).encode('utf-8'))
        pipe.ltrim(self.key, 0, self.capacity - 1)
        pipe.expire(self.key, self.ttl)
        await pipe.execute()
        return event

    async def query(self, session_id: Optional[str] = None, limit: int = DEFAULT_QUERY_LIMIT) -> List[Dict[str, Any]]:
        """
        Most recent events in chronological order, optionally for one session.
        """
        if not self.redis or limit <= 0:
            return []

        raw = await self.redis.lrange(self.key, 0, self.capacity - 1)
        events = [json.loads(item.decode('utf-8')) for item in reversed(raw)]
        if session_id:
            events = [e for e in events if e["session_id"] == session_id]
        return events[-limit:]

    async def ping(self) -> bool:
        """
        Test Redis connection.

        Returns:
            True if connected, False otherwise
        """
        if not self.redis:
            return False

        try:
            await self.redis.ping()
            return True
        except RedisError:
            return False
