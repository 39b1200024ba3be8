"""
Tests for analytics event storage (in-memory ring buffer and Redis store).
"""
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from event_log import AnalyticsEventLog, build_event, compute_statistics
from cache import RedisEventStore


class TestRingBuffer:
    """Test the bounded in-memory log."""

    def test_record(self):
        log = AnalyticsEventLog()
        event = log.record("s1", "game_start", data={"level": 1}, timestamp=1000, ip=None)
        assert event["id"].startswith("event_")
        assert event["session_id"] == "s1"
        assert event["data"] == {"level": 1}
        assert event["ip"] == "unknown"
        assert len(log) == 1

    def test_capacity_evicts_oldest(self):
        log = AnalyticsEventLog(capacity=3)
        for i in range(5):
            log.record("s1", f"event_{i}", timestamp=i)
        events = log.query()
        assert len(log) == 3
        assert [e["event_type"] for e in events] == ["event_2", "event_3", "event_4"]

    def test_query_by_session_and_limit(self):
        log = AnalyticsEventLog()
        for i in range(6):
            log.record("a" if i % 2 else "b", "click", timestamp=i)
        assert [e["timestamp"] for e in log.query(session_id="a")] == [1, 3, 5]
        assert [e["timestamp"] for e in log.query(limit=2)] == [4, 5]
        assert log.query(limit=0) == []

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            AnalyticsEventLog(capacity=0)

    def test_clear(self):
        log = AnalyticsEventLog()
        log.record("s1", "click")
        log.clear()
        assert log.query() == []


class TestStatistics:

    def test_empty(self):
        assert compute_statistics([]) == {"total_events": 0, "event_types": [], "time_range": None}

    def test_summary(self):
        events = [build_event("s", t, timestamp=ts) for t, ts in [("start", 50), ("click", 10), ("start", 90)]]
        stats = compute_statistics(events)
        assert stats["total_events"] == 3
        assert stats["event_types"] == ["start", "click"]
        assert stats["time_range"] == {"start": 10, "end": 90}


class TestRedisEventStore:
    """Test the Redis store against a mocked client."""

    def make_store(self, capacity=10):
        store = RedisEventStore(capacity=capacity)
        store.redis = MagicMock()
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[1, True, True])
        store.redis.pipeline.return_value = pipe
        return store, pipe

    def test_record_pushes_and_trims(self):
        store, pipe = self.make_store(capacity=5)
        event = asyncio.run(store.record("s1", "click", timestamp=100))

        pushed_key, payload = pipe.lpush.call_args[0]
        assert pushed_key == store.key
        assert json.loads(payload.decode("utf-8"))["id"] == event["id"]
        pipe.ltrim.assert_called_once_with(store.key, 0, 4)
        pipe.execute.assert_awaited_once()

    def test_query_returns_chronological(self):
        store, _ = self.make_store()
        newest_first = [
            json.dumps(build_event("s2", "click", timestamp=30)).encode("utf-8"),
            json.dumps(build_event("s1", "click", timestamp=20)).encode("utf-8"),
            json.dumps(build_event("s1", "start", timestamp=10)).encode("utf-8"),
        ]
        store.redis.lrange = AsyncMock(return_value=newest_first)

        events = asyncio.run(store.query())
        assert [e["timestamp"] for e in events] == [10, 20, 30]

        events = asyncio.run(store.query(session_id="s1", limit=1))
        assert [e["timestamp"] for e in events] == [20]

    def test_not_connected(self):
        store = RedisEventStore()
        assert asyncio.run(store.query()) == []
        assert asyncio.run(store.ping()) is False
        event = asyncio.run(store.record("s1", "click"))
        assert event["session_id"] == "s1"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
