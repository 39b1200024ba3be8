"""
Bounded in-memory log of client analytics events.

Owned by the HTTP layer; the scoring modules never read or write it.
Only the most recent ``capacity`` events are kept.
"""
import time
import uuid
import logging
import threading
from collections import deque
from typing import Dict, List, Any, Optional

logger = logging.getLogger(__name__)


DEFAULT_CAPACITY = 1000
DEFAULT_QUERY_LIMIT = 100


def new_event_id() -> str:
    return f"event_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def build_event(
    session_id: str,
    event_type: str,
    data: Optional[Dict[str, Any]] = None,
    timestamp: Optional[int] = None,
    user_agent: Optional[str] = None,
    ip: Optional[str] = None
) -> Dict[str, Any]:
    """Assemble an event record."""
    return {
        "id": new_event_id(),
        "session_id": session_id,
        "event_type": event_type,
        "data": data or {},
        "timestamp": timestamp if timestamp is not None else int(time.time() * 1000),
        "user_agent": user_agent,
        "ip": ip or "unknown",
    }


def compute_statistics(events: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Summarize a list of events.

    Returns:
        Dictionary with total_events, event_types (first-seen order) and
        time_range (None when empty)
    """
    event_types = list(dict.fromkeys(e["event_type"] for e in events))
    time_range = None
    if events:
        timestamps = [e["timestamp"] for e in events]
        time_range = {"start": min(timestamps), "end": max(timestamps)}

    return {
        "total_events": len(events),
        "event_types": event_types,
        "time_range": time_range,
    }


class AnalyticsEventLog:
    """Thread-safe ring buffer of analytics events."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._events: deque = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._events)

    def record(self, session_id: str, event_type: str, **kwargs) -> Dict[str, Any]:
        """
        Append an event, evicting the oldest when full.

        Returns:
            The stored event
        """
        event = build_event(session_id, event_type, **kwargs)
        with self._lock:
            self._events.append(event)
        logger.debug(f"Recorded analytics event {event['id']} ({event_type}) for {session_id}")
        return event

    def query(self, session_id: Optional[str] = None, limit: int = DEFAULT_QUERY_LIMIT) -> List[Dict[str, Any]]:
        """Most recent events, optionally for one session."""
        with self._lock:
            events = list(self._events)
        if session_id:
            events = [e for e in events if e["session_id"] == session_id]
        if limit <= 0:
            return []
        return events[-limit:]

    def clear(self):
        with self._lock:
            self._events.clear()
