"""
Telemetry recorders for the mini-games.

A recorder is the only stateful piece of a verification: the game loop (or
canvas) feeds it pointer and click events, and ``snapshot()`` freezes the
collected telemetry into the immutable records the analyzers consume.
"""
import time
import logging
from typing import Dict, List, Any, Optional

from schemas import (
    InteractionPoint,
    MouseMove,
    Stroke,
    CanvasDimensions,
    DrawingData,
    DrawingAnalytics,
    InteractionEvent,
    ShooterAnalytics,
)
from signal_utils import speed

logger = logging.getLogger(__name__)


# Upper bound on buffered pointer samples per session
DEFAULT_MAX_MOUSE_MOVES = 5000


def now_ms() -> int:
    return int(time.time() * 1000)


def calculate_reaction_time(stimulus_time: int, response_time: int) -> int:
    """Elapsed time between a stimulus and the user's response."""
    return response_time - stimulus_time


class ShooterSessionRecorder:
    """Collects shooter-game telemetry."""

    def __init__(self, max_mouse_moves: int = DEFAULT_MAX_MOUSE_MOVES):
        self.max_mouse_moves = max_mouse_moves
        self.reset()

    def reset(self):
        self.start_time: Optional[int] = None
        self.end_time: Optional[int] = None
        self.shots = 0
        self.hits = 0
        self.mouse_moves: List[MouseMove] = []
        self.click_times: List[int] = []
        self.reaction_times: List[int] = []

    @property
    def active(self) -> bool:
        return self.start_time is not None and self.end_time is None

    def start(self, timestamp: Optional[int] = None):
        """Start (or restart) a game, clearing previous telemetry."""
        self.reset()
        self.start_time = timestamp if timestamp is not None else now_ms()

    def track_mouse_move(self, x: float, y: float, timestamp: Optional[int] = None) -> Optional[MouseMove]:
        """
        Record a pointer sample while the game is active.

        Returns:
            The recorded sample, or None when ignored
        """
        if not self.active:
            return None
        if len(self.mouse_moves) >= self.max_mouse_moves:
            return None

        timestamp = timestamp if timestamp is not None else now_ms()
        point = InteractionPoint(x=x, y=y, timestamp=timestamp)
        derived = speed(self.mouse_moves[-1], point) if self.mouse_moves else 0.0
        move = MouseMove(x=x, y=y, timestamp=timestamp, speed=derived)
        self.mouse_moves.append(move)
        return move

    def record_shot(self, timestamp: Optional[int] = None):
        """Record a fired shot and its offset from game start."""
        if not self.active:
            return
        timestamp = timestamp if timestamp is not None else now_ms()
        self.shots += 1
        self.click_times.append(timestamp - self.start_time)

    def record_hit(self):
        if not self.active:
            return
        if self.hits >= self.shots:
            logger.warning("Hit recorded without a matching shot; ignoring")
            return
        self.hits += 1

    def record_reaction(self, stimulus_time: int, response_time: int):
        if not self.active:
            return
        self.reaction_times.append(calculate_reaction_time(stimulus_time, response_time))

    def finish(self, timestamp: Optional[int] = None):
        if self.start_time is None:
            return
        self.end_time = timestamp if timestamp is not None else now_ms()

    def snapshot(self) -> ShooterAnalytics:
        """Freeze the collected telemetry."""
        return ShooterAnalytics(
            shots=self.shots,
            hits=self.hits,
            mouse_moves=list(self.mouse_moves),
            click_times=list(self.click_times),
            reaction_times=list(self.reaction_times),
            start_time=self.start_time,
            end_time=self.end_time,
        )


class DrawingSessionRecorder:
    """Collects strokes and interactions from the drawing canvas."""

    def __init__(self, start_time: Optional[int] = None):
        self.start_time = start_time if start_time is not None else now_ms()
        self.end_time: Optional[int] = None
        self.strokes: List[Dict[str, Any]] = []
        self.mouse_moves: List[InteractionPoint] = []
        self.interactions: List[InteractionEvent] = []
        self._current: Optional[Dict[str, Any]] = None
        self._next_id = 1

    @property
    def drawing(self) -> bool:
        return self._current is not None

    def begin_stroke(
        self,
        x: float,
        y: float,
        timestamp: Optional[int] = None,
        brush_size: float = 5.0,
        brush_color: str = "#000000"
    ):
        """Pointer down: open a new stroke."""
        if self._current is not None:
            self.end_stroke(timestamp)

        timestamp = timestamp if timestamp is not None else now_ms()
        self._current = {
            "id": self._next_id,
            "points": [InteractionPoint(x=x, y=y, timestamp=timestamp)],
            "brush_size": brush_size,
            "brush_color": brush_color,
            "start_time": timestamp,
            "end_time": None,
        }
        self._next_id += 1
        self.strokes.append(self._current)

    def add_point(self, x: float, y: float, timestamp: Optional[int] = None):
        """Pointer move: extend the open stroke, or record a hover sample."""
        timestamp = timestamp if timestamp is not None else now_ms()
        point = InteractionPoint(x=x, y=y, timestamp=timestamp)
        self.mouse_moves.append(point)
        if self._current is not None:
            self._current["points"].append(point)

    def end_stroke(self, timestamp: Optional[int] = None):
        """Pointer up: close the open stroke."""
        if self._current is None:
            return
        self._current["end_time"] = timestamp if timestamp is not None else now_ms()
        self._current = None

    def undo(self, timestamp: Optional[int] = None) -> bool:
        """Remove the most recent stroke."""
        if not self.strokes:
            return False
        removed = self.strokes.pop()
        if removed is self._current:
            self._current = None
        self.record_interaction("undo", timestamp, stroke_id=removed["id"])
        return True

    def clear(self, timestamp: Optional[int] = None):
        """Remove every stroke."""
        self.strokes = []
        self._current = None
        self.record_interaction("clear", timestamp)

    def record_interaction(self, event_type: str, timestamp: Optional[int] = None, **data):
        timestamp = timestamp if timestamp is not None else now_ms()
        self.interactions.append(InteractionEvent(type=event_type, timestamp=timestamp, data=data))

    def finish(self, timestamp: Optional[int] = None):
        self.end_stroke(timestamp)
        self.end_time = timestamp if timestamp is not None else now_ms()

    def _frozen_strokes(self) -> List[Stroke]:
        return [Stroke(**{**s, "points": list(s["points"])}) for s in self.strokes]

    def snapshot(self) -> DrawingAnalytics:
        """Freeze the collected telemetry."""
        return DrawingAnalytics(
            start_time=self.start_time,
            strokes=self._frozen_strokes(),
            mouse_moves=list(self.mouse_moves),
            interactions=list(self.interactions),
            end_time=self.end_time,
        )

    def drawing_data(self, width: float, height: float) -> DrawingData:
        """Export strokes together with the canvas size."""
        return DrawingData(
            strokes=self._frozen_strokes(),
            dimensions=CanvasDimensions(width=width, height=height),
        )
