"""
Drawing-game stroke and timing signals.

Strokes are scored on how they were produced rather than what they depict:
natural variation in stroke length and pen speed, and human-plausible pauses
between strokes. Content plausibility lives in content_analysis.
"""
import logging
from typing import Dict, List, Any, Sequence

from signal_utils import speed, mean, stddev, variance, clamp_score

logger = logging.getLogger(__name__)


# Stroke length spread (points) thresholds
STROKE_STDDEV_HUMAN = 3
STROKE_STDDEV_UNIFORM = 1

# Pen speed spread (px/ms) thresholds, applied with enough samples
MIN_SPEED_SAMPLES = 6
SPEED_STDDEV_HUMAN = 0.1
SPEED_STDDEV_UNIFORM = 0.02

# Plausible number of strokes for a quick sketch
MIN_STROKES = 3
MAX_STROKES = 20
OVER_SEGMENTED_STROKES = 50

# Pause variance (ms^2) thresholds
PAUSE_VARIANCE_HUMAN = 10000
PAUSE_VARIANCE_UNIFORM = 1000

# Mean pause window (seconds)
MIN_THINKING_PAUSE_S = 0.2
MAX_THINKING_PAUSE_S = 3.0
TOO_FAST_PAUSE_S = 0.1

# Total drawing time windows (seconds)
MIN_DRAWING_TIME_S = 5
MAX_DRAWING_TIME_S = 60
TOO_FAST_DRAWING_S = 2
SLOW_DRAWING_S = 120


def stroke_speeds(strokes: Sequence[Any]) -> List[float]:
    """Point-to-point pen speeds within each stroke, skipping zero time deltas."""
    speeds = []
    for stroke in strokes:
        points = stroke.points
        for i in range(1, len(points)):
            if points[i].timestamp - points[i - 1].timestamp > 0:
                speeds.append(speed(points[i - 1], points[i]))
    return speeds


def analyze_drawing_strokes(strokes: Sequence[Any]) -> Dict[str, Any]:
    """
    Score stroke production patterns.

    Args:
        strokes: Ordered strokes of one drawing

    Returns:
        Dictionary containing:
            - score: Stroke score [0, 100]
            - metrics: stroke_count, total_points, average_stroke_length,
              stroke_variance (stddev of points per stroke), speed_variance
              (stddev of pen speed)
            - details: Qualitative labels
    """
    if not strokes:
        return {'score': 0, 'reason': 'No drawing data'}

    score = 50
    lengths = [len(stroke.points) for stroke in strokes]

    metrics = {
        'stroke_count': len(strokes),
        'total_points': sum(lengths),
        'average_stroke_length': mean(lengths),
        'stroke_variance': stddev(lengths),
        'speed_variance': 0.0,
    }

    if metrics['stroke_variance'] > STROKE_STDDEV_HUMAN:
        score += 15
    elif metrics['stroke_variance'] < STROKE_STDDEV_UNIFORM:
        score -= 20

    speeds = stroke_speeds(strokes)
    if len(speeds) >= MIN_SPEED_SAMPLES:
        metrics['speed_variance'] = stddev(speeds)

        if metrics['speed_variance'] > SPEED_STDDEV_HUMAN:
            score += 20
        elif metrics['speed_variance'] < SPEED_STDDEV_UNIFORM:
            score -= 25

    if MIN_STROKES <= metrics['stroke_count'] <= MAX_STROKES:
        score += 10
    elif metrics['stroke_count'] > OVER_SEGMENTED_STROKES:
        score -= 15

    return {
        'score': clamp_score(score),
        'metrics': metrics,
        'details': {
            'stroke_analysis': 'Natural variation' if metrics['stroke_variance'] > STROKE_STDDEV_HUMAN else 'Low variation',
            'speed_analysis': 'Human-like speed changes' if metrics['speed_variance'] > SPEED_STDDEV_HUMAN else 'Consistent speed',
            'stroke_count': f"{metrics['stroke_count']} strokes",
        },
    }


def stroke_pauses(strokes: Sequence[Any]) -> List[int]:
    """Gaps (ms) between the end of one stroke and the start of the next."""
    pauses = []
    for prev, curr in zip(strokes, strokes[1:]):
        if prev.end_time is not None and curr.start_time is not None:
            pauses.append(curr.start_time - prev.end_time)
    return pauses


def analyze_drawing_timing(strokes: Sequence[Any]) -> Dict[str, Any]:
    """
    Score pauses between strokes and overall drawing duration.

    Args:
        strokes: Ordered strokes of one drawing

    Returns:
        Dictionary with score and a timing summary
    """
    if not strokes:
        return {'score': 50, 'reason': 'No timing data'}

    score = 50
    pauses = stroke_pauses(strokes)
    average_pause = mean(pauses)

    if pauses:
        pause_variance = variance(pauses)
        if pause_variance > PAUSE_VARIANCE_HUMAN:
            score += 20
        elif pause_variance < PAUSE_VARIANCE_UNIFORM:
            score -= 20

        avg_pause_s = average_pause / 1000
        if MIN_THINKING_PAUSE_S <= avg_pause_s <= MAX_THINKING_PAUSE_S:
            score += 15
        elif avg_pause_s < TOO_FAST_PAUSE_S:
            score -= 15

    total_time = None
    first, last = strokes[0], strokes[-1]
    if first.start_time is not None and last.end_time is not None:
        total_time = last.end_time - first.start_time
        total_s = total_time / 1000

        if MIN_DRAWING_TIME_S <= total_s <= MAX_DRAWING_TIME_S:
            score += 15
        elif total_s < TOO_FAST_DRAWING_S:
            score -= 25
        elif total_s > SLOW_DRAWING_S:
            score += 5

    return {
        'score': clamp_score(score),
        'timing': {
            'total_strokes': len(strokes),
            'pause_count': len(pauses),
            'average_pause': average_pause,
            'total_time': total_time,
        },
    }
