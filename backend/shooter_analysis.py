"""
Shooter-game behavioral signals.

This module scores the telemetry recorded while playing the shooter game:
- Pointer movement smoothness (speed and speed changes)
- Reaction time distribution
- Click interval regularity
- Shot accuracy

Every analyzer is a pure function returning a breakdown dict with a
``score`` in [0, 100]. Sparse input degrades to a neutral or zero score
with a ``reason`` instead of raising.
"""
import logging
from typing import Dict, List, Any, Optional, Sequence

import numpy as np

from config import ScoringConfig, get_default_config, validate_weights
from signal_utils import speed, mean, stddev, variance, intervals, all_within, clamp_score

logger = logging.getLogger(__name__)


SHOOTER_WEIGHTS = validate_weights({
    'mouse': 0.3,
    'reaction': 0.3,
    'clicks': 0.2,
    'accuracy': 0.2,
})

MIN_MOUSE_POINTS = 5

# Reaction time spread (ms) above which timing looks natural
REACTION_STDDEV_HUMAN = 50
# All samples within this distance (ms) of the mean look scripted
REACTION_TOO_CONSISTENT = 10

# Interval variance (ms^2) above which clicking looks natural
CLICK_VARIANCE_HUMAN = 10000
# All intervals within this distance (ms) of the mean look mechanical
CLICK_TOO_REGULAR = 50


def segment_speeds(mouse_moves: Sequence[Any]) -> List[float]:
    """Speed (px/ms) of each consecutive pair of pointer samples."""
    return [speed(mouse_moves[i - 1], mouse_moves[i]) for i in range(1, len(mouse_moves))]


def analyze_mouse_movement(
    mouse_moves: Sequence[Any],
    config: Optional[ScoringConfig] = None
) -> Dict[str, Any]:
    """
    Score pointer movement for human-like irregularity.

    Humans accelerate and decelerate constantly; scripted pointers tend to
    move at near-constant or impossible speeds.

    Args:
        mouse_moves: Ordered pointer samples with x, y, timestamp
        config: Thresholds (MIN_MOUSE_VARIANCE, MAX_MOUSE_SPEED)

    Returns:
        Dictionary containing:
            - score: Mouse movement score [0, 100]
            - avg_speed: Mean segment speed (px/ms)
            - speed_variance: Mean absolute change between segment speeds
            - data_points: Number of samples
            - speeds: Derived per-segment speeds
    """
    config = config or get_default_config()

    if len(mouse_moves) < MIN_MOUSE_POINTS:
        return {'score': 50, 'reason': 'Insufficient mouse data', 'data_points': len(mouse_moves)}

    speeds = segment_speeds(mouse_moves)
    avg_speed = mean(speeds)
    speed_changes = np.abs(np.diff(speeds))
    speed_variance = float(speed_changes.mean()) if speed_changes.size else 0.0

    score = 50

    # Too consistent = likely bot
    if speed_variance < config.MIN_MOUSE_VARIANCE:
        score -= 20

    # Impossible speeds
    if avg_speed > config.MAX_MOUSE_SPEED:
        score -= 30

    # Natural variance
    if speed_variance > config.MIN_MOUSE_VARIANCE * 2:
        score += 20

    return {
        'score': clamp_score(score),
        'avg_speed': avg_speed,
        'speed_variance': speed_variance,
        'data_points': len(mouse_moves),
        'speeds': speeds,
    }


def analyze_reaction_times(
    reaction_times: Sequence[float],
    config: Optional[ScoringConfig] = None
) -> Dict[str, Any]:
    """
    Score the distribution of stimulus-to-response times.

    Args:
        reaction_times: Reaction durations in ms
        config: Thresholds (MIN_REACTION_TIME, MAX_REACTION_TIME)

    Returns:
        Dictionary with score, average, std_dev and samples
    """
    config = config or get_default_config()

    if len(reaction_times) == 0:
        return {'score': 0, 'reason': 'No reaction time data', 'samples': 0}

    avg = mean(reaction_times)
    std_dev = stddev(reaction_times)

    score = 50

    if config.MIN_REACTION_TIME <= avg <= config.MAX_REACTION_TIME:
        score += 20
    else:
        score -= 30  # Too fast or too slow

    if std_dev > REACTION_STDDEV_HUMAN:
        score += 15
    else:
        score -= 15

    too_consistent = all_within(reaction_times, avg, REACTION_TOO_CONSISTENT)
    if too_consistent and len(reaction_times) > 2:
        score -= 40

    return {
        'score': clamp_score(score),
        'average': avg,
        'std_dev': std_dev,
        'samples': len(reaction_times),
        'too_consistent': too_consistent and len(reaction_times) > 2,
    }


def analyze_click_patterns(click_times: Sequence[float]) -> Dict[str, Any]:
    """
    Score the regularity of click timing.

    Args:
        click_times: Click offsets (ms) from game start, in order

    Returns:
        Dictionary with score, click_count, intervals and interval_variance
    """
    if len(click_times) == 0:
        return {'score': 50, 'reason': 'No click data', 'click_count': 0}

    score = 50
    gaps = intervals(click_times)
    interval_variance = variance(gaps)

    if gaps:
        if interval_variance > CLICK_VARIANCE_HUMAN:
            score += 15
        else:
            score -= 20

        too_regular = all_within(gaps, mean(gaps), CLICK_TOO_REGULAR)
        if too_regular and len(gaps) > 2:
            score -= 30

    return {
        'score': clamp_score(score),
        'click_count': len(click_times),
        'intervals': len(gaps),
        'interval_variance': interval_variance,
    }


def analyze_accuracy(
    shots: int,
    hits: int,
    config: Optional[ScoringConfig] = None
) -> Dict[str, Any]:
    """
    Score shot accuracy.

    Flawless accuracy over several shots is treated as suspicious; a
    moderate hit rate is the typical human band.
    """
    config = config or get_default_config()

    if shots <= 0:
        return {'score': 50, 'reason': 'No shots fired', 'shots': 0, 'hits': 0}

    hits = max(0, min(hits, shots))
    accuracy = hits / shots

    score = 50
    if accuracy == 1.0 and shots > 2:
        score -= 25
    elif config.MIN_ACCURACY <= accuracy <= config.MAX_ACCURACY:
        score += 20
    elif accuracy < config.MIN_ACCURACY:
        score -= 15

    return {
        'score': clamp_score(score),
        'accuracy': accuracy,
        'shots': shots,
        'hits': hits,
    }


def analyze_shooter_signals(analytics, config: Optional[ScoringConfig] = None) -> Dict[str, Dict[str, Any]]:
    """
    Run every shooter analyzer on one snapshot.

    Args:
        analytics: ShooterAnalytics snapshot

    Returns:
        Mapping of analyzer name to breakdown, keyed like SHOOTER_WEIGHTS
    """
    config = config or get_default_config()

    breakdown = {
        'mouse': analyze_mouse_movement(analytics.mouse_moves, config),
        'reaction': analyze_reaction_times(analytics.reaction_times, config),
        'clicks': analyze_click_patterns(analytics.click_times),
        'accuracy': analyze_accuracy(analytics.shots, analytics.hits, config),
    }

    logger.debug(
        "Shooter sub-scores: " +
        ", ".join(f"{name}={result['score']:.1f}" for name, result in breakdown.items())
    )
    return breakdown
