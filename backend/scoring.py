"""
Score fusion for game-based human verification.

This module implements:
- Weighted fusion of analyzer sub-scores into a 0-100 total
- The shooter-game aggregator (mouse, reaction, clicks, accuracy)
- The drawing-game aggregator (strokes, timing, content)
- Session identifiers for verification attempts

Both aggregators are pure: the same snapshot always yields the same result.
"""
import math
import time
import uuid
import logging
from typing import Dict, Any, Mapping, Optional

import numpy as np

from config import ScoringConfig, resolve_config, validate_weights
from policy import GameType, HumanVerificationResult, decide
from shooter_analysis import SHOOTER_WEIGHTS, analyze_shooter_signals
from drawing_analysis import analyze_drawing_strokes, analyze_drawing_timing
from content_analysis import analyze_drawing_content
from schemas import DrawingData, DrawingAnalytics, ShooterAnalytics

logger = logging.getLogger(__name__)


DRAWING_WEIGHTS = validate_weights({
    'strokes': 0.3,
    'timing': 0.3,
    'content': 0.4,
})


def combine_scores(
    breakdown: Mapping[str, Dict[str, Any]],
    weights: Mapping[str, float]
) -> int:
    """
    Weighted sum of sub-scores, clipped to [0, 100] and rounded half up.

    Args:
        breakdown: Analyzer name -> result dict with a 'score'
        weights: Analyzer name -> weight (summing to 1.0)

    Returns:
        Integer total score
    """
    names = list(weights)
    scores = np.clip(np.array([breakdown[name]['score'] for name in names], dtype=np.float64), 0, 100)
    weight_vec = np.array([weights[name] for name in names], dtype=np.float64)

    weighted = float(np.clip(np.dot(scores, weight_vec), 0, 100))
    return int(math.floor(weighted + 0.5))


def score_shooter_session(
    analytics: ShooterAnalytics,
    config: Optional[ScoringConfig] = None
) -> HumanVerificationResult:
    """
    Score a finished shooter game.

    Args:
        analytics: Shooter telemetry snapshot
        config: Thresholds, or a mapping of option overrides

    Returns:
        HumanVerificationResult with mouse, reaction, clicks and accuracy breakdowns
    """
    config = resolve_config(config)

    breakdown = analyze_shooter_signals(analytics, config)
    total_score = combine_scores(breakdown, SHOOTER_WEIGHTS)
    result = decide(total_score, breakdown, config.HUMAN_SCORE_THRESHOLD, GameType.SHOOTER)

    logger.debug(f"Shooter session scored: total={total_score} is_human={result.is_human}")
    return result


def score_drawing_session(
    drawing_data: DrawingData,
    prompt: str,
    analytics: Optional[DrawingAnalytics] = None,
    config: Optional[ScoringConfig] = None
) -> HumanVerificationResult:
    """
    Score a finished drawing.

    Strokes come from ``drawing_data``. The session analytics are accepted
    for interface symmetry with the drawing game; interaction events are
    reported in the breakdown but do not affect the score.

    Args:
        drawing_data: Strokes and canvas dimensions
        prompt: Prompt the user was asked to draw
        analytics: Optional drawing session telemetry
        config: Thresholds, or a mapping of option overrides

    Returns:
        HumanVerificationResult with strokes, timing and content breakdowns
    """
    config = resolve_config(config)

    breakdown = {
        'strokes': analyze_drawing_strokes(drawing_data.strokes),
        'timing': analyze_drawing_timing(drawing_data.strokes),
        'content': analyze_drawing_content(drawing_data, prompt),
    }
    if analytics is not None:
        breakdown['timing']['interactions'] = len(analytics.interactions)

    total_score = combine_scores(breakdown, DRAWING_WEIGHTS)
    result = decide(total_score, breakdown, config.HUMAN_SCORE_THRESHOLD, GameType.DRAWING)

    logger.debug(
        f"Drawing session scored: total={total_score} is_human={result.is_human} "
        f"strokes={breakdown['strokes']['score']:.1f} timing={breakdown['timing']['score']:.1f} "
        f"content={breakdown['content']['score']:.1f}"
    )
    return result


def generate_session_id() -> str:
    """Opaque, unique identifier for a verification attempt."""
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:12]}"
