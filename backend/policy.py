"""
Verdict logic for game-based human verification.

This module turns a combined 0-100 score into:
- a boolean human verdict (score >= HUMAN_SCORE_THRESHOLD)
- a confidence label (Very Low ... Very High)
- a recommendation sentence worded for the game that was played
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Any, Mapping
from enum import Enum


class ConfidenceLevel(str, Enum):
    """Human-readable confidence buckets."""
    VERY_LOW = "Very Low"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


class GameType(str, Enum):
    """Mini-games that produce telemetry."""
    SHOOTER = "shooter"
    DRAWING = "drawing"


# Lower bound of each confidence bucket, highest first
CONFIDENCE_BUCKETS = (
    (90, ConfidenceLevel.VERY_HIGH),
    (80, ConfidenceLevel.HIGH),
    (70, ConfidenceLevel.MEDIUM),
    (50, ConfidenceLevel.LOW),
)

# Score at or above which a verified human gets the "excellent" wording
EXCELLENT_SCORE = 85
# Score at or above which a failed session may still be human
REVIEW_SCORE = 60

RECOMMENDATIONS = {
    GameType.SHOOTER: {
        "excellent": "Verified human with excellent interaction patterns",
        "acceptable": "Verified human with acceptable interaction patterns",
        "review": "Possible human but interaction patterns need verification",
        "automated": "Likely automated behavior detected - verification failed",
    },
    GameType.DRAWING: {
        "excellent": "Excellent creative expression with natural human drawing patterns",
        "acceptable": "Verified human creativity with acceptable drawing behavior",
        "review": "Drawing patterns require additional verification",
        "automated": "Automated or suspicious drawing behavior detected",
    },
}


def _freeze(value: Any) -> Any:
    """Read-only copy of nested dicts and lists."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    """Plain dict/list copy of a frozen value, for serialization."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class HumanVerificationResult:
    """Final, immutable outcome of one verification call (nested breakdowns included)."""
    total_score: int
    is_human: bool
    breakdown: Mapping[str, Dict[str, Any]]
    confidence: ConfidenceLevel
    recommendation: str
    thresholds: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "breakdown", _freeze(self.breakdown))
        object.__setattr__(self, "thresholds", _freeze(self.thresholds))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_score": self.total_score,
            "is_human": self.is_human,
            "breakdown": _thaw(self.breakdown),
            "confidence": self.confidence.value,
            "recommendation": self.recommendation,
            "thresholds": _thaw(self.thresholds),
        }


def is_human(score: float, threshold: float) -> bool:
    """A session passes when its score reaches the threshold."""
    return score >= threshold


def get_confidence_level(score: float) -> ConfidenceLevel:
    """
    Bucket a score into a confidence label.

    Args:
        score: Combined score [0, 100]

    Returns:
        ConfidenceLevel for the highest bucket the score reaches
    """
    for lower_bound, level in CONFIDENCE_BUCKETS:
        if score >= lower_bound:
            return level
    return ConfidenceLevel.VERY_LOW


def get_recommendation(score: float, human: bool, game_type: GameType = GameType.SHOOTER) -> str:
    """
    Pick the recommendation sentence for a verdict.

    Decision logic:
    - human AND score >= 85 → excellent
    - human → acceptable
    - score >= 60 → needs additional verification
    - otherwise → automated/suspicious
    """
    wording = RECOMMENDATIONS[GameType(game_type)]

    if human and score >= EXCELLENT_SCORE:
        return wording["excellent"]
    elif human:
        return wording["acceptable"]
    elif score >= REVIEW_SCORE:
        return wording["review"]
    else:
        return wording["automated"]


def decide(
    total_score: int,
    breakdown: Mapping[str, Dict[str, Any]],
    threshold: float,
    game_type: GameType = GameType.SHOOTER
) -> HumanVerificationResult:
    """
    Build the verification result for a combined score.

    Args:
        total_score: Rounded combined score [0, 100]
        breakdown: Per-analyzer breakdowns
        threshold: HUMAN_SCORE_THRESHOLD in effect
        game_type: Game the telemetry came from

    Returns:
        HumanVerificationResult
    """
    human = is_human(total_score, threshold)
    return HumanVerificationResult(
        total_score=total_score,
        is_human=human,
        breakdown=breakdown,
        confidence=get_confidence_level(total_score),
        recommendation=get_recommendation(total_score, human, game_type),
        thresholds={"human": threshold},
    )
