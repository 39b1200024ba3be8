"""
Scoring configuration for game-based human verification.

Thresholds are empirically chosen and kept configurable so hosts can tune
them without code changes. Values can be overridden through environment
variables prefixed with ``CAPTCHA_`` (e.g. ``CAPTCHA_HUMAN_SCORE_THRESHOLD``),
loaded from a ``.env`` file when present.
"""
import os
import math
import logging
from dataclasses import dataclass, fields, replace, asdict
from typing import Dict, Any, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "CAPTCHA_"

# Tolerance used when checking that weight tables sum to 1.0
WEIGHT_TOLERANCE = 1e-6


@dataclass(frozen=True)
class ScoringConfig:
    """Security analysis thresholds."""
    MIN_REACTION_TIME: float = 100      # ms
    MAX_REACTION_TIME: float = 2000     # ms
    MIN_ACCURACY: float = 0.3           # 30%
    MAX_ACCURACY: float = 0.8           # 80%
    HUMAN_SCORE_THRESHOLD: float = 70   # Minimum score to pass
    MAX_MOUSE_SPEED: float = 1000       # px/ms
    MIN_MOUSE_VARIANCE: float = 5       # mean absolute speed change

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ScoringConfig":
        """
        Build a config from defaults overridden by environment variables.

        Args:
            env_file: Optional path to a .env file

        Returns:
            Validated ScoringConfig
        """
        load_dotenv(env_file)

        overrides = {}
        for f in fields(cls):
            raw = os.getenv(f"{ENV_PREFIX}{f.name}")
            if raw is None or raw == "":
                continue
            try:
                overrides[f.name] = float(raw)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}{f.name} must be numeric, got {raw!r}")

        if overrides:
            logger.info(f"Scoring config overrides from environment: {overrides}")

        return cls().with_overrides(**overrides)

    def with_overrides(self, **overrides: float) -> "ScoringConfig":
        """
        Return a copy with the given options replaced.

        Unknown option names raise ValueError.
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown scoring options: {sorted(unknown)}")

        config = replace(self, **{k: float(v) for k, v in overrides.items()})
        validate_config(config)
        return config

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def validate_config(config: ScoringConfig) -> None:
    """
    Check that thresholds are in valid ranges and properly ordered.

    Raises:
        ValueError: If any threshold is out of range
    """
    for name, value in asdict(config).items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number, got {value!r}")

    if config.MIN_REACTION_TIME < 0 or config.MIN_REACTION_TIME > config.MAX_REACTION_TIME:
        raise ValueError("MIN_REACTION_TIME must be in [0, MAX_REACTION_TIME]")
    if not (0.0 <= config.MIN_ACCURACY <= config.MAX_ACCURACY <= 1.0):
        raise ValueError("accuracy band must satisfy 0 <= MIN_ACCURACY <= MAX_ACCURACY <= 1")
    if not (0.0 <= config.HUMAN_SCORE_THRESHOLD <= 100.0):
        raise ValueError("HUMAN_SCORE_THRESHOLD must be in [0, 100]")
    if config.MAX_MOUSE_SPEED <= 0:
        raise ValueError("MAX_MOUSE_SPEED must be positive")
    if config.MIN_MOUSE_VARIANCE < 0:
        raise ValueError("MIN_MOUSE_VARIANCE must be non-negative")


def validate_weights(weights: Dict[str, float]) -> Dict[str, float]:
    """
    Check that a weight table is non-negative and sums to 1.0.

    Returns:
        The same weights, for use at module import time
    """
    if not all(math.isfinite(w) for w in weights.values()):
        raise ValueError(f"Weights must be finite: {weights}")
    if any(w < 0 for w in weights.values()):
        raise ValueError(f"Weights must be non-negative: {weights}")
    total = sum(weights.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ValueError(f"Weights must sum to 1.0, got {total:.6f}")
    return weights


_DEFAULT_CONFIG = ScoringConfig()


def get_default_config() -> ScoringConfig:
    """Get the built-in default thresholds."""
    return _DEFAULT_CONFIG


def resolve_config(config: Optional[Any] = None) -> ScoringConfig:
    """
    Normalize a config argument.

    Accepts None (defaults), a ScoringConfig, or a mapping of option
    overrides such as ``{"HUMAN_SCORE_THRESHOLD": 60}``.
    """
    if config is None:
        return _DEFAULT_CONFIG
    if isinstance(config, ScoringConfig):
        return config
    return _DEFAULT_CONFIG.with_overrides(**dict(config))
