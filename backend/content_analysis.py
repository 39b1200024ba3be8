"""
Geometric plausibility of a drawing against its prompt.

No image recognition happens here. The prompt is reduced to an object
category and the stroke trace is checked against simple shape expectations
for that category (complexity, canvas coverage, aspect ratio).
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Callable, Sequence

from signal_utils import bounding_box, clamp_score

logger = logging.getLogger(__name__)


ARTICLES = ('a', 'an', 'the')
FALLBACK_OBJECT = 'object'

# Bounding box coverage that counts as good use of the canvas
MIN_GOOD_COVERAGE = 0.1
MAX_GOOD_COVERAGE = 0.9
COVERAGE_BONUS = 10


class ObjectCategory(str, Enum):
    """Object categories with dedicated shape heuristics."""
    FISH = "fish"
    CAT = "cat"
    HOUSE = "house"
    TREE = "tree"
    CAR = "car"
    GENERAL = "general"

    @classmethod
    def from_keyword(cls, keyword: str) -> "ObjectCategory":
        """Map a prompt keyword to a category; unknown words are GENERAL."""
        try:
            category = cls(keyword.lower())
        except ValueError:
            return cls.GENERAL
        return category


@dataclass(frozen=True)
class ShapeMetrics:
    """Shape statistics of a stroke trace."""
    complexity: float
    bounding_box_ratio: float
    stroke_density: float
    width: float
    height: float


def extract_object_from_prompt(prompt: str) -> str:
    """First word of the prompt that is not an article."""
    for word in (prompt or '').lower().split():
        if word not in ARTICLES:
            return word
    return FALLBACK_OBJECT


def analyze_shape_complexity(strokes: Sequence[Any], dimensions: Any) -> ShapeMetrics:
    """
    Compute shape metrics for a drawing.

    complexity = stroke count + total points / 10; coverage is the bounding
    box area over the canvas area; density is points per unit of box area.
    """
    points = [p for stroke in strokes for p in stroke.points]
    if not points:
        return ShapeMetrics(0.0, 0.0, 0.0, 0.0, 0.0)

    box = bounding_box(points)
    canvas_area = dimensions.width * dimensions.height

    return ShapeMetrics(
        complexity=len(strokes) + len(points) / 10,
        bounding_box_ratio=box.area / canvas_area if canvas_area > 0 else 0.0,
        stroke_density=len(points) / box.area if box.area > 0 else 0.0,
        width=box.width,
        height=box.height,
    )


def _score_fish(m: ShapeMetrics) -> float:
    score = 70
    if m.complexity >= 5:  # body + tail
        score += 15
    if m.bounding_box_ratio > 0.15:
        score += 10
    if m.width > m.height:
        score += 5
    return score


def _score_cat(m: ShapeMetrics) -> float:
    score = 70
    if m.complexity >= 8:  # body, head, ears, tail
        score += 15
    if m.bounding_box_ratio > 0.2:
        score += 10
    return score


def _score_house(m: ShapeMetrics) -> float:
    score = 70
    if 4 <= m.complexity <= 12:
        score += 15
    if m.height > m.width * 0.6:
        score += 5
    return score


def _score_tree(m: ShapeMetrics) -> float:
    score = 70
    if m.complexity >= 3:  # trunk + foliage
        score += 15
    if m.height > m.width:
        score += 10
    return score


def _score_car(m: ShapeMetrics) -> float:
    score = 70
    if m.complexity >= 5:
        score += 15
    if m.width > m.height:
        score += 10
    return score


def _score_general(m: ShapeMetrics) -> float:
    score = 60
    if m.complexity >= 3:
        score += 20
    if m.bounding_box_ratio > 0.1:
        score += 15
    return score


CATEGORY_HEURISTICS: Dict[ObjectCategory, Callable[[ShapeMetrics], float]] = {
    ObjectCategory.FISH: _score_fish,
    ObjectCategory.CAT: _score_cat,
    ObjectCategory.HOUSE: _score_house,
    ObjectCategory.TREE: _score_tree,
    ObjectCategory.CAR: _score_car,
    ObjectCategory.GENERAL: _score_general,
}

if set(CATEGORY_HEURISTICS) != set(ObjectCategory):
    raise RuntimeError("Every ObjectCategory needs a shape heuristic")


def analyze_drawing_content(drawing_data: Any, prompt: str) -> Dict[str, Any]:
    """
    Score whether a drawing plausibly depicts the prompted object.

    Args:
        drawing_data: DrawingData with strokes and canvas dimensions
        prompt: Free-text prompt, e.g. "a fish"

    Returns:
        Dictionary containing:
            - score: Content score [0, 100]
            - object_type: Keyword extracted from the prompt
            - category: Heuristic category used
            - analysis: complexity, coverage and stroke_density
    """
    strokes = drawing_data.strokes
    if not strokes:
        return {'score': 0, 'reason': 'No drawing content'}

    object_type = extract_object_from_prompt(prompt)
    category = ObjectCategory.from_keyword(object_type)
    metrics = analyze_shape_complexity(strokes, drawing_data.dimensions)

    score = CATEGORY_HEURISTICS[category](metrics)

    if MIN_GOOD_COVERAGE < metrics.bounding_box_ratio < MAX_GOOD_COVERAGE:
        score += COVERAGE_BONUS

    logger.debug(f"Content analysis: object={object_type} category={category.value} raw_score={score}")

    return {
        'score': clamp_score(score),
        'object_type': object_type,
        'category': category.value,
        'analysis': {
            'complexity': metrics.complexity,
            'coverage': metrics.bounding_box_ratio,
            'stroke_density': metrics.stroke_density,
        },
    }
