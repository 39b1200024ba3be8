"""
Unit tests for drawing content plausibility.
"""
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from content_analysis import (
    ObjectCategory,
    CATEGORY_HEURISTICS,
    extract_object_from_prompt,
    analyze_shape_complexity,
    analyze_drawing_content,
)
from schemas import DrawingData
from telemetry_factory import CANVAS, make_stroke, human_drawing


def drawing(strokes):
    return DrawingData(strokes=strokes, dimensions=CANVAS)


def small_tall_sketch():
    """One 10-point stroke, 9px wide and 45px tall: complexity 2, tiny coverage."""
    return drawing([make_stroke(1, 10, 0, dxs=(1,), dy=5)])


class TestPromptParsing:
    """Test object keyword extraction."""

    @pytest.mark.parametrize("prompt,expected", [
        ("a fish", "fish"),
        ("The Cat", "cat"),
        ("an umbrella", "umbrella"),
        ("house with a door", "house"),
        ("a an the", "object"),
        ("", "object"),
    ])
    def test_extract(self, prompt, expected):
        assert extract_object_from_prompt(prompt) == expected

    def test_category_lookup(self):
        assert ObjectCategory.from_keyword("fish") is ObjectCategory.FISH
        assert ObjectCategory.from_keyword("CAR") is ObjectCategory.CAR
        assert ObjectCategory.from_keyword("goldfish") is ObjectCategory.GENERAL
        assert ObjectCategory.from_keyword("object") is ObjectCategory.GENERAL

    def test_every_category_has_heuristic(self):
        assert set(CATEGORY_HEURISTICS) == set(ObjectCategory)


class TestShapeComplexity:
    """Test shape metrics."""

    def test_metrics(self):
        metrics = analyze_shape_complexity(human_drawing().strokes, CANVAS)
        # 5 strokes, 47 points
        assert metrics.complexity == pytest.approx(9.7)
        assert metrics.width == 220
        assert metrics.height == 120
        assert metrics.bounding_box_ratio == pytest.approx(220 * 120 / (400 * 300))
        assert metrics.stroke_density == pytest.approx(47 / (220 * 120))

    def test_zero_area(self):
        """A horizontal line has no area; density falls back to 0."""
        metrics = analyze_shape_complexity([make_stroke(1, 5, 0)], CANVAS)
        assert metrics.height == 0
        assert metrics.bounding_box_ratio == 0
        assert metrics.stroke_density == 0


class TestContentAnalysis:
    """Test category heuristics."""

    def test_empty(self):
        result = analyze_drawing_content(drawing([]), "a fish")
        assert result['score'] == 0
        assert 'reason' in result

    def test_fish_full_bonus(self):
        """70 base +15 complexity +10 size +5 wide +10 coverage, capped at 100."""
        result = analyze_drawing_content(human_drawing(), "a fish")
        assert result['object_type'] == "fish"
        assert result['category'] == "fish"
        assert result['score'] == 100

    def test_fish_base_only(self):
        result = analyze_drawing_content(small_tall_sketch(), "a fish")
        assert result['analysis']['complexity'] < 5
        assert result['score'] == 70

    def test_fish_complex_beats_simple(self):
        assert analyze_drawing_content(human_drawing(), "a fish")['score'] > \
            analyze_drawing_content(small_tall_sketch(), "a fish")['score']

    def test_tree_prefers_tall(self):
        tall = analyze_drawing_content(small_tall_sketch(), "a tree")
        wide = analyze_drawing_content(drawing([make_stroke(1, 10, 0, dxs=(5,), dy=1)]), "a tree")
        assert tall['score'] == 70 + 10
        assert wide['score'] == 70
        assert tall['score'] > wide['score']

    def test_car_wide_and_complex(self):
        # 70 +15 complexity +10 wide +10 coverage
        assert analyze_drawing_content(human_drawing(), "a car")['score'] == 100

    def test_cat(self):
        # complexity 9.7 >= 8 (+15), coverage 0.22 > 0.2 (+10), coverage bonus (+10)
        assert analyze_drawing_content(human_drawing(), "a cat")['score'] == 100
        assert analyze_drawing_content(small_tall_sketch(), "a cat")['score'] == 70

    def test_house(self):
        # complexity 9.7 in [4, 12] (+15), height 120 > 0.6 * 220 is false, coverage (+10)
        assert analyze_drawing_content(human_drawing(), "a house")['score'] == 95

    def test_unknown_object_uses_general(self):
        result = analyze_drawing_content(small_tall_sketch(), "a spaceship")
        assert result['object_type'] == "spaceship"
        assert result['category'] == "general"
        assert result['score'] == 60

    def test_general_full(self):
        # 60 +20 complexity +15 coverage +10 coverage bonus
        assert analyze_drawing_content(human_drawing(), "a flower")['score'] == 100

    def test_overflowing_drawing_gets_no_coverage_bonus(self):
        big = drawing([
            make_stroke(1, 11, 0, dxs=(40,), dy=0, origin=(0, 0)),
            make_stroke(2, 11, 500, dxs=(40,), dy=0, origin=(0, 295)),
        ])
        result = analyze_drawing_content(big, "a house")
        assert result['analysis']['coverage'] > 0.9
        # complexity 2 + 2.2 = 4.2 (+15); height 295 > 0.6 * 400 (+5)
        assert result['score'] == 90


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
