"""
Unit tests for drawing stroke and timing signals.
"""
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from drawing_analysis import (
    analyze_drawing_strokes,
    analyze_drawing_timing,
    stroke_speeds,
    stroke_pauses,
)
from schemas import InteractionPoint, Stroke
from telemetry_factory import make_stroke, human_fish_strokes


def uniform_strokes(count, n_points=5, gap=500, duration=1000):
    """Identical strokes drawn at constant speed with a fixed pause."""
    dt = duration // (n_points - 1)
    return [
        make_stroke(i + 1, n_points, i * (duration + gap), dt=dt, origin=(0, 20 * i))
        for i in range(count)
    ]


class TestStrokeAnalysis:
    """Test stroke production scoring."""

    def test_no_strokes(self):
        result = analyze_drawing_strokes([])
        assert result['score'] == 0
        assert result['reason'] == 'No drawing data'

    def test_uniform_strokes(self):
        """No length spread (-20), no speed spread (-25), plausible count (+10)."""
        result = analyze_drawing_strokes(uniform_strokes(5))
        assert result['metrics']['stroke_variance'] == 0
        assert result['metrics']['speed_variance'] == pytest.approx(0.0)
        assert result['score'] == 15
        assert result['details']['stroke_analysis'] == 'Low variation'

    def test_varied_strokes(self):
        """Lengths [3, 8, 12, 4, 20] and alternating pen speed."""
        result = analyze_drawing_strokes(human_fish_strokes())
        assert result['metrics']['stroke_count'] == 5
        assert result['metrics']['total_points'] == 47
        assert result['metrics']['stroke_variance'] > 3
        assert result['metrics']['speed_variance'] > 0.1
        assert result['score'] == 95
        assert result['details']['speed_analysis'] == 'Human-like speed changes'

    def test_varied_scores_higher_than_uniform(self):
        assert analyze_drawing_strokes(human_fish_strokes())['score'] > \
            analyze_drawing_strokes(uniform_strokes(5))['score']

    def test_over_segmented(self):
        result = analyze_drawing_strokes(uniform_strokes(51, n_points=3))
        assert result['score'] == 0

    def test_single_point_stroke(self):
        stroke = Stroke(id=1, points=[InteractionPoint(x=5, y=5, timestamp=0)], start_time=0, end_time=0)
        result = analyze_drawing_strokes([stroke])
        assert result['metrics']['speed_variance'] == 0.0
        assert result['score'] == 30

    def test_few_speed_samples_skip_speed_check(self):
        """Five speed samples are not enough to judge pen speed."""
        strokes = [make_stroke(1, 3, 0, dxs=(1, 9)), make_stroke(2, 4, 500, dxs=(1, 9))]
        assert len(stroke_speeds(strokes)) == 5
        result = analyze_drawing_strokes(strokes)
        assert result['score'] == 30

    def test_stroke_speeds_skip_zero_dt(self):
        stroke = make_stroke(1, 4, 0, dt=0)
        assert stroke_speeds([stroke]) == []


class TestTimingAnalysis:
    """Test pause and duration scoring."""

    def test_no_strokes(self):
        result = analyze_drawing_timing([])
        assert result['score'] == 50
        assert 'reason' in result

    def test_regular_pauses(self):
        """Identical 500ms pauses (-20), 0.5s mean (+15), 7s total (+15)."""
        result = analyze_drawing_timing(uniform_strokes(5))
        assert result['timing']['pause_count'] == 4
        assert result['timing']['average_pause'] == pytest.approx(500)
        assert result['timing']['total_time'] == 7000
        assert result['score'] == 60

    def test_natural_pauses(self):
        result = analyze_drawing_timing(human_fish_strokes())
        assert stroke_pauses(human_fish_strokes()) == [1280, 1730, 2390, 1370]
        assert result['timing']['total_time'] == 7190
        assert result['score'] == 100

    def test_rushed_drawing(self):
        """10ms pauses and half a second overall."""
        strokes = uniform_strokes(5, n_points=5, gap=10, duration=100)
        result = analyze_drawing_timing(strokes)
        assert result['score'] == 0

    def test_missing_end_times(self):
        strokes = [make_stroke(i, 5, i * 1000, end_time=False) for i in range(3)]
        result = analyze_drawing_timing(strokes)
        assert result['timing']['pause_count'] == 0
        assert result['timing']['total_time'] is None
        assert result['score'] == 50

    def test_slow_drawing(self):
        strokes = [make_stroke(1, 5, 0, dt=250), make_stroke(2, 5, 125000, dt=250)]
        result = analyze_drawing_timing(strokes)
        assert result['timing']['total_time'] == 126000
        assert result['score'] == 35


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
