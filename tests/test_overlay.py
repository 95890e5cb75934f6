"""
Tests for the detection overlay renderer.
"""

import numpy as np
import pytest

from conftest import make_detection
from navae.pipeline.overlay import (
    COLOR_HAZARD,
    COLOR_INFO,
    OverlayCanvas,
    color_for,
    composite,
    format_label,
    label_origin,
    render_detections,
)


class TestLabels:
    @pytest.mark.parametrize(
        "score,expected",
        [(0.873, "car 87%"), (0.875, "car 88%"), (0.5, "car 50%"), (1.0, "car 100%"), (0.004, "car 0%")],
    )
    def test_format_label_rounds_half_up(self, score, expected):
        assert format_label(make_detection("car", score)) == expected

    def test_label_above_box(self):
        assert label_origin(make_detection("car", 0.9, x=10, y=30)) == (10, 25)

    def test_label_inside_box_near_top_edge(self):
        """y=15 is too close to the top, so the label goes inside the box."""
        assert label_origin(make_detection("car", 0.9, x=10, y=15)) == (10, 35)

    def test_label_threshold_is_strict(self):
        assert label_origin(make_detection("car", 0.9, x=0, y=20)) == (0, 40)
        assert label_origin(make_detection("car", 0.9, x=0, y=21)) == (0, 16)


class TestColors:
    def test_hazard_is_red(self):
        assert color_for(make_detection("person", 0.3)) == COLOR_HAZARD

    def test_other_is_green(self):
        assert color_for(make_detection("dog", 0.9)) == COLOR_INFO


class TestRenderDetections:
    def test_one_box_and_label_per_detection(self):
        canvas = OverlayCanvas()
        dets = [make_detection("car", 0.9), make_detection("dog", 0.6, x=200, y=200)]

        render_detections(canvas, dets, 640, 480)

        ops = canvas.ops
        assert [op.kind for op in ops] == ["rect", "text", "rect", "text"]
        assert ops[0].color == COLOR_HAZARD
        assert ops[0].points == (10, 30, 110, 110)
        assert ops[1].text == "car 90%"
        assert ops[2].color == COLOR_INFO
        assert ops[3].text == "dog 60%"

    def test_low_score_hazard_still_drawn_red(self):
        """Drawing does not depend on the alert threshold."""
        canvas = OverlayCanvas()
        render_detections(canvas, [make_detection("car", 0.4)], 640, 480)
        assert canvas.ops[0].color == COLOR_HAZARD

    def test_canvas_matches_frame_resolution(self):
        canvas = OverlayCanvas()
        render_detections(canvas, [], 1280, 720)
        assert canvas.size == (1280, 720)
        assert canvas.image.shape == (720, 1280, 3)

    def test_redraw_clears_previous_pass(self):
        canvas = OverlayCanvas()
        render_detections(canvas, [make_detection("car", 0.9)], 640, 480)
        render_detections(canvas, [], 640, 480)

        assert canvas.ops == []
        assert not canvas.image.any()
        assert canvas.is_empty

    def test_pixels_drawn(self):
        canvas = OverlayCanvas()
        render_detections(canvas, [make_detection("car", 0.9)], 640, 480)
        # Top edge of the rectangle is red in BGR
        assert tuple(canvas.image[30, 50]) == COLOR_HAZARD


class TestComposite:
    def test_overlay_pixels_replace_frame(self):
        frame = np.full((480, 640, 3), 100, dtype=np.uint8)
        canvas = OverlayCanvas()
        render_detections(canvas, [make_detection("car", 0.9)], 640, 480)

        out = composite(frame, canvas)

        assert tuple(out[30, 50]) == COLOR_HAZARD
        assert tuple(out[300, 600]) == (100, 100, 100)
        # Original frame untouched
        assert tuple(frame[30, 50]) == (100, 100, 100)

    def test_size_mismatch_leaves_frame(self):
        frame = np.full((720, 1280, 3), 7, dtype=np.uint8)
        canvas = OverlayCanvas()
        render_detections(canvas, [make_detection("car", 0.9)], 640, 480)

        out = composite(frame, canvas)
        assert np.array_equal(out, frame)

    def test_empty_canvas_leaves_frame(self):
        frame = np.full((10, 10, 3), 7, dtype=np.uint8)
        out = composite(frame, OverlayCanvas())
        assert np.array_equal(out, frame)
        assert out is not frame
