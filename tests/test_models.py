"""
Tests for typed models.
"""

import numpy as np

from navae.models.alert import ActiveAlert
from navae.models.detection import BoundingBox, Detection
from navae.models.frame import FrameData


class TestBoundingBox:
    def test_from_xywh(self):
        bbox = BoundingBox.from_xywh(10, 20, 30, 40)
        assert (bbox.x1, bbox.y1, bbox.x2, bbox.y2) == (10, 20, 40, 60)
        assert bbox.width == 30
        assert bbox.height == 40
        assert bbox.as_xywh() == (10, 20, 30, 40)

    def test_as_int_tuple_truncates(self):
        assert BoundingBox(1.9, 2.2, 3.7, 4.5).as_int_tuple() == (1, 2, 3, 4)


class TestDetection:
    def test_to_dict(self):
        det = Detection.from_xywh("car", 0.87, 5, 6, 7, 8)
        assert det.to_dict() == {"class_name": "car", "score": 0.87, "bbox": [5, 6, 7, 8]}

    def test_from_xyxy(self):
        det = Detection.from_xyxy("bus", 0.5, 0, 0, 100, 50)
        assert det.bbox.as_xywh() == (0, 0, 100, 50)


class TestActiveAlert:
    def test_active_window_is_half_open(self):
        alert = ActiveAlert("1000-1", "car", "⚠️ CAR DETECTED", 1000.0, 3000.0)
        assert not alert.is_active(999.0)
        assert alert.is_active(1000.0)
        assert alert.is_active(2999.9)
        assert not alert.is_active(3000.0)

    def test_to_dict(self):
        alert = ActiveAlert("1000-1", "car", "⚠️ CAR DETECTED", 1000.0, 3000.0)
        assert alert.to_dict()["message"] == "⚠️ CAR DETECTED"
        assert alert.to_dict()["class_name"] == "car"


class TestFrameData:
    def test_from_numpy(self):
        frame = np.zeros((720, 1280, 3), dtype=np.uint8)
        data = FrameData.from_numpy(frame, timestamp=1.0, frame_index=3, facing="user")
        assert data.size == (1280, 720)
        assert data.frame_index == 3
        assert data.facing == "user"
