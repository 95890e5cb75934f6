"""
Detection models for object detection results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    A bounding box in pixel coordinates.

    Stored as corners; the model-facing format is (x, y, width, height),
    available through ``from_xywh`` and ``as_xywh``.
    """
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1

    def as_xywh(self) -> Tuple[float, float, float, float]:
        """Return as (x, y, width, height) tuple."""
        return (self.x1, self.y1, self.width, self.height)

    def as_int_tuple(self) -> Tuple[int, int, int, int]:
        """Return as integer (x1, y1, x2, y2) tuple."""
        return (int(self.x1), int(self.y1), int(self.x2), int(self.y2))

    @classmethod
    def from_xywh(cls, x: float, y: float, w: float, h: float) -> "BoundingBox":
        return cls(x1=x, y1=y, x2=x + w, y2=y + h)


@dataclass(frozen=True)
class Detection:
    """
    One object reported by the model for a single frame.

    Attributes:
        class_name: Label from the model's class set (e.g. "car").
        score: Confidence in [0, 1].
        bbox: Bounding box in frame pixel coordinates.
    """
    class_name: str
    score: float
    bbox: BoundingBox

    @classmethod
    def from_xywh(
        cls, class_name: str, score: float, x: float, y: float, w: float, h: float
    ) -> "Detection":
        return cls(class_name=class_name, score=score, bbox=BoundingBox.from_xywh(x, y, w, h))

    @classmethod
    def from_xyxy(
        cls, class_name: str, score: float, x1: float, y1: float, x2: float, y2: float
    ) -> "Detection":
        return cls(class_name=class_name, score=score, bbox=BoundingBox(x1=x1, y1=y1, x2=x2, y2=y2))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class_name": self.class_name,
            "score": self.score,
            "bbox": list(self.bbox.as_xywh()),
        }
