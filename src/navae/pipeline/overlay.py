"""
Detection overlay.

The overlay is a separate canvas laid over the live frame, like a transparent
layer on top of the video: it is resized to the frame's native resolution and
wiped before every pass, then one box and one label is drawn per detection.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import cv2
import numpy as np

from navae.alerts.policy import is_hazard
from navae.models.detection import Detection

# Colors (BGR)
COLOR_HAZARD = (0, 0, 255)  # Red
COLOR_INFO = (0, 255, 0)  # Green

LINE_WIDTH = 2
FONT = cv2.FONT_HERSHEY_SIMPLEX
FONT_SCALE = 0.6

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class DrawOp:
    """A record of one drawing call, kept for inspection."""
    kind: str  # "rect" or "text"
    color: Color
    points: Tuple[int, ...]
    text: Optional[str] = None


class OverlayCanvas:
    """BGR drawing surface; black pixels are transparent when composited."""

    def __init__(self) -> None:
        self._image = np.zeros((0, 0, 3), dtype=np.uint8)
        self._ops: List[DrawOp] = []

    @property
    def image(self) -> np.ndarray:
        return self._image

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self._image.shape[1], self._image.shape[0])

    @property
    def ops(self) -> List[DrawOp]:
        return list(self._ops)

    @property
    def is_empty(self) -> bool:
        return not self._ops and not self._image.any()

    def resize(self, width: int, height: int) -> None:
        if self.size != (width, height):
            self._image = np.zeros((height, width, 3), dtype=np.uint8)

    def clear(self) -> None:
        self._image.fill(0)
        self._ops = []

    def stroke_rect(self, x1: int, y1: int, x2: int, y2: int, color: Color, width: int = LINE_WIDTH) -> None:
        cv2.rectangle(self._image, (x1, y1), (x2, y2), color, width)
        self._ops.append(DrawOp("rect", color, (x1, y1, x2, y2)))

    def fill_text(self, text: str, x: int, y: int, color: Color) -> None:
        cv2.putText(self._image, text, (x, y), FONT, FONT_SCALE, color, 2)
        self._ops.append(DrawOp("text", color, (x, y), text))


def format_label(det: Detection) -> str:
    """Label such as "car 87%"; the score is rounded half-up."""
    return f"{det.class_name} {math.floor(det.score * 100 + 0.5)}%"


def label_origin(det: Detection) -> Tuple[int, int]:
    """Above the box, or inside it when the box touches the top edge."""
    x, y = det.bbox.x1, det.bbox.y1
    return int(x), int(y - 5 if y > 20 else y + 20)


def color_for(det: Detection) -> Color:
    return COLOR_HAZARD if is_hazard(det.class_name) else COLOR_INFO


def render_detections(
    canvas: OverlayCanvas, detections: Iterable[Detection], width: int, height: int
) -> OverlayCanvas:
    """Redraw the canvas for one frame's detections."""
    canvas.resize(width, height)
    canvas.clear()

    for det in detections:
        color = color_for(det)
        x1, y1, x2, y2 = det.bbox.as_int_tuple()
        canvas.stroke_rect(x1, y1, x2, y2, color)
        lx, ly = label_origin(det)
        canvas.fill_text(format_label(det), lx, ly, color)

    return canvas


def composite(frame: np.ndarray, canvas: OverlayCanvas) -> np.ndarray:
    """
    Lay the overlay over a copy of the frame.

    An overlay drawn for a different resolution (e.g. right after a camera
    switch) is left out rather than stretched.
    """
    out = frame.copy()
    h, w = frame.shape[:2]
    if canvas.size != (w, h) or not canvas.ops:
        return out
    mask = canvas.image.any(axis=2)
    out[mask] = canvas.image[mask]
    return out
