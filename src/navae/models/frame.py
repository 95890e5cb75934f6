"""
FrameData model for captured video frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass
class FrameData:
    """
    A decoded camera frame plus the context it was captured in.

    Attributes:
        frame: Pixel data as a numpy array (BGR, already mirrored if requested).
        width: Native frame width in pixels.
        height: Native frame height in pixels.
        timestamp: Unix timestamp when the frame was read.
        frame_index: Sequential frame number since the source was opened.
        facing: Camera facing the frame came from ("user" or "environment").
    """
    frame: np.ndarray
    width: int
    height: int
    timestamp: float
    frame_index: int = 0
    facing: Optional[str] = None

    @classmethod
    def from_numpy(
        cls,
        frame: np.ndarray,
        timestamp: float,
        frame_index: int = 0,
        facing: Optional[str] = None,
    ) -> "FrameData":
        h, w = frame.shape[:2]
        return cls(
            frame=frame,
            width=w,
            height=h,
            timestamp=timestamp,
            frame_index=frame_index,
            facing=facing,
        )

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)
