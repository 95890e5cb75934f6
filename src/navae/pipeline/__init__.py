"""
Detection pipeline: polling loop and overlay rendering.
"""

from .overlay import OverlayCanvas, composite, render_detections
from .poller import DetectionPoller, PollerStats

__all__ = [
    "OverlayCanvas",
    "composite",
    "render_detections",
    "DetectionPoller",
    "PollerStats",
]
