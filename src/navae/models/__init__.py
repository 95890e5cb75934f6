"""
Typed models for the driver assistant.
"""

from .frame import FrameData
from .detection import Detection, BoundingBox
from .alert import ActiveAlert
from .config import (
    Config,
    CameraConfig,
    DetectionConfig,
    AlertConfig,
    SpeechConfig,
    WebConfig,
)

__all__ = [
    # Frame
    "FrameData",
    # Detection
    "Detection",
    "BoundingBox",
    # Alerts
    "ActiveAlert",
    # Config
    "Config",
    "CameraConfig",
    "DetectionConfig",
    "AlertConfig",
    "SpeechConfig",
    "WebConfig",
]
