"""
Observation layer for pluggable camera sources.

Each source implements the ObservationSource interface and returns FrameData
objects. CameraFeed keeps the latest frame of whichever source matches the
selected camera facing.
"""

from navae.models.config import CameraConfig
from .base import ObservationSource, ObservationConfig
from .feed import CameraFeed
from .opencv_source import OpenCVSource, OpenCVSourceConfig


def create_source_for_facing(camera_cfg: CameraConfig, facing: str) -> ObservationSource:
    """Build an OpenCV source for the device configured for ``facing``."""
    return OpenCVSource(OpenCVSourceConfig.for_facing(camera_cfg, facing))


__all__ = [
    "ObservationSource",
    "ObservationConfig",
    "OpenCVSource",
    "OpenCVSourceConfig",
    "CameraFeed",
    "create_source_for_facing",
]
