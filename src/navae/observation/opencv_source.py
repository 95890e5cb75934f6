"""
OpenCV camera source.

``device`` is whatever cv2.VideoCapture accepts: a webcam index, a stream URL
or a video file path (handy for demos without a camera).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

import cv2
import numpy as np

from navae.models.config import CameraConfig
from navae.models.frame import FrameData
from .base import ObservationSource, ObservationConfig


@dataclass
class OpenCVSourceConfig(ObservationConfig):
    """
    Attributes:
        device: Camera index (int), stream URL (str), or file path (str).
        buffer_size: Capture buffer size; 1 keeps a live camera current.
        max_retries: Open attempts before giving up.
    """
    device: Union[int, str] = 0
    buffer_size: int = 1
    max_retries: int = 3

    @classmethod
    def for_facing(cls, camera_cfg: CameraConfig, facing: str) -> "OpenCVSourceConfig":
        """The front camera is mirrored so the preview reads like a selfie view."""
        resolution = camera_cfg.resolution
        return cls(
            facing=facing,
            mirrored=facing == "user",
            resolution=tuple(resolution) if resolution else None,
            fps=camera_cfg.fps,
            device=camera_cfg.device_for(facing),
            max_retries=camera_cfg.max_retries,
        )


class OpenCVSource(ObservationSource):
    """
    Camera for one facing, read through cv2.VideoCapture.

    Example:
        with OpenCVSource(OpenCVSourceConfig(facing="user", mirrored=True, device=1)) as cam:
            frame_data = cam.read()
    """

    def __init__(self, config: OpenCVSourceConfig):
        super().__init__(config)
        self._cv_config = config
        self._cap: Optional[cv2.VideoCapture] = None

    @property
    def device(self) -> Union[int, str]:
        return self._cv_config.device

    def open(self) -> None:
        if self._is_open:
            return

        self._cap = self._connect()
        self._configure(self._cap)
        self._is_open = True
        self._frame_index = 0
        logging.info(f"Camera opened: facing={self.facing}, device={self.device}, mirrored={self.mirrored}")

    def _connect(self) -> cv2.VideoCapture:
        attempts = max(1, self._cv_config.max_retries)
        for attempt in range(attempts):
            if attempt:
                backoff = min(2 ** attempt, 10)
                logging.warning(f"Camera {self.device} not available, retry {attempt + 1}/{attempts} in {backoff}s")
                time.sleep(backoff)
            cap = cv2.VideoCapture(self.device)
            if cap.isOpened():
                return cap
            cap.release()
        raise RuntimeError(f"Failed to open device {self.device} after {attempts} attempts")

    def _configure(self, cap: cv2.VideoCapture) -> None:
        # Streams and files keep their native format
        if not isinstance(self.device, int):
            return
        if self._cv_config.resolution:
            width, height = self._cv_config.resolution
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        if self._cv_config.fps:
            cap.set(cv2.CAP_PROP_FPS, self._cv_config.fps)
        cap.set(cv2.CAP_PROP_BUFFERSIZE, self._cv_config.buffer_size)

    def read(self) -> Optional[FrameData]:
        """Next frame, or None while the device has nothing decodable."""
        if self._cap is None:
            return None

        ok, frame = self._cap.read()
        if not ok or frame is None:
            return None

        self._frame_index += 1
        return FrameData.from_numpy(
            self._orient(frame),
            timestamp=time.time(),
            frame_index=self._frame_index,
            facing=self.facing,
        )

    def _orient(self, frame: np.ndarray) -> np.ndarray:
        return cv2.flip(frame, 1) if self.mirrored else frame

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logging.info(f"Camera released: facing={self.facing}")
        self._is_open = False
