from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from navae.alerts.manager import AlertManager
from navae.inference.backend import Model
from navae.models.config import Config
from navae.models.detection import Detection
from navae.observation.feed import CameraFeed
from navae.pipeline.overlay import OverlayCanvas, composite
from .state import ControlState


@dataclass
class RuntimeContext:
    """Holds runtime state and service references; avoids global singletons."""

    config: Config
    feed: CameraFeed
    alerts: AlertManager
    overlay: OverlayCanvas = field(default_factory=OverlayCanvas)
    control: ControlState = field(default_factory=ControlState)
    model: Optional[Model] = None

    # Result of the most recent successful detection tick
    latest_detections: List[Detection] = field(default_factory=list)
    started_at: float = field(default_factory=time.time)

    def apply(self, transition: Callable[[ControlState], ControlState]) -> ControlState:
        self.control = transition(self.control)
        return self.control

    def clear_detections(self) -> None:
        self.latest_detections = []
        self.overlay.clear()

    def composite_frame(self) -> Optional[np.ndarray]:
        """Latest camera frame with the detection overlay on top."""
        frame_data = self.feed.latest()
        if frame_data is None:
            return None
        return composite(frame_data.frame, self.overlay)
