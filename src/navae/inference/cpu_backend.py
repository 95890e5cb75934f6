"""
CPU inference backend.

Uses an Ultralytics YOLO model trained on COCO, whose label set covers every
hazard class (person, car, truck, bus, bicycle, motorcycle).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from navae.models.config import DetectionConfig
from navae.models.detection import Detection
from .backend import InferenceBackend


@dataclass(frozen=True)
class CpuYoloConfig:
    model: str
    conf_threshold: float = 0.25
    iou_threshold: float = 0.45
    device: Optional[str] = None

    @classmethod
    def from_detection_config(cls, cfg: DetectionConfig) -> "CpuYoloConfig":
        return cls(
            model=cfg.model,
            conf_threshold=float(cfg.conf_threshold),
            iou_threshold=float(cfg.iou_threshold),
            device=cfg.device,
        )


def _as_array(values) -> np.ndarray:
    """Torch tensor (any device) or array-like to a numpy array."""
    if hasattr(values, "cpu"):
        return values.cpu().numpy()
    return np.asarray(values)


class UltralyticsCpuBackend(InferenceBackend):
    """COCO-trained YOLO model; class ids are mapped to names via ``result.names``."""

    def __init__(self, cfg: CpuYoloConfig):
        # Deferred so importing navae does not pull in torch
        from ultralytics import YOLO

        self.cfg = cfg
        self._model = YOLO(cfg.model)

    def detect(self, frame: np.ndarray) -> List[Detection]:
        results = self._model.predict(
            source=frame,
            conf=self.cfg.conf_threshold,
            iou=self.cfg.iou_threshold,
            device=self.cfg.device,
            verbose=False,
        )
        if not results or getattr(results[0], "boxes", None) is None:
            return []

        result = results[0]
        names = getattr(result, "names", None) or {}
        corners = _as_array(result.boxes.xyxy)
        scores = _as_array(result.boxes.conf)
        class_ids = _as_array(result.boxes.cls).astype(int)

        return [
            Detection.from_xyxy(
                str(names.get(int(class_id), int(class_id))), float(score), *(float(v) for v in box)
            )
            for box, score, class_id in zip(corners, scores, class_ids)
        ]


def yolo_factory(cfg: DetectionConfig):
    """Deferred constructor handed to ``load_model``."""
    yolo_cfg = CpuYoloConfig.from_detection_config(cfg)
    return lambda: UltralyticsCpuBackend(yolo_cfg)
