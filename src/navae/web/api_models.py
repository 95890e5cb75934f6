from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class AlertModel(BaseModel):
    id: str
    class_name: str
    message: str
    created_at: float
    expires_at: float


class StateResponse(BaseModel):
    """
    Everything the page needs to render, polled several times a second.
    """
    status: str = Field(..., description="loading|ready|detecting|unavailable")
    model_status: str = Field(..., description="loading|ready|failed")
    detecting: bool
    can_toggle_detection: bool
    facing: str = Field(..., description="user|environment")
    mirrored: bool
    camera_ready: bool
    alerts: List[AlertModel] = Field(default_factory=list)
    hazard_classes: List[str]
    cooldown_s: float
    timestamp: float


class DetectionModel(BaseModel):
    class_name: str
    score: float
    bbox: List[float] = Field(..., description="[x, y, width, height] in frame pixels")


class DetectionsResponse(BaseModel):
    count: int
    detections: List[DetectionModel]


class HealthResponse(BaseModel):
    status: str
    uptime_seconds: int
    camera_ready: bool
    model_status: str
    poller_running: bool
    poller_ticks: int
    poller_failures: int
