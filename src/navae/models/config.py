"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

FACINGS = ("user", "environment")


def _default_devices() -> Dict[str, Union[int, str]]:
    return {"environment": 0, "user": 1}


@dataclass
class CameraConfig:
    """
    Camera configuration.

    ``devices`` maps a facing to the OpenCV device index, stream URL or file
    path used when that facing is selected.
    """
    devices: Dict[str, Union[int, str]] = field(default_factory=_default_devices)
    facing: str = "environment"
    resolution: Optional[List[int]] = field(default_factory=lambda: [1280, 720])
    fps: int = 30
    max_retries: int = 3

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        return cls(
            devices=dict(d.get("devices") or _default_devices()),
            facing=d.get("facing", "environment"),
            resolution=d.get("resolution", [1280, 720]),
            fps=d.get("fps", 30),
            max_retries=d.get("max_retries", 3),
        )

    def device_for(self, facing: str) -> Union[int, str]:
        """Device for a facing, falling back to the environment camera."""
        if facing in self.devices:
            return self.devices[facing]
        return self.devices.get("environment", 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "devices": dict(self.devices),
            "facing": self.facing,
            "resolution": self.resolution,
            "fps": self.fps,
            "max_retries": self.max_retries,
        }


@dataclass
class DetectionConfig:
    """YOLO detector and polling configuration."""
    model: str = "yolov8n.pt"
    conf_threshold: float = 0.25
    iou_threshold: float = 0.45
    device: Optional[str] = None
    poll_interval_ms: int = 100

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionConfig":
        return cls(
            model=d.get("model", "yolov8n.pt"),
            conf_threshold=d.get("conf_threshold", 0.25),
            iou_threshold=d.get("iou_threshold", 0.45),
            device=d.get("device"),
            poll_interval_ms=d.get("poll_interval_ms", 100),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "model": self.model,
            "conf_threshold": self.conf_threshold,
            "iou_threshold": self.iou_threshold,
            "poll_interval_ms": self.poll_interval_ms,
        }
        if self.device is not None:
            d["device"] = self.device
        return d


@dataclass
class AlertConfig:
    """Hazard alert thresholds and timings."""
    score_threshold: float = 0.7
    cooldown_ms: float = 3000.0
    display_ms: float = 2000.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AlertConfig":
        return cls(
            score_threshold=d.get("score_threshold", 0.7),
            cooldown_ms=d.get("cooldown_ms", 3000.0),
            display_ms=d.get("display_ms", 2000.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score_threshold": self.score_threshold,
            "cooldown_ms": self.cooldown_ms,
            "display_ms": self.display_ms,
        }


@dataclass
class SpeechConfig:
    """Spoken announcements. ``rate`` is a multiplier of the engine default."""
    enabled: bool = True
    rate: float = 1.5
    volume: float = 0.8

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SpeechConfig":
        return cls(
            enabled=d.get("enabled", True),
            rate=d.get("rate", 1.5),
            volume=d.get("volume", 0.8),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "rate": self.rate, "volume": self.volume}


@dataclass
class WebConfig:
    host: str = "0.0.0.0"
    port: int = 5000
    stream_fps: int = 15

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(
            host=d.get("host", "0.0.0.0"),
            port=d.get("port", 5000),
            stream_fps=d.get("stream_fps", 15),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"host": self.host, "port": self.port, "stream_fps": self.stream_fps}


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    alerts: AlertConfig = field(default_factory=AlertConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/navae.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera", {}) or {}),
            detection=DetectionConfig.from_dict(d.get("detection", {}) or {}),
            alerts=AlertConfig.from_dict(d.get("alerts", {}) or {}),
            speech=SpeechConfig.from_dict(d.get("speech", {}) or {}),
            web=WebConfig.from_dict(d.get("web", {}) or {}),
            log_path=d.get("log_path", "logs/navae.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "camera": self.camera.to_dict(),
            "detection": self.detection.to_dict(),
            "alerts": self.alerts.to_dict(),
            "speech": self.speech.to_dict(),
            "web": self.web.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
