"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import time
from typing import List, Optional

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from navae.models.detection import Detection
from navae.models.frame import FrameData
from navae.observation.base import ObservationConfig, ObservationSource


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class RecordingSpeech:
    """Speech sink that remembers what it was asked to say."""

    def __init__(self):
        self.spoken = []
        self.closed = False

    def speak(self, text: str, rate: float = 1.0, volume: float = 1.0) -> None:
        self.spoken.append((text, rate, volume))

    def close(self) -> None:
        self.closed = True


class MockSource(ObservationSource):
    """Mock observation source that returns the same frame forever."""

    def __init__(self, config: ObservationConfig, frame: Optional[np.ndarray] = None, fail_open: bool = False):
        super().__init__(config)
        self._frame = frame if frame is not None else np.zeros((480, 640, 3), dtype=np.uint8)
        self._fail_open = fail_open
        self.closed = False

    def open(self) -> None:
        if self._fail_open:
            raise RuntimeError("device busy")
        self._is_open = True
        self._frame_index = 0

    def read(self) -> Optional[FrameData]:
        if not self._is_open:
            return None
        self._frame_index += 1
        return FrameData.from_numpy(
            self._frame.copy(),
            timestamp=time.time(),
            frame_index=self._frame_index,
            facing=self.facing,
        )

    def close(self) -> None:
        self._is_open = False
        self.closed = True


class MockBackend:
    """Inference backend returning a scripted detection list per call."""

    def __init__(self, results: Optional[List[List[Detection]]] = None, error: Optional[Exception] = None):
        self.results = list(results or [])
        self.error = error
        self.calls = 0

    def detect(self, frame: np.ndarray) -> List[Detection]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        if not self.results:
            return []
        if len(self.results) == 1:
            return self.results[0]
        return self.results.pop(0)


def make_detection(class_name: str, score: float, x: float = 10, y: float = 30, w: float = 100, h: float = 80) -> Detection:
    return Detection.from_xywh(class_name, score, x, y, w, h)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def speech():
    return RecordingSpeech()


@pytest.fixture
def mock_source_factory():
    """Factory building a MockSource per facing; records what it built."""
    built = []

    def factory(facing: str) -> MockSource:
        source = MockSource(ObservationConfig(facing=facing, mirrored=facing == "user"))
        built.append(source)
        return source

    factory.built = built
    return factory


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  devices:
    environment: 0
    user: 1
  facing: "environment"
  resolution: [640, 480]
  fps: 30

detection:
  model: "yolov8n.pt"
  conf_threshold: 0.25
  poll_interval_ms: 100

alerts:
  score_threshold: 0.7
  cooldown_ms: 3000
  display_ms: 2000

speech:
  enabled: false

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "devices": {"environment": 0, "user": 1},
            "facing": "environment",
            "resolution": [1280, 720],
            "fps": 30,
        },
        "detection": {
            "model": "yolov8n.pt",
            "conf_threshold": 0.25,
            "iou_threshold": 0.45,
            "poll_interval_ms": 100,
        },
        "alerts": {
            "score_threshold": 0.7,
            "cooldown_ms": 3000,
            "display_ms": 2000,
        },
        "speech": {
            "enabled": True,
            "rate": 1.5,
            "volume": 0.8,
        },
        "web": {
            "host": "127.0.0.1",
            "port": 5000,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
