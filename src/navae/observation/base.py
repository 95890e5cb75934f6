"""
Camera source contract.

A source is one physical (or simulated) camera for one facing. The camera feed
opens it, reads decoded frames from it and releases it when the user switches
cameras or the app stops.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from navae.models.frame import FrameData


@dataclass
class ObservationConfig:
    """
    Attributes:
        facing: "user" (front) or "environment" (back).
        mirrored: Flip frames horizontally before handing them out.
        resolution: Requested (width, height); None keeps the device default.
        fps: Requested frame rate; None keeps the device default.
        metadata: Free-form extras for a particular source.
    """
    facing: str = "environment"
    mirrored: bool = False
    resolution: Optional[Tuple[int, int]] = None
    fps: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class ObservationSource(ABC):
    """
    open() -> read() ... -> close(). Also usable as a context manager.
    """

    def __init__(self, config: ObservationConfig):
        self._config = config
        self._is_open = False
        self._frame_index = 0

    @property
    def facing(self) -> str:
        return self._config.facing

    @property
    def mirrored(self) -> bool:
        return self._config.mirrored

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def frame_index(self) -> int:
        """Frames delivered since open."""
        return self._frame_index

    @abstractmethod
    def open(self) -> None:
        """
        Raises:
            RuntimeError: If the camera cannot be acquired.
        """

    @abstractmethod
    def read(self) -> Optional[FrameData]:
        """Latest decoded frame, or None if none is available right now."""

    @abstractmethod
    def close(self) -> None:
        """Release the camera. Calling it twice is harmless."""

    def __enter__(self) -> "ObservationSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
