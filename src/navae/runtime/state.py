"""
Application control state.

One immutable value holds what the UI controls: whether the model is loaded,
whether detection is on, and which camera is in use. Every change goes through
a pure transition function that returns a new state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class ModelStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class Facing(str, Enum):
    USER = "user"  # front camera
    ENVIRONMENT = "environment"  # back camera


@dataclass(frozen=True)
class ControlState:
    model_status: ModelStatus = ModelStatus.LOADING
    detecting: bool = False
    facing: Facing = Facing.ENVIRONMENT

    @property
    def can_toggle_detection(self) -> bool:
        return self.model_status is ModelStatus.READY

    @property
    def polling(self) -> bool:
        """The detection poller should be running."""
        return self.detecting and self.model_status is ModelStatus.READY

    @property
    def mirrored(self) -> bool:
        return self.facing is Facing.USER

    @property
    def status(self) -> str:
        """Status line value: loading, ready, detecting or unavailable."""
        if self.model_status is ModelStatus.LOADING:
            return "loading"
        if self.model_status is ModelStatus.FAILED:
            return "unavailable"
        return "detecting" if self.detecting else "ready"


def model_loaded(state: ControlState) -> ControlState:
    return replace(state, model_status=ModelStatus.READY)


def model_failed(state: ControlState) -> ControlState:
    return replace(state, model_status=ModelStatus.FAILED, detecting=False)


def toggle_detection(state: ControlState) -> ControlState:
    """Flip detection on or off; a no-op until the model is ready."""
    if not state.can_toggle_detection:
        return state
    return replace(state, detecting=not state.detecting)


def toggle_facing(state: ControlState) -> ControlState:
    facing = Facing.ENVIRONMENT if state.facing is Facing.USER else Facing.USER
    return replace(state, facing=facing)
