"""
Inference backend interface.

Backends are synchronous and return pixel-space detections in the original
frame coordinate system. ``Model`` wraps a backend so the event loop can await
it without blocking.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Protocol

import numpy as np

from navae.errors import DetectionFailure, ModelLoadFailure
from navae.models.detection import Detection


class InferenceBackend(Protocol):
    def detect(self, frame: np.ndarray) -> List[Detection]:
        ...


class Model:
    """Awaitable handle on a loaded inference backend."""

    def __init__(self, backend: InferenceBackend):
        self._backend = backend

    @property
    def backend(self) -> InferenceBackend:
        return self._backend

    async def detect(self, frame: np.ndarray) -> List[Detection]:
        """
        Run one detection pass off the event loop.

        Raises:
            DetectionFailure: If the backend raised.
        """
        try:
            return await asyncio.to_thread(self._backend.detect, frame)
        except Exception as e:
            raise DetectionFailure(f"detect failed: {e}") from e


async def load_model(factory: Callable[[], InferenceBackend]) -> Model:
    """
    Construct a backend off the event loop (weights loading is slow).

    Raises:
        ModelLoadFailure: If the backend could not be constructed.
    """
    try:
        backend = await asyncio.to_thread(factory)
    except Exception as e:
        raise ModelLoadFailure(f"model load failed: {e}") from e
    logging.info(f"Model loaded: {type(backend).__name__}")
    return Model(backend)
