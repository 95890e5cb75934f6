"""
Live camera feed.

Owns the single open ObservationSource, keeps the most recent decoded frame for
the detection poller and the live stream, and swaps the source when the
requested camera facing changes.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import Callable, Optional

from navae.errors import MediaUnavailable
from navae.models.frame import FrameData
from .base import ObservationSource

SourceFactory = Callable[[str], ObservationSource]


class CameraFeed:
    """
    Reads frames from the camera for the current facing.

    The feed is "ready" once the active source has produced a decodable frame.
    Changing the facing takes effect on the next read: the old source is
    released and the feed is not ready again until the new one delivers.
    """

    def __init__(
        self,
        source_factory: SourceFactory,
        facing: str = "environment",
        frame_interval: float = 0.0,
        retry_delay: float = 1.0,
    ):
        self._source_factory = source_factory
        self._facing = facing
        self._frame_interval = frame_interval
        self._retry_delay = retry_delay
        self._source: Optional[ObservationSource] = None
        self._latest: Optional[FrameData] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def facing(self) -> str:
        return self._facing

    @property
    def is_ready(self) -> bool:
        return self._latest is not None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def latest(self) -> Optional[FrameData]:
        return self._latest

    def require_latest(self) -> FrameData:
        """
        Raises:
            MediaUnavailable: If the camera has not delivered a frame yet.
        """
        if self._latest is None:
            raise MediaUnavailable(f"no frame yet from facing={self._facing}")
        return self._latest

    def set_facing(self, facing: str) -> None:
        if facing != self._facing:
            logging.info(f"Camera facing changed: {self._facing} -> {facing}")
            self._facing = facing

    async def step(self) -> Optional[FrameData]:
        """Read one frame, re-acquiring the source first if the facing changed."""
        if self._source is None or self._source.facing != self._facing:
            await self._reacquire()
            if self._source is None:
                return None

        frame_data = await asyncio.to_thread(self._source.read)
        if frame_data is not None:
            self._latest = frame_data
        return frame_data

    async def _reacquire(self) -> None:
        self._release()
        source = self._source_factory(self._facing)
        try:
            await asyncio.to_thread(source.open)
        except RuntimeError as e:
            logging.warning(f"Camera unavailable for facing={self._facing}: {e}")
            return
        self._source = source

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="camera-feed")

    async def _run(self) -> None:
        while True:
            started = time.monotonic()
            frame_data = await self.step()
            if self._source is None:
                await asyncio.sleep(self._retry_delay)
                continue
            if frame_data is None:
                # Nothing decodable yet; give the device a moment
                await asyncio.sleep(0.01)
                continue
            elapsed = time.monotonic() - started
            await asyncio.sleep(max(0.0, self._frame_interval - elapsed))

    async def close(self) -> None:
        """Stop reading and release the camera."""
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        self._release()

    def _release(self) -> None:
        if self._source is not None:
            self._source.close()
            self._source = None
        self._latest = None
