"""
Detection poller.

While detection is on, runs one detection pass on the latest camera frame at a
fixed interval. Each pass feeds the alert manager and redraws the overlay.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from navae.errors import DetectionFailure, MediaUnavailable
from navae.models.detection import Detection
from .overlay import render_detections

if TYPE_CHECKING:
    from navae.runtime.context import RuntimeContext


@dataclass
class PollerStats:
    """Runtime statistics for the poller."""
    ticks: int = 0
    detections: int = 0
    alerts: int = 0
    skipped_not_ready: int = 0
    stale: int = 0
    failures: int = 0


class DetectionPoller:
    """
    Cancellable polling task.

    Ticks run back to back on one task, so a slow detect call delays the next
    tick instead of overlapping it. ``tick()`` may also be awaited directly;
    a call made while another tick is in flight returns immediately.

    Example:
        poller = DetectionPoller(ctx, interval=0.1)
        poller.start()
        ...
        await poller.stop()
    """

    def __init__(self, ctx: RuntimeContext, interval: float = 0.1):
        self.ctx = ctx
        self.interval = interval
        self.stats = PollerStats()
        self._task: Optional[asyncio.Task] = None
        self._in_flight = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        """
        Start polling. Refused unless the model is loaded and detection is on.
        """
        if self.running:
            return True
        if not self.ctx.control.polling or self.ctx.model is None:
            logging.warning(f"Poller not started: status={self.ctx.control.status}")
            return False
        self._task = asyncio.create_task(self._run(), name="detection-poller")
        logging.info(f"Detection poller started (interval={self.interval * 1000:.0f}ms)")
        return True

    async def stop(self) -> None:
        """Cancel the pending tick; no further ticks run after this returns."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logging.error(f"Detection poller had already stopped: {e}")
        self._task = None
        logging.info(
            f"Detection poller stopped: ticks={self.stats.ticks}, "
            f"alerts={self.stats.alerts}, failures={self.stats.failures}"
        )

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            started = loop.time()
            try:
                await self.tick()
            except Exception:
                self.stats.failures += 1
                logging.exception("Detection tick failed")
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self.interval - elapsed))

    async def tick(self) -> Optional[List[Detection]]:
        """
        One detection pass.

        Returns the detections, or None if the tick was skipped (detection
        off, no frame yet, detect failed, another tick in flight, or the camera
        was switched while detect ran).
        """
        ctx = self.ctx
        if self._in_flight or not ctx.control.polling or ctx.model is None:
            return None

        try:
            frame_data = ctx.feed.require_latest()
        except MediaUnavailable as e:
            self.stats.skipped_not_ready += 1
            logging.debug(f"Skipping tick: {e}")
            return None

        self._in_flight = True
        try:
            detections = await ctx.model.detect(frame_data.frame)
        except DetectionFailure as e:
            self.stats.failures += 1
            logging.error(f"Detection tick abandoned: {e}")
            return None
        finally:
            self._in_flight = False

        # The camera was switched while detect ran; these boxes belong to the old one
        if frame_data.facing is not None and frame_data.facing != ctx.feed.facing:
            self.stats.stale += 1
            logging.debug(f"Dropping detections from facing={frame_data.facing}")
            return None

        self.stats.ticks += 1
        self.stats.detections += len(detections)
        ctx.latest_detections = detections

        fired = ctx.alerts.process(detections)
        self.stats.alerts += len(fired)

        render_detections(ctx.overlay, detections, frame_data.width, frame_data.height)
        return detections
