from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Callable, Optional

from navae.alerts.manager import AlertManager
from navae.alerts.policy import AlertPolicy
from navae.alerts.speech import SpeechSink, create_speech_sink
from navae.errors import ModelLoadFailure
from navae.inference.backend import InferenceBackend, load_model
from navae.inference.cpu_backend import yolo_factory
from navae.models.config import Config
from navae.observation import CameraFeed, create_source_for_facing
from navae.observation.feed import SourceFactory
from navae.pipeline.poller import DetectionPoller
from .context import RuntimeContext
from .state import ControlState, Facing, model_failed, model_loaded, toggle_detection, toggle_facing

ModelFactory = Callable[[], InferenceBackend]


class AssistantService:
    """
    Lifecycle and controls of the assistant.

    - start(): begin reading the camera and load the model in the background
    - toggle_detection() / toggle_camera(): the two UI controls
    - shutdown(): stop polling, release the camera

    The poller runs exactly when the control state says it should: it is
    started or stopped after every transition that can change that.
    """

    def __init__(self, ctx: RuntimeContext, model_factory: ModelFactory, poll_interval: float = 0.1):
        self.ctx = ctx
        self.poller = DetectionPoller(ctx, interval=poll_interval)
        self._model_factory = model_factory
        self._load_task: Optional[asyncio.Task] = None

    @property
    def control(self) -> ControlState:
        return self.ctx.control

    async def start(self) -> None:
        loop = asyncio.get_running_loop()
        self.ctx.alerts.set_scheduler(loop.call_later)
        self.ctx.feed.start()
        self._load_task = asyncio.create_task(self.load_model(), name="model-load")
        logging.info("Assistant started, loading model...")

    async def load_model(self) -> bool:
        """Load the model; on failure detection stays disabled for the session."""
        try:
            model = await load_model(self._model_factory)
        except ModelLoadFailure as e:
            logging.error(f"Error loading model: {e}")
            self.ctx.apply(model_failed)
            return False

        self.ctx.model = model
        self.ctx.apply(model_loaded)
        logging.info("Model loaded successfully")
        await self._sync_poller()
        return True

    async def toggle_detection(self) -> ControlState:
        before = self.ctx.control
        state = self.ctx.apply(toggle_detection)
        if state != before:
            logging.info(f"Detection {'enabled' if state.detecting else 'disabled'}")
            await self._sync_poller()
        return state

    def toggle_camera(self) -> ControlState:
        state = self.ctx.apply(toggle_facing)
        self.ctx.feed.set_facing(state.facing.value)
        # Boxes from the previous camera no longer line up
        self.ctx.clear_detections()
        return state

    async def _sync_poller(self) -> None:
        if self.ctx.control.polling:
            self.poller.start()
        else:
            await self.poller.stop()
            self.ctx.clear_detections()

    async def shutdown(self) -> None:
        await self.poller.stop()
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._load_task
        await self.ctx.feed.close()
        self.ctx.alerts.set_scheduler(None)
        close = getattr(self.ctx.alerts.speech, "close", None)
        if close is not None:
            close()
        logging.info("Assistant stopped")


def build_service(
    config: Config,
    source_factory: Optional[SourceFactory] = None,
    model_factory: Optional[ModelFactory] = None,
    speech: Optional[SpeechSink] = None,
) -> AssistantService:
    """
    Wire the default collaborators (OpenCV camera, Ultralytics model, pyttsx3
    speech) from config. Any of them can be replaced.
    """
    if source_factory is None:
        source_factory = lambda facing: create_source_for_facing(config.camera, facing)  # noqa: E731
    if model_factory is None:
        model_factory = yolo_factory(config.detection)
    if speech is None:
        speech = create_speech_sink(config.speech)

    facing = Facing(config.camera.facing)
    fps = config.camera.fps or 30
    feed = CameraFeed(source_factory, facing=facing.value, frame_interval=1.0 / fps)
    alerts = AlertManager(
        AlertPolicy.from_config(config.alerts),
        speech=speech,
        speech_rate=config.speech.rate,
        speech_volume=config.speech.volume,
    )
    ctx = RuntimeContext(
        config=config,
        feed=feed,
        alerts=alerts,
        control=ControlState(facing=facing),
    )
    return AssistantService(
        ctx,
        model_factory=model_factory,
        poll_interval=config.detection.poll_interval_ms / 1000.0,
    )
