"""
Spoken announcements.

Speech is a best-effort side channel: the alert manager talks to a SpeechSink
and never depends on the result. ``Pyttsx3Speech`` speaks on its own worker
thread so a slow engine cannot stall detection; ``NullSpeech`` stands in when
speech is disabled or no engine is installed.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Callable, Optional, Protocol, Tuple

import pyttsx3

from navae.errors import SpeechUnavailable
from navae.models.config import SpeechConfig


class SpeechSink(Protocol):
    def speak(self, text: str, rate: float = 1.0, volume: float = 1.0) -> None:
        ...


class NullSpeech:
    """Speech sink that says nothing."""

    def speak(self, text: str, rate: float = 1.0, volume: float = 1.0) -> None:
        logging.debug(f"Speech disabled, skipping: {text}")

    def close(self) -> None:
        pass


class Pyttsx3Speech:
    """
    Queue utterances for a background pyttsx3 worker.

    ``rate`` is a multiplier of the engine's default words-per-minute; volume
    is in [0, 1].
    """

    def __init__(self, engine_factory: Callable[[], Any] = pyttsx3.init):
        self._engine_factory = engine_factory
        self._queue: "queue.Queue[Optional[Tuple[str, float, float]]]" = queue.Queue()
        # Engine default words-per-minute, read on first use
        self._base_rate: Optional[float] = None
        self._thread = threading.Thread(target=self._worker, name="speech", daemon=True)
        self._thread.start()

    def speak(self, text: str, rate: float = 1.0, volume: float = 1.0) -> None:
        if not text or not text.strip():
            return
        self._queue.put((text.strip(), rate, volume))

    def _worker(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                break
            text, rate, volume = item
            try:
                self._say(text, rate, volume)
            except Exception as e:
                logging.warning(f"Speech failed for '{text}': {e}")

    def _say(self, text: str, rate: float, volume: float) -> None:
        engine = self._engine_factory()
        # pyttsx3.init() may hand back the same engine, already sped up
        if self._base_rate is None:
            self._base_rate = engine.getProperty("rate") or 200
        engine.setProperty("rate", int(self._base_rate * rate))
        engine.setProperty("volume", max(0.0, min(1.0, volume)))
        engine.say(text)
        engine.runAndWait()

    def close(self) -> None:
        self._queue.put(None)
        self._thread.join(timeout=2.0)


def probe_engine(engine_factory: Callable[[], Any] = pyttsx3.init) -> None:
    """
    Raises:
        SpeechUnavailable: If no speech driver can be initialised.
    """
    try:
        engine_factory()
    except Exception as e:
        raise SpeechUnavailable(str(e)) from e


def create_speech_sink(cfg: SpeechConfig, engine_factory: Callable[[], Any] = pyttsx3.init):
    """Feature-detect speech and return the sink to use."""
    if not cfg.enabled:
        logging.info("Speech disabled by configuration")
        return NullSpeech()
    try:
        probe_engine(engine_factory)
    except SpeechUnavailable as e:
        logging.info(f"Speech unavailable, continuing without it: {e}")
        return NullSpeech()
    return Pyttsx3Speech(engine_factory)
