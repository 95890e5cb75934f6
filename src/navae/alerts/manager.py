"""
Alert manager: owns the cooldown table and the active alert set.

Wraps the pure policy functions with the side effects around them: reading the
clock, scheduling each alert's removal, logging and speaking.
"""

from __future__ import annotations

import itertools
import logging
import time
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional

from navae.models.alert import ActiveAlert
from navae.models.detection import Detection
from .policy import AlertPolicy, AlertState, dismiss, evaluate, expire
from .speech import NullSpeech, SpeechSink

Clock = Callable[[], float]
# (delay_seconds, callback); asyncio's loop.call_later fits
Scheduler = Callable[[float, Callable[[], None]], Any]


def wall_clock_ms() -> float:
    return time.time() * 1000.0


class AlertManager:
    """
    Turns detection lists into alerts.

    Example:
        manager = AlertManager(AlertPolicy(), speech=NullSpeech())
        manager.set_scheduler(asyncio.get_running_loop().call_later)
        fired = manager.process(detections)
    """

    def __init__(
        self,
        policy: Optional[AlertPolicy] = None,
        speech: Optional[SpeechSink] = None,
        clock: Clock = wall_clock_ms,
        scheduler: Optional[Scheduler] = None,
        speech_rate: float = 1.5,
        speech_volume: float = 0.8,
    ):
        self.policy = policy or AlertPolicy()
        self._speech = speech or NullSpeech()
        self._clock = clock
        self._scheduler = scheduler
        self._speech_rate = speech_rate
        self._speech_volume = speech_volume
        self._state = AlertState()
        # Composite ids: two alerts in the same millisecond still differ
        self._sequence = itertools.count(1)

    @property
    def state(self) -> AlertState:
        return self._state

    @property
    def cooldowns(self) -> Dict[str, float]:
        return dict(self._state.cooldowns)

    @property
    def speech(self) -> SpeechSink:
        return self._speech

    def set_scheduler(self, scheduler: Optional[Scheduler]) -> None:
        self._scheduler = scheduler

    def _next_id(self, now: float) -> str:
        return f"{int(now)}-{next(self._sequence)}"

    def process(self, detections: Iterable[Detection], now: Optional[float] = None) -> List[ActiveAlert]:
        """
        Evaluate one detection list. Returns the alerts fired by it.
        """
        now = self._clock() if now is None else now
        self._state = expire(self._state, now)
        self._state, fired = evaluate(self._state, detections, now, self.policy, self._next_id)

        for alert in fired:
            logging.info(f"Hazard alert: {alert.class_name} (id={alert.id})")
            if self._scheduler is not None:
                self._scheduler(self.policy.display_ms / 1000.0, partial(self.dismiss, alert.id))
            self._announce(alert)

        return fired

    def _announce(self, alert: ActiveAlert) -> None:
        text = f"Alert: {alert.class_name} detected"
        try:
            self._speech.speak(text, rate=self._speech_rate, volume=self._speech_volume)
        except Exception as e:
            logging.warning(f"Speech sink failed: {e}")

    def dismiss(self, alert_id: str) -> None:
        """Remove one alert; called by the scheduled expiry."""
        self._state = dismiss(self._state, alert_id)

    def active(self, now: Optional[float] = None) -> List[ActiveAlert]:
        """Alerts still on display at ``now``."""
        now = self._clock() if now is None else now
        self._state = expire(self._state, now)
        return list(self._state.active)
