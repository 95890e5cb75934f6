"""
Hazard alert policy.

Pure state transitions over an immutable AlertState: evaluate a detection list
against the per-class cooldown table, expire alerts whose display time has
elapsed, dismiss a single alert. Nothing here reads a clock or schedules work;
callers pass ``now`` in milliseconds.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, List, Mapping, Tuple

from navae.models.alert import ActiveAlert
from navae.models.config import AlertConfig
from navae.models.detection import Detection

HAZARD_CLASSES = frozenset({"person", "car", "truck", "bus", "bicycle", "motorcycle"})


@dataclass(frozen=True)
class AlertPolicy:
    """
    Attributes:
        score_threshold: A detection must score strictly above this to alert.
        cooldown_ms: Minimum time between two alerts of the same class.
        display_ms: How long an alert stays active once created.
    """
    score_threshold: float = 0.7
    cooldown_ms: float = 3000.0
    display_ms: float = 2000.0

    @classmethod
    def from_config(cls, cfg: AlertConfig) -> "AlertPolicy":
        return cls(
            score_threshold=float(cfg.score_threshold),
            cooldown_ms=float(cfg.cooldown_ms),
            display_ms=float(cfg.display_ms),
        )


@dataclass(frozen=True)
class AlertState:
    """
    Attributes:
        cooldowns: Class name -> time (ms) of its last fired alert. Never pruned.
        active: Alerts currently shown, oldest first.
    """
    cooldowns: Mapping[str, float] = field(default_factory=dict)
    active: Tuple[ActiveAlert, ...] = ()


def is_hazard(class_name: str) -> bool:
    return class_name in HAZARD_CLASSES


def qualifies(det: Detection, policy: AlertPolicy) -> bool:
    """Hazard class with a score above the alert threshold."""
    return is_hazard(det.class_name) and det.score > policy.score_threshold


def cooled_down(
    cooldowns: Mapping[str, float], class_name: str, now: float, policy: AlertPolicy
) -> bool:
    """True if the class never alerted or its last alert is older than the cooldown."""
    last = cooldowns.get(class_name)
    return last is None or now - last > policy.cooldown_ms


def alert_message(class_name: str) -> str:
    return f"⚠️ {class_name.upper()} DETECTED"


def evaluate(
    state: AlertState,
    detections: Iterable[Detection],
    now: float,
    policy: AlertPolicy,
    next_id: Callable[[float], str],
) -> Tuple[AlertState, List[ActiveAlert]]:
    """
    Fire alerts for qualifying detections whose class has cooled down.

    Detections are evaluated in order and the cooldown table is updated as soon
    as an alert fires, so a second detection of the same class in the same list
    is suppressed.

    Returns:
        The new state and the alerts created by this call.
    """
    cooldowns = dict(state.cooldowns)
    active = list(state.active)
    fired: List[ActiveAlert] = []

    for det in detections:
        if not qualifies(det, policy) or not cooled_down(cooldowns, det.class_name, now, policy):
            continue

        alert = ActiveAlert(
            id=next_id(now),
            class_name=det.class_name,
            message=alert_message(det.class_name),
            created_at=now,
            expires_at=now + policy.display_ms,
        )
        cooldowns[det.class_name] = now
        active.append(alert)
        fired.append(alert)

    if not fired:
        return state, fired
    return AlertState(cooldowns=cooldowns, active=tuple(active)), fired


def expire(state: AlertState, now: float) -> AlertState:
    """Drop alerts whose display time has elapsed."""
    kept = tuple(a for a in state.active if a.expires_at > now)
    if len(kept) == len(state.active):
        return state
    return replace(state, active=kept)


def dismiss(state: AlertState, alert_id: str) -> AlertState:
    kept = tuple(a for a in state.active if a.id != alert_id)
    if len(kept) == len(state.active):
        return state
    return replace(state, active=kept)
