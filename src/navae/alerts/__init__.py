"""
Hazard alerting: cooldown policy, alert manager and speech output.
"""

from .policy import HAZARD_CLASSES, AlertPolicy, AlertState, is_hazard
from .manager import AlertManager
from .speech import NullSpeech, Pyttsx3Speech, SpeechSink, create_speech_sink

__all__ = [
    "HAZARD_CLASSES",
    "AlertPolicy",
    "AlertState",
    "AlertManager",
    "is_hazard",
    "NullSpeech",
    "Pyttsx3Speech",
    "SpeechSink",
    "create_speech_sink",
]
