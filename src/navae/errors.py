"""
Error kinds raised by the detection, camera and speech collaborators.

None of these are fatal to the process; each is absorbed by the component
that owns the collaborator.
"""

from __future__ import annotations


class ModelLoadFailure(RuntimeError):
    """The detection model could not be loaded. Detection stays disabled."""


class DetectionFailure(RuntimeError):
    """A single detect call failed. The tick is abandoned."""


class MediaUnavailable(RuntimeError):
    """The camera has not produced a decodable frame yet."""


class SpeechUnavailable(RuntimeError):
    """No speech engine is available on this machine."""
