"""
ActiveAlert model: a transient notification shown while it is unexpired.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ActiveAlert:
    """
    Attributes:
        id: Unique token, "{created_at_ms}-{sequence}".
        class_name: Hazard class that triggered the alert.
        message: Banner text.
        created_at: Creation time in milliseconds.
        expires_at: Time in milliseconds at which the alert stops being shown.
    """
    id: str
    class_name: str
    message: str
    created_at: float
    expires_at: float

    def is_active(self, now: float) -> bool:
        return self.created_at <= now < self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "class_name": self.class_name,
            "message": self.message,
            "created_at": self.created_at,
            "expires_at": self.expires_at,
        }
