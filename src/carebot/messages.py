"""Message type shared by the conversation store, the HTTP API and the console."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

USER = "user"
ASSISTANT = "assistant"
ROLES = (USER, ASSISTANT)


def format_time(ts: datetime) -> str:
    """Two-digit hour and minute, e.g. ``03:07 PM``."""
    return ts.strftime("%I:%M %p")


@dataclass(frozen=True)
class Message:
    """One turn of the conversation. Never mutated once created."""

    id: str
    role: str       # "user" | "assistant"
    content: str
    timestamp: datetime

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"role must be one of {ROLES}, got {self.role!r}")

    @property
    def time(self) -> str:
        return format_time(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "time": self.time,
        }
