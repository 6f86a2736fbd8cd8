"""Notification model and sender interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable


class NotificationLevel(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    SUCCESS = "SUCCESS"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    title: str
    message: str
    fields: dict[str, str] = field(default_factory=dict)
    group: str = ""
    version: str = ""


@runtime_checkable
class Sender(Protocol):
    """Interface that every notification sender must satisfy."""

    name: str

    def is_enabled(self, level: NotificationLevel) -> bool: ...

    async def send(self, notification: Notification) -> None: ...
