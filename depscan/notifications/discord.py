"""Discord webhook sender."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx

from depscan.notifications.base import Notification, NotificationLevel

_COLORS: dict[NotificationLevel, int] = {
    NotificationLevel.ERROR: 0xFF0000,
    NotificationLevel.WARNING: 0xFFA500,
    NotificationLevel.INFO: 0x00BFFF,
    NotificationLevel.SUCCESS: 0x00FF00,
}

_TIMEOUT = 10.0


@dataclass
class DiscordConfig:
    webhook_url: str = ""
    notify_on_error: bool = True
    notify_on_warn: bool = True
    notify_on_info: bool = False
    username: str = "depscan License Scanner"


class DiscordSender:
    """Post notifications as Discord webhook embeds."""

    name = "discord"

    def __init__(
        self,
        config: DiscordConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    def is_enabled(self, level: NotificationLevel) -> bool:
        if not self.config.webhook_url:
            return False
        if level == NotificationLevel.ERROR:
            return self.config.notify_on_error
        if level == NotificationLevel.WARNING:
            return self.config.notify_on_warn
        if level == NotificationLevel.INFO:
            return self.config.notify_on_info
        return level == NotificationLevel.SUCCESS

    def build_payload(self, notification: Notification) -> dict[str, Any]:
        group = notification.group or "depscan"
        footer = f"depscan - {group}"
        if notification.version:
            footer += f" | {notification.version}"
        embed = {
            "title": f"[{notification.level.value}] {notification.title}",
            "description": notification.message,
            "color": _COLORS.get(notification.level, _COLORS[NotificationLevel.INFO]),
            "fields": [
                {"name": name, "value": value, "inline": False}
                for name, value in notification.fields.items()
            ],
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "footer": {"text": footer},
        }
        return {"username": self.config.username, "embeds": [embed]}

    async def send(self, notification: Notification) -> None:
        """POST the embed; raises ``httpx.HTTPStatusError`` on a 4xx/5xx reply."""
        if not self.config.webhook_url:
            return
        async with httpx.AsyncClient(timeout=_TIMEOUT, transport=self._transport) as client:
            resp = await client.post(self.config.webhook_url, json=self.build_payload(notification))
            resp.raise_for_status()
