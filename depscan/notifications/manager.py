"""Manager: fan a notification out to every enabled sender."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import structlog

from depscan.notifications.base import Notification, NotificationLevel, Sender

log = structlog.get_logger("depscan.notifications")


class Manager:
    """Holds the senders for one run; constructed and passed by the caller.

    Delivery is at-most-once: each enabled sender gets one attempt, and
    failures are logged rather than raised.
    """

    def __init__(self, senders: Iterable[Sender] = ()) -> None:
        self._senders: list[Sender] = list(senders)

    @property
    def senders(self) -> tuple[Sender, ...]:
        return tuple(self._senders)

    def register_sender(self, sender: Sender) -> None:
        self._senders.append(sender)
        log.info("notifications.sender_registered", sender=sender.name)

    def clear_senders(self) -> None:
        self._senders = []

    async def send(self, notification: Notification) -> int:
        """Deliver to every sender enabled for the level.

        Returns the number of senders that accepted the notification.
        """
        targets = [s for s in self._senders if s.is_enabled(notification.level)]
        if not targets:
            return 0

        tasks = [asyncio.create_task(s.send(notification)) for s in targets]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        delivered = 0
        for sender, result in zip(targets, results):
            if isinstance(result, BaseException):
                log.error(
                    "notifications.send_failed",
                    sender=sender.name,
                    level=notification.level.value,
                    error=str(result),
                )
            else:
                delivered += 1
        return delivered

    async def send_error(self, title: str, message: str, **kwargs) -> int:
        return await self.send(Notification(NotificationLevel.ERROR, title, message, **kwargs))

    async def send_warning(self, title: str, message: str, **kwargs) -> int:
        return await self.send(Notification(NotificationLevel.WARNING, title, message, **kwargs))

    async def send_info(self, title: str, message: str, **kwargs) -> int:
        return await self.send(Notification(NotificationLevel.INFO, title, message, **kwargs))

    async def send_success(self, title: str, message: str, **kwargs) -> int:
        return await self.send(Notification(NotificationLevel.SUCCESS, title, message, **kwargs))
