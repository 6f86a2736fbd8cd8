"""Notification fan-out (currently Discord webhooks)."""

from depscan.notifications.base import Notification, NotificationLevel, Sender
from depscan.notifications.discord import DiscordConfig, DiscordSender
from depscan.notifications.license_warning import build_non_mit_warning
from depscan.notifications.manager import Manager

__all__ = [
    "DiscordConfig",
    "DiscordSender",
    "Manager",
    "Notification",
    "NotificationLevel",
    "Sender",
    "build_non_mit_warning",
]
