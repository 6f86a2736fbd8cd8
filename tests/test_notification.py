"""Tests for the notification manager and Discord sender."""

from __future__ import annotations

import json

import httpx
import pytest

from depscan.models import Dependency
from depscan.notifications import (
    DiscordConfig,
    DiscordSender,
    Manager,
    Notification,
    NotificationLevel,
    Sender,
    build_non_mit_warning,
)

# ── fixtures ──────────────────────────────────────────────────────────────


class _RecordingSender:
    def __init__(self, name: str = "fake", levels=None, fail: bool = False):
        self.name = name
        self.levels = set(levels or NotificationLevel)
        self.fail = fail
        self.sent: list[Notification] = []

    def is_enabled(self, level: NotificationLevel) -> bool:
        return level in self.levels

    async def send(self, notification: Notification) -> None:
        if self.fail:
            raise RuntimeError("webhook down")
        self.sent.append(notification)


def _capture_transport(captured: list[httpx.Request], status: int = 204) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(status)

    return httpx.MockTransport(handler)


_WEBHOOK = "https://discord.example/api/webhooks/1/token"


# ── Manager ──────────────────────────────────────────────────────────────


class TestManager:
    def test_fake_sender_satisfies_protocol(self):
        assert isinstance(_RecordingSender(), Sender)
        assert isinstance(DiscordSender(DiscordConfig()), Sender)

    @pytest.mark.asyncio
    async def test_fan_out(self):
        a, b = _RecordingSender("a"), _RecordingSender("b")
        manager = Manager([a, b])
        delivered = await manager.send_warning("t", "m")
        assert delivered == 2
        assert a.sent[0].level is NotificationLevel.WARNING
        assert b.sent[0].title == "t"

    @pytest.mark.asyncio
    async def test_disabled_level_skipped(self):
        sender = _RecordingSender(levels={NotificationLevel.ERROR})
        manager = Manager([sender])
        assert await manager.send_info("t", "m") == 0
        assert sender.sent == []

    @pytest.mark.asyncio
    async def test_failure_is_isolated(self):
        ok, broken = _RecordingSender("ok"), _RecordingSender("broken", fail=True)
        manager = Manager([broken, ok])
        assert await manager.send_error("t", "m") == 1
        assert len(ok.sent) == 1

    @pytest.mark.asyncio
    async def test_no_senders(self):
        assert await Manager().send_success("t", "m") == 0

    def test_register_and_clear(self):
        manager = Manager()
        manager.register_sender(_RecordingSender())
        assert len(manager.senders) == 1
        manager.clear_senders()
        assert manager.senders == ()


# ── DiscordSender ────────────────────────────────────────────────────────


class TestDiscordSender:
    def test_disabled_without_url(self):
        sender = DiscordSender(DiscordConfig())
        assert not any(sender.is_enabled(level) for level in NotificationLevel)

    def test_level_toggles(self):
        sender = DiscordSender(DiscordConfig(webhook_url=_WEBHOOK))
        assert sender.is_enabled(NotificationLevel.ERROR)
        assert sender.is_enabled(NotificationLevel.WARNING)
        assert not sender.is_enabled(NotificationLevel.INFO)
        assert sender.is_enabled(NotificationLevel.SUCCESS)

    def test_payload(self):
        sender = DiscordSender(DiscordConfig(webhook_url=_WEBHOOK))
        payload = sender.build_payload(
            Notification(
                NotificationLevel.WARNING,
                "Non-MIT Licenses Detected",
                "body",
                fields={"Dependencies": "x"},
                group="License Scanner",
                version="v1.2.0",
            )
        )
        assert payload["username"] == "depscan License Scanner"
        (embed,) = payload["embeds"]
        assert embed["title"] == "[WARNING] Non-MIT Licenses Detected"
        assert embed["color"] == 0xFFA500
        assert embed["fields"] == [{"name": "Dependencies", "value": "x", "inline": False}]
        assert embed["footer"] == {"text": "depscan - License Scanner | v1.2.0"}

    @pytest.mark.asyncio
    async def test_send_posts_json(self):
        captured: list[httpx.Request] = []
        sender = DiscordSender(
            DiscordConfig(webhook_url=_WEBHOOK), transport=_capture_transport(captured)
        )
        await sender.send(Notification(NotificationLevel.ERROR, "boom", "details"))
        (request,) = captured
        assert request.method == "POST"
        assert str(request.url) == _WEBHOOK
        body = json.loads(request.content)
        assert body["embeds"][0]["title"] == "[ERROR] boom"
        assert body["embeds"][0]["color"] == 0xFF0000

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        sender = DiscordSender(
            DiscordConfig(webhook_url=_WEBHOOK), transport=_capture_transport([], status=500)
        )
        with pytest.raises(httpx.HTTPStatusError):
            await sender.send(Notification(NotificationLevel.ERROR, "boom", "details"))

    @pytest.mark.asyncio
    async def test_http_error_logged_by_manager(self):
        sender = DiscordSender(
            DiscordConfig(webhook_url=_WEBHOOK), transport=_capture_transport([], status=500)
        )
        assert await Manager([sender]).send_error("boom", "details") == 0


# ── non-MIT warning ──────────────────────────────────────────────────────


class TestNonMitWarning:
    def test_fields(self):
        deps = [
            Dependency("example.com/b", "v2.0.0", True, "GPL-2.0"),
            Dependency("example.com/c", "v1.0.0", False, "Apache-2.0"),
        ]
        n = build_non_mit_warning(deps)
        assert n.level is NotificationLevel.WARNING
        assert n.title == "Non-MIT Licenses Detected"
        assert "**2**" in n.message
        assert n.fields["License Summary"] == "• Apache-2.0: 1\n• GPL-2.0: 1"
        assert "`example.com/b` (v2.0.0) - **GPL-2.0**" in n.fields["Dependencies"]

    def test_list_truncated(self):
        deps = [Dependency(f"example.com/m{i}", "v1.0.0", True, "ISC") for i in range(13)]
        listing = build_non_mit_warning(deps).fields["Dependencies"].splitlines()
        assert len(listing) == 11
        assert listing[-1] == "... and 3 more"
