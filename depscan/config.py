"""Runtime configuration, read from the environment and overridden by CLI flags."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from depscan.exceptions import ConfigError

DEFAULT_LICENSE_NAMES: tuple[str, ...] = (
    "LICENSE",
    "LICENSE.md",
    "LICENSE.txt",
    "COPYING",
    "COPYRIGHT",
)

DEFAULT_RESOLVE_TIMEOUT = 300.0


def _env_number(name: str, default, convert):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return convert(raw.strip())
    except ValueError:
        raise ConfigError(f"invalid {name}: {raw!r}") from None


@dataclass
class Config:
    """Settings for one scan run."""

    go_mod_path: str = "./go.mod"
    go_binary: str = "go"
    resolve_timeout: float = DEFAULT_RESOLVE_TIMEOUT
    license_names: tuple[str, ...] = field(default=DEFAULT_LICENSE_NAMES)
    case_insensitive_fallback: bool = False
    workers: int = 1
    classifier_threshold: float = 0.8
    discord_webhook_url: str = ""

    @property
    def resolve_command(self) -> list[str]:
        return [self.go_binary, "list", "-m", "-json", "all"]

    @classmethod
    def from_env(cls, go_mod_path: str = "./go.mod") -> Config:
        """Build a Config from environment variables.

        Reads:
            DEPSCAN_GO_BINARY       go executable (default: go)
            DEPSCAN_RESOLVE_TIMEOUT seconds to wait for ``go list`` (default: 300)
            DEPSCAN_WORKERS         license lookup threads (default: 1)
            DISCORD_WEBHOOK_URL     webhook for --warn-non-mit

        Raises ConfigError when a numeric setting is not a number.
        """
        return cls(
            go_mod_path=go_mod_path,
            go_binary=os.environ.get("DEPSCAN_GO_BINARY", "go"),
            resolve_timeout=_env_number(
                "DEPSCAN_RESOLVE_TIMEOUT", DEFAULT_RESOLVE_TIMEOUT, float
            ),
            workers=max(1, _env_number("DEPSCAN_WORKERS", 1, int)),
            discord_webhook_url=os.environ.get("DISCORD_WEBHOOK_URL", ""),
        )
