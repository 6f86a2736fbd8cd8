"""Locate the license file inside a module directory."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

from depscan.config import DEFAULT_LICENSE_NAMES

log = structlog.get_logger("depscan.licenses")

# Name prefixes for the case-insensitive fallback scan (both spellings).
_FALLBACK_PREFIXES = ("license", "licence", "copying", "copyright")


class LicenseLocator:
    """Find the license file in a module directory.

    Candidates are checked in order and the first existing regular file
    wins. With ``case_insensitive_fallback`` the directory listing is then
    scanned for names like ``License-MIT`` or ``copying.lesser``.
    """

    def __init__(
        self,
        candidates: Sequence[str] = DEFAULT_LICENSE_NAMES,
        case_insensitive_fallback: bool = False,
    ) -> None:
        self.candidates = tuple(candidates)
        self.case_insensitive_fallback = case_insensitive_fallback

    def locate(self, directory: str | Path | None) -> str | None:
        """Return the matching file name (relative to *directory*) or None."""
        if not directory:
            return None
        root = Path(directory)

        for name in self.candidates:
            try:
                if (root / name).is_file():
                    return name
            except OSError:
                return None

        if not self.case_insensitive_fallback:
            return None

        try:
            entries = sorted(root.iterdir(), key=lambda p: p.name)
        except OSError as e:
            log.debug("locator.unreadable_dir", dir=str(root), error=str(e))
            return None
        for entry in entries:
            if entry.name.lower().startswith(_FALLBACK_PREFIXES) and entry.is_file():
                return entry.name
        return None
