"""Keyword fallback for license detection.

Checks characteristic phrases of common license families in a fixed
priority order (more specific first). Used when the fingerprint matcher
has no confident match.
"""

from __future__ import annotations

from dataclasses import dataclass

from depscan.models import UNKNOWN_LICENSE


@dataclass(frozen=True)
class _Signature:
    license_id: str
    required: tuple[str, ...]
    forbidden: tuple[str, ...] = ()
    any_of: tuple[str, ...] = ()
    # Required phrases must appear in the title block, not just anywhere.
    in_title: bool = False

    def matches(self, text: str) -> bool:
        scope = text[:_TITLE_CHARS] if self.in_title else text
        if not all(p in scope for p in self.required):
            return False
        if any(p in text for p in self.forbidden):
            return False
        if self.any_of and not any(p in text for p in self.any_of):
            return False
        return True


# Leading span of normalized text searched by title-only signatures.
_TITLE_CHARS = 300

_BSD_REDIST = "REDISTRIBUTION AND USE IN SOURCE AND BINARY FORMS"
_BSD_DISCLAIMER = "THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS"

SIGNATURES: tuple[_Signature, ...] = (
    _Signature("ISC", ("PERMISSION TO USE, COPY, MODIFY, AND", "WITH OR WITHOUT FEE")),
    _Signature("MIT", ("PERMISSION IS HEREBY GRANTED, FREE OF CHARGE",)),
    _Signature("Apache-2.0", ("APACHE LICENSE", "VERSION 2.0")),
    _Signature("BSD-3-Clause", (_BSD_REDIST, "NEITHER THE NAME", _BSD_DISCLAIMER)),
    _Signature("BSD-2-Clause", (_BSD_REDIST, _BSD_DISCLAIMER), forbidden=("NEITHER THE NAME",)),
    _Signature("MPL-2.0", ("MOZILLA PUBLIC LICENSE", "VERSION 2.0")),
    _Signature("LGPL-3.0", ("GNU LESSER GENERAL PUBLIC LICENSE", "VERSION 3"), in_title=True),
    _Signature("LGPL-2.1", ("GNU LESSER GENERAL PUBLIC LICENSE", "VERSION 2.1"), in_title=True),
    _Signature("AGPL-3.0", ("GNU AFFERO GENERAL PUBLIC LICENSE", "VERSION 3"), in_title=True),
    _Signature("GPL-3.0", ("GNU GENERAL PUBLIC LICENSE", "VERSION 3")),
    _Signature("GPL-2.0", ("GNU GENERAL PUBLIC LICENSE", "VERSION 2")),
    _Signature("Unlicense", ("THIS IS FREE AND UNENCUMBERED SOFTWARE", "PUBLIC DOMAIN")),
    _Signature("CC0-1.0", (), any_of=("CC0 1.0 UNIVERSAL", "CREATIVE COMMONS ZERO")),
)


def detect_license_by_keywords(content: str) -> str:
    """Return the first license whose signature phrases appear in *content*."""
    upper = " ".join(content.upper().split())
    for signature in SIGNATURES:
        if signature.matches(upper):
            return signature.license_id
    return UNKNOWN_LICENSE
