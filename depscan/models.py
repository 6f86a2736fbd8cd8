"""Data models for the dependency license scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

UNKNOWN_LICENSE = "UNKNOWN"


@dataclass(frozen=True)
class Requirement:
    """A ``require`` entry declared in go.mod."""

    path: str
    version: str
    indirect: bool = False


@dataclass(frozen=True)
class OverrideDirective:
    """A ``replace`` entry: substitute one module for another.

    ``to_local_dir`` is set when the target is a filesystem path, in which
    case ``to_version`` is None.
    """

    from_path: str
    to_path: str
    from_version: str | None = None
    to_version: str | None = None
    to_local_dir: str | None = None

    @property
    def is_local(self) -> bool:
        return self.to_local_dir is not None

    @property
    def is_rename(self) -> bool:
        return not self.is_local and self.to_path != self.from_path


@dataclass(frozen=True)
class Exclude:
    """An ``exclude`` entry (parsed, not used by aggregation)."""

    path: str
    version: str


@dataclass(frozen=True)
class ModFile:
    """Parsed go.mod contents."""

    module: str
    requirements: tuple[Requirement, ...] = ()
    overrides: tuple[OverrideDirective, ...] = ()
    excludes: tuple[Exclude, ...] = ()
    go_version: str | None = None


@dataclass(frozen=True)
class ResolvedModule:
    """One record emitted by ``go list -m -json all``.

    ``dir`` is the effective on-disk location: the replacement's directory
    when the module is replaced, otherwise its own. Empty when the module
    is not in the local module cache.
    """

    path: str
    version: str
    dir: str = ""
    is_override_target: bool = False
    main: bool = False
    replace_path: str | None = None
    replace_version: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> ResolvedModule:
        """Build from a decoded oracle record."""
        replace = record.get("Replace") or None
        module_dir = record.get("Dir") or ""
        replace_path = None
        replace_version = None
        if isinstance(replace, dict):
            replace_path = replace.get("Path") or None
            replace_version = replace.get("Version") or None
            if replace.get("Dir"):
                module_dir = replace["Dir"]
        return cls(
            path=record.get("Path", ""),
            version=record.get("Version") or "",
            dir=module_dir,
            is_override_target=isinstance(replace, dict),
            main=bool(record.get("Main", False)),
            replace_path=replace_path,
            replace_version=replace_version,
        )


@dataclass(frozen=True)
class LicenseResult:
    identifier: str = UNKNOWN_LICENSE
    file: str = ""


@dataclass(frozen=True)
class Dependency:
    """A resolved dependency with license information."""

    path: str
    version: str
    indirect: bool
    license: str = UNKNOWN_LICENSE
    license_file: str = ""
    dir: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Go-style JSON record shape."""
        return {
            "Path": self.path,
            "Version": self.version,
            "Indirect": self.indirect,
            "License": self.license,
            "LicenseFile": self.license_file,
            "Dir": self.dir,
        }


@dataclass(frozen=True)
class Summary:
    total: int
    direct: int
    indirect: int
    licenses: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "direct": self.direct,
            "indirect": self.indirect,
            "licenses": dict(self.licenses),
        }
