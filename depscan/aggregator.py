"""Aggregator: join go.mod requirements with resolved modules and licenses."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import structlog

from depscan.models import (
    Dependency,
    LicenseResult,
    ModFile,
    OverrideDirective,
    ResolvedModule,
)

log = structlog.get_logger("depscan.aggregator")

LicenseLookup = Callable[[str], LicenseResult]


@dataclass(frozen=True)
class _Entry:
    path: str
    version: str
    indirect: bool
    dir: str


def path_sort_key(dep: Dependency) -> bytes:
    """Byte-wise module path ordering, independent of locale."""
    return dep.path.encode("utf-8")


def find_override(
    overrides: Sequence[OverrideDirective], path: str, version: str | None
) -> OverrideDirective | None:
    """Return the directive replacing *path*@*version*.

    A directive pinned to the exact version wins over a wildcard one.
    """
    wildcard: OverrideDirective | None = None
    for directive in overrides:
        if directive.from_path != path:
            continue
        if directive.from_version is None:
            wildcard = directive
        elif directive.from_version == version:
            return directive
    return wildcard


def _effective_dir(
    override: OverrideDirective | None,
    module: ResolvedModule | None,
    resolved_by_path: dict[str, ResolvedModule],
    manifest_dir: str,
) -> str:
    if override is not None and override.to_local_dir is not None:
        local = override.to_local_dir
        if not os.path.isabs(local):
            local = os.path.join(manifest_dir, local)
        return os.path.normpath(os.path.abspath(local))
    if module is not None and module.dir:
        return module.dir
    if override is not None:
        target = resolved_by_path.get(override.to_path)
        if target is not None:
            return target.dir
    return ""


def aggregate(
    modfile: ModFile,
    resolved: Iterable[ResolvedModule],
    license_lookup: LicenseLookup,
    *,
    manifest_dir: str = "",
    workers: int = 1,
) -> list[Dependency]:
    """Build the canonical dependency list, sorted by module path.

    Requirements keep their ``indirect`` flag from go.mod. Modules reported
    by the resolver but not listed in go.mod are transitive and are marked
    indirect. The main module is never included. Replaced modules keep
    their original path as the key; only the directory used for license
    lookup follows the replacement.
    """
    resolved_by_path: dict[str, ResolvedModule] = {}
    for module in resolved:
        if module.main or module.path == modfile.module:
            continue
        if module.path in resolved_by_path:
            log.debug("aggregator.duplicate_module", path=module.path)
            continue
        resolved_by_path[module.path] = module

    entries: dict[str, _Entry] = {}
    for req in modfile.requirements:
        if req.path == modfile.module:
            continue
        if req.path in entries:
            log.debug("aggregator.duplicate_requirement", path=req.path)
            continue
        module = resolved_by_path.get(req.path)
        override = find_override(modfile.overrides, req.path, req.version)
        entries[req.path] = _Entry(
            path=req.path,
            version=module.version if module is not None and module.version else req.version,
            indirect=req.indirect,
            dir=_effective_dir(override, module, resolved_by_path, manifest_dir),
        )

    for path, module in resolved_by_path.items():
        if path in entries:
            continue
        override = find_override(modfile.overrides, path, module.version)
        entries[path] = _Entry(
            path=path,
            version=module.version,
            indirect=True,
            dir=_effective_dir(override, module, resolved_by_path, manifest_dir),
        )

    ordered = sorted(entries.values(), key=lambda e: e.path.encode("utf-8"))
    dirs = [e.dir for e in ordered]

    def _lookup(module_dir: str) -> LicenseResult:
        if not module_dir:
            return LicenseResult()
        return license_lookup(module_dir)

    if workers > 1 and len(ordered) > 1:
        # map() preserves input order, so results line up with `ordered`.
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(_lookup, dirs))
    else:
        results = [_lookup(d) for d in dirs]

    deps = [
        Dependency(
            path=entry.path,
            version=entry.version,
            indirect=entry.indirect,
            license=result.identifier,
            license_file=result.file,
            dir=entry.dir,
        )
        for entry, result in zip(ordered, results)
    ]
    log.info(
        "aggregator.finished",
        dependencies=len(deps),
        missing_dir=sum(1 for d in deps if not d.dir),
    )
    return deps
