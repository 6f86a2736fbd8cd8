"""Pipeline entry point: go.mod -> resolved modules -> licensed dependencies."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from depscan.aggregator import aggregate
from depscan.config import Config
from depscan.licenses.classifier import LicenseClassifier
from depscan.licenses.inspector import LicenseInspector
from depscan.licenses.locator import LicenseLocator
from depscan.models import Dependency
from depscan.parsers.go_mod import read_go_mod
from depscan.resolver import ModuleResolver

log = structlog.get_logger("depscan.scanner")


def collect_dependencies(go_mod_path: str | Path) -> list[Dependency]:
    """Collect and classify all dependencies of the module at *go_mod_path*."""
    return collect_dependencies_with_config(Config.from_env(str(go_mod_path)))


def collect_dependencies_with_config(
    cfg: Config,
    resolver: ModuleResolver | None = None,
) -> list[Dependency]:
    """Run the full pipeline with explicit settings.

    Raises ``ParseError`` or ``ResolutionError``; nothing is returned on
    failure.
    """
    go_mod = Path(cfg.go_mod_path).resolve()
    manifest_dir = str(go_mod.parent)

    modfile = read_go_mod(go_mod)

    resolver = resolver or ModuleResolver(cfg.resolve_command, timeout=cfg.resolve_timeout)
    resolved = resolver.resolve(manifest_dir)

    inspector = LicenseInspector(
        locator=LicenseLocator(
            cfg.license_names, case_insensitive_fallback=cfg.case_insensitive_fallback
        ),
        classifier=LicenseClassifier(threshold=cfg.classifier_threshold),
    )
    deps = aggregate(
        modfile,
        resolved,
        inspector,
        manifest_dir=manifest_dir,
        workers=max(1, cfg.workers),
    )
    log.info(
        "scanner.finished",
        module=modfile.module,
        go_mod=os.fspath(go_mod),
        dependencies=len(deps),
    )
    return deps
