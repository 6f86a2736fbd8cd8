"""depscan: license audit for Go module dependencies."""

from depscan.exceptions import ClassificationWarning, DepscanError, ParseError, ResolutionError
from depscan.models import (
    Dependency,
    LicenseResult,
    ModFile,
    OverrideDirective,
    Requirement,
    ResolvedModule,
)
from depscan.policy import filter_by_license
from depscan.scanner import collect_dependencies, collect_dependencies_with_config

__all__ = [
    "ClassificationWarning",
    "Dependency",
    "DepscanError",
    "LicenseResult",
    "ModFile",
    "OverrideDirective",
    "ParseError",
    "Requirement",
    "ResolutionError",
    "ResolvedModule",
    "collect_dependencies",
    "collect_dependencies_with_config",
    "filter_by_license",
]
