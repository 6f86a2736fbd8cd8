"""Combine locator and classifier into the per-module license lookup."""

from __future__ import annotations

import os

import structlog

from depscan.exceptions import ClassificationWarning
from depscan.licenses.classifier import LicenseClassifier
from depscan.licenses.locator import LicenseLocator
from depscan.models import UNKNOWN_LICENSE, LicenseResult

log = structlog.get_logger("depscan.licenses")


class LicenseInspector:
    """Callable ``dir -> LicenseResult`` used by the aggregator."""

    def __init__(
        self,
        locator: LicenseLocator | None = None,
        classifier: LicenseClassifier | None = None,
    ) -> None:
        self.locator = locator or LicenseLocator()
        self.classifier = classifier or LicenseClassifier()

    def __call__(self, module_dir: str) -> LicenseResult:
        if not module_dir:
            return LicenseResult()

        license_file = self.locator.locate(module_dir)
        if license_file is None:
            return LicenseResult()

        try:
            identifier = self.classifier.classify_file(os.path.join(module_dir, license_file))
        except ClassificationWarning as e:
            log.warning("inspector.license_unreadable", dir=module_dir, error=str(e))
            identifier = UNKNOWN_LICENSE
        return LicenseResult(identifier=identifier, file=license_file)
