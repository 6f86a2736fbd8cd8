"""License discovery and classification."""

from depscan.licenses.classifier import LicenseClassifier, LicenseMatch, classify_license
from depscan.licenses.inspector import LicenseInspector
from depscan.licenses.keywords import detect_license_by_keywords
from depscan.licenses.locator import LicenseLocator

__all__ = [
    "LicenseClassifier",
    "LicenseInspector",
    "LicenseLocator",
    "LicenseMatch",
    "classify_license",
    "detect_license_by_keywords",
]
