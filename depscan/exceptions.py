"""Custom exceptions for depscan."""


class DepscanError(Exception):
    """Base exception for all fatal depscan errors."""


class ParseError(DepscanError):
    """Raised when go.mod is missing or malformed."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"go.mod:{line}: {message}"
        super().__init__(message)


class ResolutionError(DepscanError):
    """Raised when the module resolution command is missing, fails or times out."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class ClassificationWarning(Exception):
    """Raised when a license file cannot be read.

    Non-fatal: the affected dependency is recorded with license ``UNKNOWN``.
    """


class ConfigError(DepscanError):
    """Raised when an environment setting cannot be parsed."""
