"""Custom exceptions for dependency-auditor."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class AuditorError(Exception):
    """Base exception for all dependency-auditor errors."""

    pass


class ConfigurationError(AuditorError):
    """Exception raised when the policy document is invalid.

    Carries the location of the problem where the parser reports one,
    so the CLI can point at the offending line or field.
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        line: Optional[int] = None,
        field: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.line = line
        self.field = field


class GraphError(AuditorError):
    """Exception raised when a dependency graph cannot be loaded."""

    pass


class NetworkError(AuditorError):
    """Exception raised when a network request fails."""

    pass
