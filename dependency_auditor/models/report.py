"""Audit report Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from dependency_auditor.models.policy import (
    SuppressedAdvisory,
    UnusedPolicyEntry,
    Violation,
)


class Verbosity(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


class AuditOptions(BaseModel):
    """Options for rendering an audit."""

    model_config = {"extra": "forbid"}

    format: Literal["terminal", "markdown", "json"] = Field(
        default="terminal",
        description="Output format for the audit report",
    )
    verbosity: Verbosity = Field(
        default=Verbosity.NORMAL,
        description="Output verbosity level (quiet, normal, verbose)",
    )


class AuditReport(BaseModel):
    """Result of evaluating a policy against a dependency graph."""

    model_config = {"extra": "forbid"}

    packages_checked: int = Field(default=0, description="Packages in the graph")
    checks_run: list[str] = Field(
        default_factory=list,
        description="Names of the checks that were evaluated",
    )
    violations: list[Violation] = Field(
        default_factory=list,
        description="All findings, errors and warnings alike",
    )
    suppressed_advisories: list[SuppressedAdvisory] = Field(
        default_factory=list,
        description="Advisory findings hidden by the ignore list",
    )
    unused_entries: list[UnusedPolicyEntry] = Field(
        default_factory=list,
        description="Policy entries that matched nothing",
    )

    @property
    def errors(self) -> list[Violation]:
        """Findings that fail the audit."""
        return [v for v in self.violations if v.is_error]

    @property
    def warnings(self) -> list[Violation]:
        """Findings reported without failing the audit."""
        return [v for v in self.violations if not v.is_error]

    @property
    def has_errors(self) -> bool:
        """Check whether the audit failed.

        Returns:
            True if any finding has error severity, False otherwise.
        """
        return any(v.is_error for v in self.violations)

    def count_by_kind(self) -> dict[str, int]:
        """Count error findings per check kind.

        Returns:
            Mapping of kind (license, advisory, duplicate, banned) to count.
        """
        counts = {"license": 0, "advisory": 0, "duplicate": 0, "banned": 0}
        for violation in self.errors:
            counts[violation.kind] += 1
        return counts
