"""Policy violation models for dependency-auditor."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class Severity(Enum):
    """How a finding affects the audit outcome."""

    ERROR = "error"
    WARNING = "warning"


class PolicyViolation(BaseModel):
    """Common fields of every policy finding."""

    model_config = {"extra": "forbid", "frozen": True}

    severity: Severity = Field(default=Severity.ERROR, description="Finding severity")
    package_name: str = Field(description="Name of the package with the violation")
    package_version: Optional[str] = Field(
        default=None,
        description="Version of the package (None when several versions are involved)",
    )
    reason: str = Field(description="Why this is a violation")

    @property
    def is_error(self) -> bool:
        """True if this finding fails the audit."""
        return self.severity == Severity.ERROR

    def package_display(self) -> str:
        """Return ``name@version`` or just the name."""
        if self.package_version is None:
            return self.package_name
        return f"{self.package_name}@{self.package_version}"


class LicenseViolation(PolicyViolation):
    """A package whose license expression is not satisfied by the policy."""

    kind: Literal["license"] = "license"
    detected_license: Optional[str] = Field(
        default=None,
        description="The license expression found on the package (None if unknown)",
    )


class AdvisoryViolation(PolicyViolation):
    """A package affected by an advisory that is not ignored."""

    kind: Literal["advisory"] = "advisory"
    advisory_id: str = Field(description="Identifier of the advisory")
    title: Optional[str] = Field(default=None, description="Advisory title")


class DuplicateVersionViolation(PolicyViolation):
    """A package name present at more than one version."""

    kind: Literal["duplicate"] = "duplicate"
    versions: list[str] = Field(
        default_factory=list,
        description="The non-exempt versions found in the graph",
    )


class BannedPackageViolation(PolicyViolation):
    """A package matching a ``bans.deny`` entry."""

    kind: Literal["banned"] = "banned"


Violation = Annotated[
    Union[
        LicenseViolation,
        AdvisoryViolation,
        DuplicateVersionViolation,
        BannedPackageViolation,
    ],
    Field(discriminator="kind"),
]


class UnusedPolicyEntry(BaseModel):
    """A policy entry that matched nothing in the audited graph."""

    model_config = {"extra": "forbid", "frozen": True}

    kind: Literal["license-exception", "advisory-ignore"] = Field(
        description="Which table the entry belongs to",
    )
    entry: str = Field(description="The entry as written (package or advisory id)")
    reason: str = Field(description="Why the entry is considered unused")


class SuppressedAdvisory(BaseModel):
    """An advisory finding hidden by the ignore list."""

    model_config = {"extra": "forbid", "frozen": True}

    advisory_id: str = Field(description="Identifier of the advisory")
    matched_ignore: str = Field(description="The ignore entry that matched")
    package_name: str = Field(description="Affected package name")
    package_version: str = Field(description="Affected package version")
