"""Pydantic data models for dependency-auditor."""

from dependency_auditor.models.config import (
    AdvisoriesConfig,
    AdvisoryIgnore,
    BannedPackage,
    BansConfig,
    LicenseException,
    LicensesConfig,
    PackageSpec,
    PolicyConfig,
    SkipTreeEntry,
)
from dependency_auditor.models.graph import (
    AdvisoryFinding,
    DependencyGraph,
    GraphPackage,
    package_id,
)
from dependency_auditor.models.policy import (
    AdvisoryViolation,
    BannedPackageViolation,
    DuplicateVersionViolation,
    LicenseViolation,
    PolicyViolation,
    Severity,
    SuppressedAdvisory,
    UnusedPolicyEntry,
)
from dependency_auditor.models.report import AuditOptions, AuditReport, Verbosity

__all__ = [
    "AdvisoriesConfig",
    "AdvisoryFinding",
    "AdvisoryIgnore",
    "AdvisoryViolation",
    "AuditOptions",
    "AuditReport",
    "BannedPackage",
    "BannedPackageViolation",
    "BansConfig",
    "DependencyGraph",
    "DuplicateVersionViolation",
    "GraphPackage",
    "LicenseException",
    "LicenseViolation",
    "LicensesConfig",
    "PackageSpec",
    "PolicyConfig",
    "PolicyViolation",
    "Severity",
    "SkipTreeEntry",
    "SuppressedAdvisory",
    "UnusedPolicyEntry",
    "Verbosity",
    "package_id",
]
