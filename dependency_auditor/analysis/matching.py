"""Package and version matching shared by the policy checks."""
from __future__ import annotations

from typing import Optional

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion

from dependency_auditor.constants import VERSION_OPERATORS
from dependency_auditor.models.config import PackageSpec
from dependency_auditor.models.graph import GraphPackage


def version_matches(version: str, requirement: Optional[str]) -> bool:
    """Check a concrete version against a policy version field.

    A requirement of None matches every version. A requirement starting
    with a comparison operator is a specifier set (e.g. ``>=1.0, <2``).
    Anything else must equal the version exactly.

    Args:
        version: The resolved version from the graph.
        requirement: The version field from the policy entry.

    Returns:
        True if the version satisfies the requirement.
    """
    if requirement is None:
        return True
    if not requirement.startswith(VERSION_OPERATORS):
        return version == requirement
    try:
        return SpecifierSet(requirement).contains(version, prereleases=True)
    except (InvalidSpecifier, InvalidVersion):
        # Versions that are not PEP 440 compatible never satisfy a specifier
        return False


def spec_matches(spec: PackageSpec, pkg: GraphPackage) -> bool:
    """Check whether a policy entry names this package.

    Package name matching is case-sensitive.
    """
    return spec.name == pkg.name and version_matches(pkg.version, spec.version)
