"""Ban checks: duplicate versions and explicitly banned packages."""
from __future__ import annotations

import logging

from dependency_auditor.analysis.matching import spec_matches
from dependency_auditor.models.config import BansConfig
from dependency_auditor.models.graph import DependencyGraph
from dependency_auditor.models.policy import (
    BannedPackageViolation,
    DuplicateVersionViolation,
    Severity,
)

logger = logging.getLogger(__name__)


def skip_tree_exempt_ids(graph: DependencyGraph, config: BansConfig) -> set[str]:
    """Find packages exempt from the duplicate check via ``skip-tree``.

    A package is exempt when it lies inside the subtree of a skip-tree
    root (within the entry's depth) and cannot be reached from any graph
    root without passing through a skip-tree root.

    Args:
        graph: The resolved dependency graph.
        config: The bans table.

    Returns:
        Set of exempt package ids.
    """
    if not config.skip_tree:
        return set()

    skip_roots: set[str] = set()
    subtree: set[str] = set()
    for entry in config.skip_tree:
        roots = [pkg.id for pkg in graph.packages if spec_matches(entry, pkg)]
        if not roots:
            logger.debug("skip-tree entry %s matched nothing", entry.display())
            continue
        skip_roots.update(roots)
        subtree |= graph.reachable_from(roots, max_depth=entry.depth)

    outside = graph.reachable_from(graph.root_ids(), blocked=skip_roots)
    return subtree - outside


def duplicate_exempt_ids(graph: DependencyGraph, config: BansConfig) -> set[str]:
    """All package ids exempt from the duplicate check (skip and skip-tree)."""
    exempt = skip_tree_exempt_ids(graph, config)
    for pkg in graph.packages:
        if any(spec_matches(entry, pkg) for entry in config.skip):
            exempt.add(pkg.id)
    return exempt


def check_duplicate_versions(
    graph: DependencyGraph,
    config: BansConfig,
) -> list[DuplicateVersionViolation]:
    """Report package names present at more than one version.

    Exempt versions are removed before counting, so a name is reported
    only when at least two of its versions are outside every exemption.

    Args:
        graph: The resolved dependency graph.
        config: The bans table.

    Returns:
        One finding per duplicated name. Findings are errors in ``deny``
        mode and warnings in ``warn`` mode. ``allow`` mode returns nothing.
    """
    if config.multiple_versions == "allow":
        return []

    severity = Severity.ERROR if config.multiple_versions == "deny" else Severity.WARNING
    exempt = duplicate_exempt_ids(graph, config)
    findings: list[DuplicateVersionViolation] = []

    for name, packages in graph.versions_by_name().items():
        if len(packages) < 2:
            continue
        remaining = [pkg.version for pkg in packages if pkg.id not in exempt]
        if len(remaining) < 2:
            continue
        findings.append(
            DuplicateVersionViolation(
                severity=severity,
                package_name=name,
                versions=remaining,
                reason=f"Found {len(remaining)} versions of '{name}': "
                + ", ".join(remaining),
            )
        )

    logger.debug("Duplicate check: %d duplicated names", len(findings))
    return findings


def check_banned_packages(
    graph: DependencyGraph,
    config: BansConfig,
) -> list[BannedPackageViolation]:
    """Report every package matching a ``bans.deny`` entry."""
    violations: list[BannedPackageViolation] = []
    for pkg in graph.packages:
        for entry in config.deny:
            if not spec_matches(entry, pkg):
                continue
            reason = f"Package is banned by '{entry.display()}'"
            if entry.reason:
                reason += f": {entry.reason}"
            violations.append(
                BannedPackageViolation(
                    package_name=pkg.name,
                    package_version=pkg.version,
                    reason=reason,
                )
            )
            break
    return violations
