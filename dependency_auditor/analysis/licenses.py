"""License checking against the allow-list and per-package exceptions.

Uses the license-expression library to parse SPDX expressions, so a
package licensed ``MIT OR Apache-2.0`` passes when either license is
allowed, and ``MIT AND BSD-3-Clause`` needs both.
"""
from __future__ import annotations

import logging
from typing import Any, NamedTuple, Optional

from license_expression import (
    ExpressionError,
    LicenseSymbol,
    LicenseWithExceptionSymbol,
    Licensing,
)

from dependency_auditor.analysis.matching import spec_matches
from dependency_auditor.models.config import LicenseException, LicensesConfig
from dependency_auditor.models.graph import DependencyGraph, GraphPackage
from dependency_auditor.models.policy import LicenseViolation

logger = logging.getLogger(__name__)

# No symbol table: any identifier parses, matching stays exact
_licensing = Licensing()


class LicenseCheckResult(NamedTuple):
    """Result of the license check.

    Attributes:
        violations: One violation per failing package.
        used_exceptions: Exceptions that matched at least one package.
    """

    violations: list[LicenseViolation]
    used_exceptions: list[LicenseException]


def parse_license_expression(expression: str) -> Any:
    """Parse an SPDX license expression.

    The legacy ``MIT/Apache-2.0`` form is read as ``MIT OR Apache-2.0``.

    Args:
        expression: License expression string.

    Returns:
        Parsed expression tree, or None for an empty string.

    Raises:
        ExpressionError: If the expression cannot be parsed.
    """
    return _licensing.parse(expression.replace("/", " OR "))


def _is_satisfied(node: Any, allowed: set[str]) -> bool:
    """Evaluate a parsed expression against a set of allowed identifiers."""
    if isinstance(node, LicenseWithExceptionSymbol):
        return (
            node.render() in allowed or node.license_symbol.key in allowed
        )
    if isinstance(node, LicenseSymbol):
        return node.key in allowed
    if isinstance(node, _licensing.AND):
        return all(_is_satisfied(arg, allowed) for arg in node.args)
    if isinstance(node, _licensing.OR):
        return any(_is_satisfied(arg, allowed) for arg in node.args)
    return False


def _disallowed_keys(node: Any, allowed: set[str]) -> list[str]:
    """License identifiers in the expression that are not allowed."""
    keys: list[str] = []

    def collect(current: Any) -> None:
        if isinstance(current, LicenseWithExceptionSymbol):
            # The exception part is never an offending license on its own
            if not _is_satisfied(current, allowed):
                key = current.license_symbol.key
                if key not in keys:
                    keys.append(key)
        elif isinstance(current, LicenseSymbol):
            if current.key not in allowed and current.key not in keys:
                keys.append(current.key)
        elif isinstance(current, (_licensing.AND, _licensing.OR)):
            for arg in current.args:
                collect(arg)

    collect(node)
    return keys


def allowed_licenses_for(
    pkg: GraphPackage,
    config: LicensesConfig,
) -> tuple[set[str], list[LicenseException]]:
    """Compute the licenses allowed for one package.

    Args:
        pkg: The package being checked.
        config: The licenses table.

    Returns:
        Tuple of (allowed identifiers, exceptions that matched the package).
    """
    allowed = set(config.allow)
    matched = [exc for exc in config.exceptions if spec_matches(exc, pkg)]
    for exc in matched:
        allowed.update(exc.allow)
    return allowed, matched


def check_package_license(
    pkg: GraphPackage,
    allowed: set[str],
) -> Optional[LicenseViolation]:
    """Check a single package license against the allowed identifiers.

    Args:
        pkg: The package being checked.
        allowed: Identifiers allowed for this package.

    Returns:
        A LicenseViolation, or None if the license is acceptable.
    """
    if pkg.license is None or not pkg.license.strip():
        # Unknown license is always a violation when policy is configured
        return LicenseViolation(
            package_name=pkg.name,
            package_version=pkg.version,
            detected_license=None,
            reason="Unknown license",
        )

    try:
        parsed = parse_license_expression(pkg.license)
    except ExpressionError as e:
        return LicenseViolation(
            package_name=pkg.name,
            package_version=pkg.version,
            detected_license=pkg.license,
            reason=f"Unparseable license expression '{pkg.license}': {e}",
        )

    if _is_satisfied(parsed, allowed):
        return None

    offending = _disallowed_keys(parsed, allowed)
    if len(offending) == 1:
        reason = f"License '{offending[0]}' not in allowed list"
    else:
        listed = ", ".join(f"'{key}'" for key in offending)
        reason = f"License expression '{pkg.license}' not satisfied ({listed} not allowed)"
    return LicenseViolation(
        package_name=pkg.name,
        package_version=pkg.version,
        detected_license=pkg.license,
        reason=reason,
    )


def check_licenses(
    graph: DependencyGraph,
    config: Optional[LicensesConfig],
) -> LicenseCheckResult:
    """Check every package in the graph against the licenses table.

    Args:
        graph: The resolved dependency graph.
        config: The licenses table, or None when no license policy is set.

    Returns:
        LicenseCheckResult with violations and used exceptions.
        Returns no violations if the licenses table is not configured.
    """
    if config is None:
        return LicenseCheckResult(violations=[], used_exceptions=[])

    violations: list[LicenseViolation] = []
    used: list[LicenseException] = []

    for pkg in graph.packages:
        allowed, matched = allowed_licenses_for(pkg, config)
        for exc in matched:
            if exc not in used:
                used.append(exc)
        violation = check_package_license(pkg, allowed)
        if violation is not None:
            violations.append(violation)

    logger.debug(
        "License check: %d packages, %d violations", len(graph), len(violations)
    )
    return LicenseCheckResult(violations=violations, used_exceptions=used)
