"""Advisory checking against the ignore list."""
from __future__ import annotations

import logging
from typing import NamedTuple

from dependency_auditor.models.config import AdvisoriesConfig
from dependency_auditor.models.graph import DependencyGraph
from dependency_auditor.models.policy import AdvisoryViolation, SuppressedAdvisory

logger = logging.getLogger(__name__)


class AdvisoryCheckResult(NamedTuple):
    """Result of the advisory check.

    Attributes:
        violations: Findings not covered by the ignore list.
        suppressed: Findings hidden by the ignore list.
        used_ignores: Ignore entries that suppressed at least one finding.
    """

    violations: list[AdvisoryViolation]
    suppressed: list[SuppressedAdvisory]
    used_ignores: set[str]


def check_advisories(
    graph: DependencyGraph,
    config: AdvisoriesConfig,
) -> AdvisoryCheckResult:
    """Check advisory findings on every package.

    A finding is suppressed when its id, or any of its aliases, is in the
    ignore list. Severity plays no part.

    Args:
        graph: The resolved dependency graph.
        config: The advisories table.

    Returns:
        AdvisoryCheckResult with violations, suppressed findings and
        the ignore entries that were used.
    """
    ignored = config.ignored_ids
    violations: list[AdvisoryViolation] = []
    suppressed: list[SuppressedAdvisory] = []
    used: set[str] = set()

    for pkg in graph.packages:
        for finding in pkg.advisories:
            matched = next((i for i in finding.all_ids if i in ignored), None)
            if matched is not None:
                used.add(matched)
                suppressed.append(
                    SuppressedAdvisory(
                        advisory_id=finding.id,
                        matched_ignore=matched,
                        package_name=pkg.name,
                        package_version=pkg.version,
                    )
                )
                continue

            title = f": {finding.title}" if finding.title else ""
            violations.append(
                AdvisoryViolation(
                    package_name=pkg.name,
                    package_version=pkg.version,
                    advisory_id=finding.id,
                    title=finding.title,
                    reason=f"Advisory {finding.id}{title}",
                )
            )

    logger.debug(
        "Advisory check: %d violations, %d suppressed",
        len(violations),
        len(suppressed),
    )
    return AdvisoryCheckResult(
        violations=violations, suppressed=suppressed, used_ignores=used
    )
