"""Policy evaluation over a resolved dependency graph."""
from __future__ import annotations

import logging

from dependency_auditor.analysis.advisories import check_advisories
from dependency_auditor.analysis.bans import (
    check_banned_packages,
    check_duplicate_versions,
)
from dependency_auditor.analysis.licenses import check_licenses
from dependency_auditor.models.config import PolicyConfig
from dependency_auditor.models.graph import DependencyGraph
from dependency_auditor.models.policy import UnusedPolicyEntry
from dependency_auditor.models.report import AuditReport

logger = logging.getLogger(__name__)


class PolicyEvaluator:
    """Evaluate a policy against dependency graphs.

    Runs the license, advisory and ban checks and collects every finding
    into a single AuditReport. Nothing is raised for a violation and the
    graph is never modified.
    """

    def __init__(self, config: PolicyConfig) -> None:
        """Initialize the evaluator.

        Args:
            config: The policy to enforce.
        """
        self._config = config

    @property
    def config(self) -> PolicyConfig:
        """The policy being enforced."""
        return self._config

    def evaluate(self, graph: DependencyGraph) -> AuditReport:
        """Audit a graph.

        Args:
            graph: The resolved dependency graph.

        Returns:
            AuditReport with all violations, suppressed advisories and
            unused policy entries.
        """
        config = self._config
        checks_run: list[str] = []
        unused: list[UnusedPolicyEntry] = []

        license_result = check_licenses(graph, config.licenses)
        if config.licenses is not None:
            checks_run.append("licenses")
            for exc in config.licenses.exceptions:
                if exc not in license_result.used_exceptions:
                    unused.append(
                        UnusedPolicyEntry(
                            kind="license-exception",
                            entry=exc.display(),
                            reason="No package in the graph matched this exception",
                        )
                    )

        advisory_result = check_advisories(graph, config.advisories)
        checks_run.append("advisories")
        for ignore in config.advisories.ignore:
            if ignore.id not in advisory_result.used_ignores:
                unused.append(
                    UnusedPolicyEntry(
                        kind="advisory-ignore",
                        entry=ignore.id,
                        reason="No advisory in the graph matched this ignore entry",
                    )
                )

        banned = check_banned_packages(graph, config.bans)
        duplicates = check_duplicate_versions(graph, config.bans)
        checks_run.append("bans")

        report = AuditReport(
            packages_checked=len(graph),
            checks_run=checks_run,
            violations=[
                *license_result.violations,
                *advisory_result.violations,
                *banned,
                *duplicates,
            ],
            suppressed_advisories=advisory_result.suppressed,
            unused_entries=unused,
        )
        logger.info(
            "Audited %d packages: %d errors, %d warnings",
            report.packages_checked,
            len(report.errors),
            len(report.warnings),
        )
        return report


def evaluate_policy(graph: DependencyGraph, config: PolicyConfig) -> AuditReport:
    """Audit a graph against a policy.

    Convenience wrapper around PolicyEvaluator.
    """
    return PolicyEvaluator(config).evaluate(graph)
