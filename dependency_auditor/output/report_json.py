"""JSON output formatter for audit reports."""
import json
from datetime import datetime, timezone
from typing import Any

from dependency_auditor import __version__
from dependency_auditor.models.report import AuditReport


class ReportJsonFormatter:
    """Format audit reports as JSON output.

    Provides a structured representation of the audit for programmatic
    processing and CI/CD integration.
    """

    def format_report(self, report: AuditReport) -> str:
        """Format an audit report as a JSON string.

        Args:
            report: The audit report to format.

        Returns:
            JSON string representation of the report.
        """
        output = self._build_output(report)
        return json.dumps(output, indent=2)

    def _build_output(self, report: AuditReport) -> dict[str, Any]:
        """Build the output dictionary structure.

        Args:
            report: The audit report to convert.

        Returns:
            Dictionary ready for JSON serialization.
        """
        return {
            "audit_metadata": self._build_metadata(report),
            "summary": self._build_summary(report),
            "errors": [self._build_violation(v) for v in report.errors],
            "warnings": [self._build_violation(v) for v in report.warnings],
            "suppressed_advisories": [
                s.model_dump(mode="json") for s in report.suppressed_advisories
            ],
            "unused_policy_entries": [
                u.model_dump(mode="json") for u in report.unused_entries
            ],
        }

    def _build_metadata(self, report: AuditReport) -> dict[str, Any]:
        """Build audit metadata section."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        return {
            "generated_at": timestamp,
            "tool_version": __version__,
            "checks_run": report.checks_run,
        }

    def _build_summary(self, report: AuditReport) -> dict[str, Any]:
        """Build summary section.

        Args:
            report: The audit report.

        Returns:
            Dictionary with summary counts and overall status.
        """
        return {
            "packages_checked": report.packages_checked,
            "error_count": len(report.errors),
            "warning_count": len(report.warnings),
            "errors_by_kind": report.count_by_kind(),
            "suppressed_advisory_count": len(report.suppressed_advisories),
            "overall_status": "FAIL" if report.has_errors else "PASS",
        }

    def _build_violation(self, violation: Any) -> dict[str, Any]:
        """Serialize one finding, keeping only the fields that are set."""
        data: dict[str, Any] = violation.model_dump(mode="json", exclude_none=True)
        return data
