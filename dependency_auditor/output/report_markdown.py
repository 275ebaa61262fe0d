"""Markdown output formatter for audit reports."""

from datetime import datetime, timezone

from dependency_auditor.constants import VIOLATION_KIND_LABELS
from dependency_auditor.models.policy import PolicyViolation
from dependency_auditor.models.report import AuditReport


def _cell(text: str) -> str:
    """Make text safe for a single Markdown table cell."""
    return text.replace("|", "\\|").replace("\n", " ")


class ReportMarkdownFormatter:
    """Format audit reports as Markdown output.

    Suitable for pull request comments and compliance records.
    """

    def format_report(self, report: AuditReport) -> str:
        """Format an audit report as a Markdown string.

        Args:
            report: The audit report to format.

        Returns:
            Markdown string representation of the report.
        """
        lines: list[str] = []

        lines.append("# Dependency Audit Report")
        lines.append("")

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        lines.append(f"*Generated: {timestamp}*")
        lines.append("")

        if report.packages_checked == 0:
            lines.append("*No packages found.*")
            return "\n".join(lines)

        lines.extend(self._format_summary(report))
        lines.append("")

        for kind, title in VIOLATION_KIND_LABELS.items():
            errors = [v for v in report.errors if v.kind == kind]
            if errors:
                lines.extend(self._format_violations(title, errors))
                lines.append("")

        if report.warnings:
            lines.extend(self._format_violations("Warnings", report.warnings))
            lines.append("")

        if report.suppressed_advisories:
            lines.extend(self._format_suppressed(report))
            lines.append("")

        if report.unused_entries:
            lines.extend(self._format_unused(report))
            lines.append("")

        return "\n".join(lines)

    def _format_summary(self, report: AuditReport) -> list[str]:
        """Format summary section.

        Args:
            report: The audit report.

        Returns:
            List of Markdown lines for the summary table.
        """
        if report.has_errors:
            status = "❌ FAIL"
            message = f"**{len(report.errors)} violation(s) require attention**"
        else:
            status = "✅ PASS"
            message = "All checks passed"

        counts = report.count_by_kind()
        lines = [
            "## Summary",
            "",
            "| Metric | Value |",
            "|--------|-------|",
            f"| Packages Checked | {report.packages_checked} |",
            f"| Checks Run | {', '.join(report.checks_run)} |",
        ]
        for kind, title in VIOLATION_KIND_LABELS.items():
            lines.append(f"| {title} | {counts[kind]} |")
        lines.extend(
            [
                f"| Warnings | {len(report.warnings)} |",
                f"| **Status** | **{status}** |",
                "",
                f"> {message}",
            ]
        )
        return lines

    def _format_violations(self, title: str, violations: list[PolicyViolation]) -> list[str]:
        """Format a table of findings.

        Args:
            title: Section heading.
            violations: Findings to list.

        Returns:
            List of Markdown lines for the section.
        """
        lines = [
            f"## {title}",
            "",
            "| Package | Reason |",
            "|---------|--------|",
        ]
        for violation in sorted(violations, key=lambda v: v.package_name.lower()):
            lines.append(
                f"| {_cell(violation.package_display())} | {_cell(violation.reason)} |"
            )
        return lines

    def _format_suppressed(self, report: AuditReport) -> list[str]:
        """Format the suppressed advisories section."""
        lines = [
            "## Suppressed Advisories",
            "",
            "| Advisory | Package | Ignored As |",
            "|----------|---------|------------|",
        ]
        for item in report.suppressed_advisories:
            lines.append(
                f"| {_cell(item.advisory_id)} "
                f"| {_cell(item.package_name)}@{_cell(item.package_version)} "
                f"| {_cell(item.matched_ignore)} |"
            )
        return lines

    def _format_unused(self, report: AuditReport) -> list[str]:
        lines = [
            "## Unused Policy Entries",
            "",
            "| Table | Entry | Note |",
            "|-------|-------|------|",
        ]
        for entry in report.unused_entries:
            lines.append(
                f"| {entry.kind} | {_cell(entry.entry)} | {_cell(entry.reason)} |"
            )
        return lines
