"""Tests for terminal formatter."""

from io import StringIO

from rich.console import Console

from dependency_auditor.models.policy import (
    AdvisoryViolation,
    LicenseViolation,
    SuppressedAdvisory,
    UnusedPolicyEntry,
)
from dependency_auditor.models.report import AuditReport, Verbosity
from dependency_auditor.output.terminal import TerminalFormatter


def _render(report: AuditReport, verbosity: Verbosity = Verbosity.NORMAL) -> str:
    string_io = StringIO()
    console = Console(file=string_io, force_terminal=False, width=120)
    TerminalFormatter(console=console, verbosity=verbosity).format_report(report)
    return string_io.getvalue()


class TestTerminalFormatter:
    """Tests for TerminalFormatter."""

    def test_failing_summary(self, failing_report: AuditReport) -> None:
        """Test that the summary panel shows the failing status."""
        output = _render(failing_report)

        assert "AUDIT SUMMARY" in output
        assert "Status: FAIL" in output
        assert "2 violation(s) require attention" in output
        assert "Checks Run: licenses, advisories, bans" in output

    def test_tables_per_kind(self, failing_report: AuditReport) -> None:
        """Test that errors are grouped by check and warnings listed apart."""
        output = _render(failing_report)

        assert "License Violations (1)" in output
        assert "Advisory Violations (1)" in output
        assert "Warnings (1)" in output
        assert "unicode-ident@1.0.4" in output
        assert "Found 2 versions of 'syn'" in output

    def test_unused_entries_shown(self, failing_report: AuditReport) -> None:
        """Test that unused policy entries are listed."""
        output = _render(failing_report)

        assert "Unused Policy Entries (1)" in output
        assert "license-exception unicode-ident@1.0.3" in output

    def test_suppressed_only_when_verbose(self, failing_report: AuditReport) -> None:
        """Test that suppressed advisories need verbose mode."""
        output = _render(failing_report)
        assert "Suppressed: 1" in output
        assert "Suppressed Advisories" not in output

        verbose = _render(failing_report, Verbosity.VERBOSE)
        assert "RUSTSEC-2023-0071 on rsa@0.9.6" in verbose

    def test_quiet_failing(self, failing_report: AuditReport) -> None:
        """Test quiet output lists errors only."""
        output = _render(failing_report, Verbosity.QUIET)

        assert output.startswith("FAIL - 2 violation(s) in 12 packages")
        assert "time@0.1.45" in output
        assert "syn" not in output
        assert "AUDIT SUMMARY" not in output

    def test_quiet_passing(self, passing_report: AuditReport) -> None:
        """Test quiet output for a passing audit."""
        assert _render(passing_report, Verbosity.QUIET).strip() == (
            "PASS - 3 packages checked"
        )

    def test_passing_summary(self, passing_report: AuditReport) -> None:
        """Test that a clean audit reports success."""
        output = _render(passing_report)

        assert "Status: PASS" in output
        assert "All checks passed" in output
        assert "Warnings (" not in output

    def test_no_packages(self) -> None:
        """Test output for an empty graph."""
        assert "No packages found" in _render(AuditReport())


class TestTerminalFormatterMarkupText:
    """Tests that text taken from graphs and policies is printed literally."""

    def _report(self) -> AuditReport:
        return AuditReport(
            packages_checked=2,
            checks_run=["licenses", "advisories", "bans"],
            violations=[
                LicenseViolation(
                    package_name="parser",
                    package_version="0.3.0",
                    detected_license="[bold]GPL-3.0-only",
                    reason="License '[bold]GPL-3.0-only' not in allowed list",
                ),
                AdvisoryViolation(
                    package_name="parser",
                    package_version="0.3.0",
                    advisory_id="RUSTSEC-2024-0001",
                    title="overflow in [/bold] parser",
                    reason="Advisory RUSTSEC-2024-0001: overflow in [/bold] parser",
                ),
            ],
            suppressed_advisories=[
                SuppressedAdvisory(
                    advisory_id="[red]RUSTSEC-2023-0071",
                    matched_ignore="[red]RUSTSEC-2023-0071",
                    package_name="rsa",
                    package_version="0.9.6",
                )
            ],
            unused_entries=[
                UnusedPolicyEntry(
                    kind="advisory-ignore",
                    entry="[/]RUSTSEC-1999-0001",
                    reason="No advisory in the graph matched this ignore entry",
                )
            ],
        )

    def test_normal_output(self) -> None:
        """Test that bracketed titles and licenses render as plain text."""
        output = _render(self._report())

        assert "overflow in [/bold] parser" in output
        assert "License '[bold]GPL-3.0-only' not in allowed list" in output
        assert "[/]RUSTSEC-1999-0001" in output

    def test_verbose_output(self) -> None:
        """Test that suppressed advisory ids render as plain text."""
        output = _render(self._report(), Verbosity.VERBOSE)

        assert "[red]RUSTSEC-2023-0071 on rsa@0.9.6" in output

    def test_quiet_output(self) -> None:
        """Test that quiet mode prints bracketed reasons as plain text."""
        output = _render(self._report(), Verbosity.QUIET)

        assert "parser@0.3.0: Advisory RUSTSEC-2024-0001: overflow in [/bold] parser" in output
