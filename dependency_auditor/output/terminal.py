"""Terminal output formatter using Rich."""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from dependency_auditor.constants import VIOLATION_KIND_LABELS
from dependency_auditor.models.report import AuditReport, Verbosity


class TerminalFormatter:
    """Format audit reports for terminal display using Rich.

    Errors are grouped into one table per check. Warnings, suppressed
    advisories and unused policy entries follow, depending on verbosity.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        verbosity: Verbosity = Verbosity.NORMAL,
    ) -> None:
        """Initialize the formatter with a Rich console.

        Args:
            console: Optional Rich Console instance. If not provided,
                a new Console will be created.
            verbosity: Output verbosity level.
        """
        self._console = console if console is not None else Console()
        self._verbosity = verbosity

    def format_report(self, report: AuditReport) -> None:
        """Format and display an audit report.

        Args:
            report: The audit report to display.
        """
        if self._verbosity == Verbosity.QUIET:
            self._print_quiet_output(report)
            return

        if report.packages_checked == 0:
            self._console.print("[yellow]No packages found[/yellow]")
            return

        self._print_summary(report)

        for kind, title in VIOLATION_KIND_LABELS.items():
            errors = [v for v in report.errors if v.kind == kind]
            if errors:
                self._print_violation_table(title, errors, style="red")

        if report.warnings:
            self._print_violation_table("Warnings", report.warnings, style="yellow")

        if self._verbosity == Verbosity.VERBOSE:
            self._print_suppressed(report)
        if report.unused_entries:
            self._print_unused(report)

    def _print_quiet_output(self, report: AuditReport) -> None:
        """Print minimal output for quiet mode: status line and errors only."""
        if report.has_errors:
            self._console.print(
                f"[red]FAIL[/red] - {len(report.errors)} violation(s) "
                f"in {report.packages_checked} packages"
            )
            for violation in report.errors:
                self._console.print(
                    f"  - {escape(violation.package_display())}: "
                    f"[red]{escape(violation.reason)}[/red]"
                )
        else:
            self._console.print(
                f"[green]PASS[/green] - {report.packages_checked} packages checked"
            )

    def _print_summary(self, report: AuditReport) -> None:
        """Print summary panel.

        Args:
            report: The audit report to summarize.
        """
        if report.has_errors:
            status = "FAIL"
            status_color = "red"
            message = f"{len(report.errors)} violation(s) require attention"
        else:
            status = "PASS"
            status_color = "green"
            message = "All checks passed"

        counts = report.count_by_kind()
        summary_lines = [
            f"Packages Checked: {report.packages_checked}",
            f"Checks Run: {', '.join(report.checks_run)}",
        ]
        summary_lines.extend(
            f"{title}: {counts[kind]}" for kind, title in VIOLATION_KIND_LABELS.items()
        )
        summary_lines.append(f"Warnings: {len(report.warnings)}")
        if report.suppressed_advisories:
            summary_lines.append(
                f"Suppressed: {len(report.suppressed_advisories)}"
            )
        summary_lines.extend([
            "",
            f"Status: [{status_color}]{status}[/{status_color}]",
            f"[{status_color}]{message}[/{status_color}]",
        ])

        panel = Panel(
            "\n".join(summary_lines),
            title="[bold]AUDIT SUMMARY[/bold]",
            border_style=status_color,
        )
        self._console.print(panel)
        self._console.print("")

    def _print_violation_table(self, title: str, violations: list, style: str) -> None:
        table = Table(title=f"{title} ({len(violations)})", title_style=f"bold {style}")
        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("Reason", style=style)
        for violation in sorted(violations, key=lambda v: v.package_name.lower()):
            table.add_row(escape(violation.package_display()), escape(violation.reason))
        self._console.print(table)

    def _print_suppressed(self, report: AuditReport) -> None:
        """Print advisories hidden by the ignore list (verbose only)."""
        if not report.suppressed_advisories:
            return
        self._console.print("")
        self._console.print("[bold blue]Suppressed Advisories[/bold blue]")
        for item in report.suppressed_advisories:
            self._console.print(
                f"  [blue]-[/blue] {escape(item.advisory_id)} on "
                f"{escape(item.package_name)}@{escape(item.package_version)} "
                f"(ignored as {escape(item.matched_ignore)})"
            )

    def _print_unused(self, report: AuditReport) -> None:
        self._console.print("")
        self._console.print(
            f"[bold yellow]Unused Policy Entries ({len(report.unused_entries)})[/bold yellow]"
        )
        for entry in report.unused_entries:
            self._console.print(
                f"  [yellow]?[/yellow] {entry.kind} {escape(entry.entry)}: "
                f"{escape(entry.reason)}"
            )
