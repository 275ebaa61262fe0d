"""Output formatters for dependency-auditor."""

from dependency_auditor.output.report_json import ReportJsonFormatter
from dependency_auditor.output.report_markdown import ReportMarkdownFormatter
from dependency_auditor.output.terminal import TerminalFormatter

__all__ = [
    "ReportJsonFormatter",
    "ReportMarkdownFormatter",
    "TerminalFormatter",
]
