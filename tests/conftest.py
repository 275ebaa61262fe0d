"""Shared fixtures for dependency-auditor tests."""

import pytest
from click.testing import CliRunner

from dependency_auditor.models.policy import (
    AdvisoryViolation,
    DuplicateVersionViolation,
    LicenseViolation,
    Severity,
    SuppressedAdvisory,
    UnusedPolicyEntry,
)
from dependency_auditor.models.report import AuditReport

SAMPLE_POLICY = """\
[licenses]
allow = [
    "MIT",
    "Apache-2.0",
    "BSD-2-Clause",
    "BSD-3-Clause",
    "CC0-1.0",
    "ISC",
    "MPL-2.0",
]

[advisories]
version = 2
# No fix available upstream
ignore = ["RUSTSEC-2023-0071"]

[[licenses.exceptions]]
allow = ["Unicode-DFS-2016"]
name = "unicode-ident"
version = "1.0.3"

[bans]
multiple-versions = "deny"
skip-tree = [{ name = "windows-sys" }, { name = "bitflags" }, { name = "mio" }]
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_policy() -> str:
    """A complete deny.toml policy document."""
    return SAMPLE_POLICY


@pytest.fixture
def failing_report() -> AuditReport:
    """An audit with one error of two kinds and a warning."""
    return AuditReport(
        packages_checked=12,
        checks_run=["licenses", "advisories", "bans"],
        violations=[
            LicenseViolation(
                package_name="unicode-ident",
                package_version="1.0.4",
                detected_license="Unicode-DFS-2016",
                reason="License 'Unicode-DFS-2016' not in allowed list",
            ),
            AdvisoryViolation(
                package_name="time",
                package_version="0.1.45",
                advisory_id="RUSTSEC-2020-0071",
                reason="Advisory RUSTSEC-2020-0071",
            ),
            DuplicateVersionViolation(
                severity=Severity.WARNING,
                package_name="syn",
                versions=["1.0.109", "2.0.39"],
                reason="Found 2 versions of 'syn': 1.0.109, 2.0.39",
            ),
        ],
        suppressed_advisories=[
            SuppressedAdvisory(
                advisory_id="RUSTSEC-2023-0071",
                matched_ignore="RUSTSEC-2023-0071",
                package_name="rsa",
                package_version="0.9.6",
            )
        ],
        unused_entries=[
            UnusedPolicyEntry(
                kind="license-exception",
                entry="unicode-ident@1.0.3",
                reason="No package in the graph matched this exception",
            )
        ],
    )


@pytest.fixture
def passing_report() -> AuditReport:
    """An audit without findings."""
    return AuditReport(packages_checked=3, checks_run=["advisories", "bans"])
