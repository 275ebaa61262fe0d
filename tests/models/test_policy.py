"""Tests for policy violation models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dependency_auditor.models.policy import (
    AdvisoryViolation,
    DuplicateVersionViolation,
    LicenseViolation,
    Severity,
    UnusedPolicyEntry,
)


class TestPolicyViolation:
    """Tests for the violation models."""

    def test_license_violation_defaults(self) -> None:
        """Test that violations are errors by default."""
        violation = LicenseViolation(
            package_name="x",
            package_version="1.0.0",
            detected_license="GPL-3.0-only",
            reason="License 'GPL-3.0-only' not in allowed list",
        )
        assert violation.kind == "license"
        assert violation.severity == Severity.ERROR
        assert violation.is_error
        assert violation.package_display() == "x@1.0.0"

    def test_duplicate_without_version(self) -> None:
        """Test that duplicate findings display just the name."""
        violation = DuplicateVersionViolation(
            severity=Severity.WARNING,
            package_name="mio",
            versions=["0.7.0", "0.8.0"],
            reason="Found 2 versions of 'mio': 0.7.0, 0.8.0",
        )
        assert violation.package_display() == "mio"
        assert not violation.is_error

    def test_advisory_requires_id(self) -> None:
        """Test that advisory_id is required."""
        with pytest.raises(ValidationError) as exc_info:
            AdvisoryViolation(  # type: ignore[call-arg]
                package_name="x", package_version="1", reason="r"
            )
        assert any(e["loc"] == ("advisory_id",) for e in exc_info.value.errors())

    def test_extra_fields_forbidden(self) -> None:
        """Test that extra fields are not allowed."""
        with pytest.raises(ValidationError):
            LicenseViolation(
                package_name="x",
                reason="r",
                unknown_field="value",  # type: ignore[call-arg]
            )

    def test_unused_entry_kinds(self) -> None:
        """Test that only known tables are accepted."""
        entry = UnusedPolicyEntry(kind="advisory-ignore", entry="A-1", reason="unused")
        assert entry.kind == "advisory-ignore"
        with pytest.raises(ValidationError):
            UnusedPolicyEntry(kind="bans", entry="x", reason="r")  # type: ignore[arg-type]
