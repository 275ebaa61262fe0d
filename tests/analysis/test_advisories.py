"""Tests for advisory checking."""
from __future__ import annotations

from dependency_auditor.analysis.advisories import check_advisories
from dependency_auditor.models.config import AdvisoriesConfig
from dependency_auditor.models.graph import AdvisoryFinding, DependencyGraph, GraphPackage


def _graph() -> DependencyGraph:
    return DependencyGraph(
        packages=[
            GraphPackage(
                name="rsa",
                version="0.9.6",
                advisories=[
                    AdvisoryFinding(
                        id="RUSTSEC-2023-0071",
                        title="Marvin Attack",
                        aliases=["CVE-2023-49092"],
                    )
                ],
            ),
            GraphPackage(
                name="time",
                version="0.1.45",
                advisories=[AdvisoryFinding(id="RUSTSEC-2020-0071")],
            ),
            GraphPackage(name="serde", version="1.0.190"),
        ]
    )


def _config(*ignore: str) -> AdvisoriesConfig:
    return AdvisoriesConfig.model_validate({"ignore": list(ignore)})


class TestCheckAdvisories:
    """Tests for check_advisories function."""

    def test_every_finding_fails_without_ignores(self) -> None:
        """Test that findings are violations when nothing is ignored."""
        result = check_advisories(_graph(), _config())

        assert [v.advisory_id for v in result.violations] == [
            "RUSTSEC-2023-0071",
            "RUSTSEC-2020-0071",
        ]
        assert result.suppressed == []
        assert result.used_ignores == set()

    def test_ignored_id_suppressed(self) -> None:
        """Test that an ignored id hides exactly that finding."""
        result = check_advisories(_graph(), _config("RUSTSEC-2023-0071"))

        assert [v.advisory_id for v in result.violations] == ["RUSTSEC-2020-0071"]
        assert result.suppressed[0].advisory_id == "RUSTSEC-2023-0071"
        assert result.suppressed[0].package_name == "rsa"
        assert result.used_ignores == {"RUSTSEC-2023-0071"}

    def test_alias_suppresses(self) -> None:
        """Test that ignoring an alias suppresses the finding."""
        result = check_advisories(_graph(), _config("CVE-2023-49092"))

        assert [v.advisory_id for v in result.violations] == ["RUSTSEC-2020-0071"]
        assert result.suppressed[0].matched_ignore == "CVE-2023-49092"

    def test_violation_details(self) -> None:
        """Test that violations carry the package and title."""
        violation = check_advisories(_graph(), _config()).violations[0]

        assert violation.package_name == "rsa"
        assert violation.package_version == "0.9.6"
        assert violation.title == "Marvin Attack"
        assert violation.reason == "Advisory RUSTSEC-2023-0071: Marvin Attack"

    def test_unrelated_ignore_unused(self) -> None:
        """Test that ignores matching nothing are not reported as used."""
        result = check_advisories(_graph(), _config("RUSTSEC-1999-0001"))

        assert len(result.violations) == 2
        assert result.used_ignores == set()
