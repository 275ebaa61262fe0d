"""Tests for the policy evaluator."""
from __future__ import annotations

import pytest

from dependency_auditor.analysis.evaluator import PolicyEvaluator, evaluate_policy
from dependency_auditor.config.loader import parse_config
from dependency_auditor.models.config import PolicyConfig
from dependency_auditor.models.graph import AdvisoryFinding, DependencyGraph, GraphPackage
from dependency_auditor.models.policy import Severity


def _project_graph(
    unicode_version: str = "1.0.3",
    rsa_advisory: str = "RUSTSEC-2023-0071",
) -> DependencyGraph:
    return DependencyGraph(
        packages=[
            GraphPackage(
                name="app",
                version="0.1.0",
                license="MIT",
                dependencies=[
                    f"unicode-ident@{unicode_version}",
                    "rsa@0.9.6",
                    "mio@0.8.0",
                    "tokio@1.35.0",
                ],
            ),
            GraphPackage(
                name="unicode-ident",
                version=unicode_version,
                license="(MIT OR Apache-2.0) AND Unicode-DFS-2016",
            ),
            GraphPackage(
                name="rsa",
                version="0.9.6",
                license="MIT OR Apache-2.0",
                advisories=[AdvisoryFinding(id=rsa_advisory, title="Marvin Attack")],
            ),
            GraphPackage(
                name="mio",
                version="0.8.0",
                license="MIT",
                dependencies=["windows-sys@0.48.0"],
            ),
            GraphPackage(
                name="tokio",
                version="1.35.0",
                license="MIT",
                dependencies=["windows-sys@0.52.0"],
            ),
            GraphPackage(name="windows-sys", version="0.48.0", license="MIT OR Apache-2.0"),
            GraphPackage(name="windows-sys", version="0.52.0", license="MIT OR Apache-2.0"),
        ]
    )


class TestPolicyEvaluator:
    """Tests for PolicyEvaluator class."""

    def test_compliant_project_passes(self, sample_policy: str) -> None:
        """Test that the sample policy accepts the sample project."""
        report = PolicyEvaluator(parse_config(sample_policy)).evaluate(_project_graph())

        assert report.violations == []
        assert not report.has_errors
        assert report.packages_checked == 7
        assert report.checks_run == ["licenses", "advisories", "bans"]
        assert [s.advisory_id for s in report.suppressed_advisories] == [
            "RUSTSEC-2023-0071"
        ]
        assert report.unused_entries == []

    def test_exception_version_mismatch(self, sample_policy: str) -> None:
        """Test that a versioned exception does not cover other versions."""
        report = evaluate_policy(
            _project_graph(unicode_version="1.0.4"), parse_config(sample_policy)
        )

        assert report.has_errors
        assert [v.kind for v in report.errors] == ["license"]
        assert report.errors[0].package_display() == "unicode-ident@1.0.4"
        assert report.errors[0].reason == "License 'Unicode-DFS-2016' not in allowed list"
        assert [(e.kind, e.entry) for e in report.unused_entries] == [
            ("license-exception", "unicode-ident@1.0.3")
        ]

    def test_unignored_advisory_fails(self, sample_policy: str) -> None:
        """Test that a different advisory id is reported and the ignore is unused."""
        report = evaluate_policy(
            _project_graph(rsa_advisory="RUSTSEC-2024-0001"), parse_config(sample_policy)
        )

        assert [v.kind for v in report.errors] == ["advisory"]
        assert report.suppressed_advisories == []
        assert [(e.kind, e.entry) for e in report.unused_entries] == [
            ("advisory-ignore", "RUSTSEC-2023-0071")
        ]

    def test_duplicates_without_skip_tree(self) -> None:
        """Test that deny mode fails on duplicates when nothing is skipped."""
        config = parse_config('[bans]\nmultiple-versions = "deny"\n')
        report = evaluate_policy(_project_graph(), config)

        assert [v.kind for v in report.errors] == ["advisory", "duplicate"]
        assert report.errors[1].package_name == "windows-sys"

    def test_warn_mode_does_not_fail(self) -> None:
        """Test that duplicate warnings leave the audit passing."""
        config = parse_config(
            '[bans]\nmultiple-versions = "warn"\n\n'
            '[advisories]\nignore = ["RUSTSEC-2023-0071"]\n'
        )
        report = evaluate_policy(_project_graph(), config)

        assert not report.has_errors
        assert len(report.warnings) == 1
        assert report.warnings[0].severity == Severity.WARNING

    def test_no_license_table_skips_check(self) -> None:
        """Test that licenses are not checked without a licenses table."""
        graph = DependencyGraph(packages=[GraphPackage(name="mystery", version="1.0")])
        report = evaluate_policy(graph, PolicyConfig())

        assert report.violations == []
        assert report.checks_run == ["advisories", "bans"]

    def test_violation_order(self) -> None:
        """Test that findings are grouped license, advisory, banned, duplicate."""
        config = parse_config(
            '[licenses]\nallow = ["MIT"]\n\n'
            '[bans]\nmultiple-versions = "deny"\ndeny = [{ name = "rsa" }]\n'
        )
        report = evaluate_policy(_project_graph(), config)

        assert [v.kind for v in report.errors] == [
            "license",
            "advisory",
            "banned",
            "duplicate",
        ]

    def test_graph_not_modified(self, sample_policy: str) -> None:
        """Test that evaluation leaves the graph untouched."""
        graph = _project_graph()
        before = graph.model_dump()
        evaluate_policy(graph, parse_config(sample_policy))

        assert graph.model_dump() == before

    def test_config_property(self) -> None:
        """Test that the evaluator exposes its policy."""
        config = PolicyConfig()
        assert PolicyEvaluator(config).config is config

    @pytest.mark.parametrize("license_expr", ["MIT", "Apache-2.0 OR GPL-3.0-only"])
    def test_single_package_passes(self, license_expr: str) -> None:
        """Test simple license expressions against an allow list."""
        config = parse_config('[licenses]\nallow = ["MIT", "Apache-2.0"]\n')
        graph = DependencyGraph(
            packages=[GraphPackage(name="lib", version="1.0", license=license_expr)]
        )

        assert not evaluate_policy(graph, config).has_errors
