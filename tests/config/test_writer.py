"""Tests for policy serialization."""
from __future__ import annotations

import tomllib

import yaml

from dependency_auditor.config.loader import parse_config
from dependency_auditor.config.writer import dump_config
from dependency_auditor.models.config import PolicyConfig


class TestDumpConfig:
    """Tests for dump_config function."""

    def test_toml_round_trip_preserves_tables(self, sample_policy: str) -> None:
        """Test that load then dump keeps all four tables."""
        original = parse_config(sample_policy)

        reloaded = parse_config(dump_config(original))

        assert reloaded == original
        assert reloaded.to_document() == tomllib.loads(sample_policy)

    def test_toml_round_trip_keeps_list_order(self) -> None:
        """Test that declared list order survives."""
        document = '[licenses]\nallow = ["Zlib", "MIT", "Apache-2.0"]\n'

        dumped = dump_config(parse_config(document))

        assert tomllib.loads(dumped)["licenses"]["allow"] == ["Zlib", "MIT", "Apache-2.0"]

    def test_yaml_round_trip(self, sample_policy: str) -> None:
        """Test that the YAML rendering loads back to the same policy."""
        original = parse_config(sample_policy)

        reloaded = parse_config(dump_config(original, "yaml"), "yaml")

        assert reloaded == original

    def test_only_present_values_written(self) -> None:
        """Test that defaults not present in the source are omitted."""
        config = parse_config('[bans]\nmultiple-versions = "deny"\n')

        dumped = tomllib.loads(dump_config(config))

        assert dumped == {"bans": {"multiple-versions": "deny"}}

    def test_ignore_entries_keep_their_form(self) -> None:
        """Test that bare ids stay strings and tables keep their reason."""
        document = (
            "[advisories]\n"
            'ignore = ["A-1", { id = "A-2", reason = "not reachable" }]\n'
        )

        dumped = yaml.safe_load(dump_config(parse_config(document), "yaml"))

        assert dumped["advisories"]["ignore"] == [
            "A-1",
            {"id": "A-2", "reason": "not reachable"},
        ]

    def test_default_config_dumps_empty(self) -> None:
        """Test that the default policy has nothing to write."""
        assert tomllib.loads(dump_config(PolicyConfig())) == {}
