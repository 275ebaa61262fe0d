"""Default configuration values for dependency-auditor."""

from __future__ import annotations

from dependency_auditor.models.config import PolicyConfig

# Configuration file names to search for, in order of precedence
DEFAULT_CONFIG_NAMES = [
    "deny.toml",
    ".deny.toml",
    ".dependency-auditor.yaml",
    ".dependency-auditor.yml",
]

YAML_SUFFIXES = (".yaml", ".yml")


def get_default_config() -> PolicyConfig:
    """Get the default policy.

    Returns:
        PolicyConfig with no license check, no ignored advisories and
        duplicate versions reported as warnings.
    """
    return PolicyConfig()
