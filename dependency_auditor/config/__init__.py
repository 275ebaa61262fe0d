"""Policy configuration handling for dependency-auditor."""
from __future__ import annotations

from dependency_auditor.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from dependency_auditor.config.loader import (
    find_config_file,
    load_config,
    load_config_file,
    parse_config,
)
from dependency_auditor.config.writer import dump_config
from dependency_auditor.models.config import PolicyConfig

__all__ = [
    "DEFAULT_CONFIG_NAMES",
    "PolicyConfig",
    "dump_config",
    "find_config_file",
    "get_default_config",
    "load_config",
    "load_config_file",
    "parse_config",
]
