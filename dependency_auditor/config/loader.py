"""Policy file discovery and loading for dependency-auditor."""
from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import ValidationError

from dependency_auditor.config.defaults import (
    DEFAULT_CONFIG_NAMES,
    YAML_SUFFIXES,
    get_default_config,
)
from dependency_auditor.exceptions import ConfigurationError
from dependency_auditor.models.config import PolicyConfig

logger = logging.getLogger(__name__)

_TOML_LINE_RE = re.compile(r"at line (\d+)")


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find a policy file in the specified directory.

    Searches for the names in DEFAULT_CONFIG_NAMES, in order.

    Args:
        start_dir: Directory to search. Defaults to current working directory.

    Returns:
        Path to the policy file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        config_path = search_dir / name
        if config_path.exists():
            logger.debug("Discovered policy file %s", config_path)
            return config_path
    return None


def config_format_for(path: Path) -> Literal["toml", "yaml"]:
    """Pick the document format from the file suffix (TOML unless YAML)."""
    return "yaml" if path.suffix.lower() in YAML_SUFFIXES else "toml"


def parse_config(
    content: str,
    fmt: Literal["toml", "yaml"] = "toml",
    source: Optional[Path] = None,
) -> PolicyConfig:
    """Parse and validate a policy document.

    Args:
        content: The document text.
        fmt: Document format.
        source: Where the text came from, used in error messages.

    Returns:
        Validated PolicyConfig instance.

    Raises:
        ConfigurationError: If the document is malformed or fails validation.
    """
    where = f"'{source}'" if source is not None else "policy document"

    if not content.strip():
        return get_default_config()

    data: Any
    if fmt == "yaml":
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            line = mark.line + 1 if mark is not None else None
            raise ConfigurationError(
                f"Invalid YAML syntax in {where}: {e}", path=source, line=line
            ) from e
    else:
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            match = _TOML_LINE_RE.search(str(e))
            line = int(match.group(1)) if match else None
            raise ConfigurationError(
                f"Invalid TOML syntax in {where}: {e}", path=source, line=line
            ) from e

    # YAML that parses to None (empty or just comments)
    if data is None:
        return get_default_config()

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in {where}: "
            f"expected a mapping at root level, got {type(data).__name__}",
            path=source,
        )

    try:
        config = PolicyConfig.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        raise ConfigurationError(
            f"Invalid configuration in {where}: {_format_validation_errors(e)}",
            path=source,
            field=_format_location(first["loc"]),
        ) from e

    logger.debug("Loaded policy from %s", where)
    return config


def load_config_file(path: Path) -> PolicyConfig:
    """Load and validate a policy from a TOML or YAML file.

    Args:
        path: Path to the policy file.

    Returns:
        Validated PolicyConfig instance.

    Raises:
        ConfigurationError: If file cannot be read, has invalid syntax,
            or fails Pydantic validation.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Cannot read configuration file '{path}': {e}", path=path
        ) from e

    return parse_config(content, config_format_for(path), source=path)


def _format_location(loc: tuple[int | str, ...]) -> str:
    """Render a Pydantic error location as a dotted field path."""
    return ".".join(str(x) for x in loc) if loc else "root"


def _format_validation_errors(error: ValidationError) -> str:
    """Format Pydantic validation errors into a readable string.

    Args:
        error: The Pydantic ValidationError.

    Returns:
        Formatted error message string.
    """
    messages: list[str] = []
    for err in error.errors():
        messages.append(f"{_format_location(err['loc'])}: {err['msg']}")
    return "; ".join(messages)


def load_config(config_path: str | None = None) -> PolicyConfig:
    """Load the policy from file or use defaults.

    If a config_path is provided, loads from that file.
    Otherwise, searches for a policy file in the current directory.
    If no file is found, returns the default policy.

    Args:
        config_path: Optional path to the policy file.

    Returns:
        PolicyConfig with loaded or default values.

    Raises:
        ConfigurationError: If the specified or discovered file is invalid.
    """
    if config_path is not None:
        return load_config_file(Path(config_path))

    discovered = find_config_file()
    if discovered is not None:
        return load_config_file(discovered)

    logger.debug("No policy file found, using defaults")
    return get_default_config()
