"""Serialize a loaded policy back to a TOML or YAML document."""
from __future__ import annotations

from typing import Literal

import tomli_w
import yaml

from dependency_auditor.models.config import PolicyConfig


def dump_config(config: PolicyConfig, fmt: Literal["toml", "yaml"] = "toml") -> str:
    """Render a policy as document text.

    Only the values present in the source document are written, and list
    order is kept, so loading the output yields an equal policy.

    Args:
        config: The policy to render.
        fmt: Output document format.

    Returns:
        The document text.
    """
    document = config.to_document()
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False)
    return tomli_w.dumps(document)
