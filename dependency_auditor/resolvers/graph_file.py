"""Loader for the native JSON dependency graph format.

Example document::

    {
      "roots": ["app@0.1.0"],
      "packages": [
        {"name": "app", "version": "0.1.0", "license": "MIT",
         "dependencies": ["serde@1.0.190"]},
        {"name": "serde", "version": "1.0.190", "license": "MIT OR Apache-2.0",
         "advisories": [{"id": "RUSTSEC-2023-0001", "title": "..."}]}
      ]
    }
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from dependency_auditor.exceptions import GraphError
from dependency_auditor.models.graph import DependencyGraph

logger = logging.getLogger(__name__)


def read_json_document(path: Path) -> Any:
    """Read and decode a JSON file.

    Raises:
        GraphError: If the file cannot be read or is not valid JSON.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise GraphError(f"Cannot read graph file '{path}': {e}") from e

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise GraphError(
            f"Invalid JSON in '{path}' at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e


def graph_from_document(data: Any, source: str = "graph document") -> DependencyGraph:
    """Validate a decoded graph document.

    Raises:
        GraphError: If the document does not describe a valid graph.
    """
    if not isinstance(data, dict):
        raise GraphError(
            f"Invalid graph in {source}: expected an object at root level, "
            f"got {type(data).__name__}"
        )
    try:
        return DependencyGraph.model_validate(data)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(x) for x in err['loc']) or 'root'}: {err['msg']}"
            for err in e.errors()
        )
        raise GraphError(f"Invalid graph in {source}: {details}") from e


def load_graph_file(path: Path) -> DependencyGraph:
    """Load a dependency graph from a native JSON graph file.

    Args:
        path: Path to the JSON file.

    Returns:
        The validated DependencyGraph.

    Raises:
        GraphError: If the file cannot be read or is not a valid graph.
    """
    graph = graph_from_document(read_json_document(path), source=f"'{path}'")
    logger.debug("Loaded %d packages from %s", len(graph), path)
    return graph
