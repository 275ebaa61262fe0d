"""Build a dependency graph from ``cargo metadata --format-version 1`` output."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dependency_auditor.exceptions import GraphError
from dependency_auditor.models.graph import DependencyGraph, package_id
from dependency_auditor.resolvers.graph_file import graph_from_document, read_json_document

logger = logging.getLogger(__name__)


def _node_dependencies(node: dict[str, Any], source: str) -> list[str]:
    """Cargo ids a resolve node depends on.

    Newer cargo emits ``deps`` with a ``pkg`` id per dependency, older
    versions only the flat ``dependencies`` list.

    Raises:
        GraphError: If the dependency list is malformed.
    """
    deps = node.get("deps")
    if deps is not None:
        if not isinstance(deps, list):
            raise GraphError(f"Invalid cargo metadata in {source}: 'deps' must be a list")
        pkgs = [dep.get("pkg") if isinstance(dep, dict) else dep for dep in deps]
    else:
        pkgs = node.get("dependencies") or []
        if not isinstance(pkgs, list):
            raise GraphError(
                f"Invalid cargo metadata in {source}: 'dependencies' must be a list"
            )

    if not all(isinstance(pkg, str) for pkg in pkgs):
        raise GraphError(
            f"Invalid cargo metadata in {source}: dependency ids must be strings"
        )
    return pkgs


def graph_from_cargo_metadata(data: Any, source: str = "cargo metadata") -> DependencyGraph:
    """Convert decoded cargo metadata into a DependencyGraph.

    Args:
        data: The decoded JSON document.
        source: Description of where the document came from.

    Returns:
        The DependencyGraph. Advisory findings are not part of cargo
        metadata, so every package has an empty advisory list.

    Raises:
        GraphError: If the document lacks the packages or resolve sections,
            or an entry in them is malformed.
    """
    if not isinstance(data, dict) or not isinstance(data.get("packages"), list):
        raise GraphError(f"Invalid cargo metadata in {source}: missing 'packages'")

    resolve = data.get("resolve")
    if not isinstance(resolve, dict):
        raise GraphError(
            f"Invalid cargo metadata in {source}: missing 'resolve' "
            "(was it generated with --no-deps?)"
        )

    ids: dict[str, str] = {}
    by_id: dict[str, dict[str, Any]] = {}
    for pkg in data["packages"]:
        try:
            cargo_id, name, version = pkg["id"], pkg["name"], pkg["version"]
        except (KeyError, TypeError) as e:
            raise GraphError(
                f"Invalid cargo metadata in {source}: package entry missing {e}"
            ) from e
        if not all(isinstance(v, str) for v in (cargo_id, name, version)):
            raise GraphError(
                f"Invalid cargo metadata in {source}: package id, name and version "
                "must be strings"
            )
        graph_id = package_id(name, version)
        ids[cargo_id] = graph_id
        if graph_id in by_id:
            # Same crate version from two sources counts once
            logger.debug("Skipping second source for %s", graph_id)
            continue
        by_id[graph_id] = {
            "name": name,
            "version": version,
            "license": pkg.get("license"),
            "dependencies": [],
        }

    nodes = resolve.get("nodes") or []
    if not isinstance(nodes, list):
        raise GraphError(f"Invalid cargo metadata in {source}: 'resolve.nodes' must be a list")

    for node in nodes:
        if not isinstance(node, dict) or not isinstance(node.get("id"), str):
            raise GraphError(
                f"Invalid cargo metadata in {source}: resolve node must be an "
                f"object with a string 'id', got {node!r}"
            )
        owner = ids.get(node["id"])
        if owner is None:
            continue
        deps = by_id[owner]["dependencies"]
        for dep in _node_dependencies(node, source):
            dep_id = ids.get(dep)
            if dep_id is not None and dep_id not in deps:
                deps.append(dep_id)

    root = resolve.get("root")
    if root is not None:
        roots = [ids[root]] if isinstance(root, str) and root in ids else None
    else:
        members = data.get("workspace_members") or []
        if not isinstance(members, list):
            raise GraphError(
                f"Invalid cargo metadata in {source}: 'workspace_members' must be a list"
            )
        roots = [ids[m] for m in members if isinstance(m, str) and m in ids] or None

    return graph_from_document(
        {"packages": list(by_id.values()), "roots": roots}, source=source
    )


def load_cargo_metadata(path: Path) -> DependencyGraph:
    """Load a dependency graph from a saved ``cargo metadata`` JSON file.

    Raises:
        GraphError: If the file cannot be read or is not valid cargo metadata.
    """
    graph = graph_from_cargo_metadata(read_json_document(path), source=f"'{path}'")
    logger.debug("Loaded %d crates from %s", len(graph), path)
    return graph
