"""Dependency graph sources and license resolvers."""

from dependency_auditor.resolvers.base import BaseResolver
from dependency_auditor.resolvers.cargo import graph_from_cargo_metadata, load_cargo_metadata
from dependency_auditor.resolvers.environment import (
    EnvironmentGraphBuilder,
    build_environment_graph,
)
from dependency_auditor.resolvers.graph_file import graph_from_document, load_graph_file
from dependency_auditor.resolvers.pypi import PyPIResolver, resolve_missing_licenses

__all__ = [
    "BaseResolver",
    "EnvironmentGraphBuilder",
    "PyPIResolver",
    "build_environment_graph",
    "graph_from_cargo_metadata",
    "graph_from_document",
    "load_cargo_metadata",
    "load_graph_file",
    "resolve_missing_licenses",
]
