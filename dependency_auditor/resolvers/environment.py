"""Dependency graph of the installed Python environment.

Packages come from ``importlib.metadata``, edges from each distribution's
``Requires-Dist`` entries and licenses from its local metadata.
"""
from __future__ import annotations

import logging
from importlib.metadata import Distribution, distributions
from typing import Iterable, Optional

from packaging.requirements import InvalidRequirement, Requirement
from packaging.utils import canonicalize_name

from dependency_auditor.exceptions import GraphError
from dependency_auditor.models.graph import DependencyGraph, GraphPackage, package_id
from dependency_auditor.resolvers.pypi import (
    license_from_classifiers,
    normalize_license_field,
)

logger = logging.getLogger(__name__)


def license_from_distribution(dist: Distribution) -> Optional[str]:
    """Read the license of an installed distribution.

    Resolution order:
    1. ``License-Expression`` (PEP 639)
    2. ``License`` free text, when it is a short identifier
    3. Trove classifiers

    Returns:
        License expression string, or None if the metadata has none.
    """
    metadata = dist.metadata
    expression = normalize_license_field(metadata.get("License-Expression"))
    if expression is not None:
        return expression

    license_str = normalize_license_field(metadata.get("License"))
    if license_str is not None:
        return license_str

    return license_from_classifiers(metadata.get_all("Classifier") or [])


class EnvironmentGraphBuilder:
    """Builds a DependencyGraph from installed distributions."""

    def __init__(self, dists: Optional[Iterable[Distribution]] = None) -> None:
        """Initialize builder with a package index.

        Args:
            dists: Distributions to index. Defaults to everything installed.
        """
        # Build index of installed packages for fast lookup
        self._installed: dict[str, Distribution] = {}
        for dist in dists if dists is not None else distributions():
            name = dist.metadata.get("Name")
            if not name or not dist.metadata.get("Version"):
                continue
            # First entry on sys.path wins, as with imports
            self._installed.setdefault(canonicalize_name(name), dist)

    def _requirement_ids(self, dist: Distribution) -> list[str]:
        """Graph ids of the installed packages a distribution requires."""
        ids: list[str] = []
        for req_str in dist.requires or []:
            try:
                req = Requirement(req_str)
            except InvalidRequirement:
                logger.debug("Skipping malformed requirement %r", req_str)
                continue

            # Extras-only dependencies apply only when the extra is requested
            if req.marker is not None:
                if self._is_extras_only_marker(req.marker):
                    continue
                if not req.marker.evaluate():
                    continue

            dep = self._installed.get(canonicalize_name(req.name))
            if dep is None:
                continue
            dep_id = package_id(dep.metadata["Name"], dep.metadata["Version"])
            if dep_id not in ids:
                ids.append(dep_id)
        return ids

    @staticmethod
    def _is_extras_only_marker(marker: object) -> bool:
        """Check if marker references the 'extra' variable, e.g. ``extra == "dev"``."""
        return "extra" in str(marker)

    def build(self, root_packages: Optional[list[str]] = None) -> DependencyGraph:
        """Build the graph.

        Args:
            root_packages: Names of the top-level packages. If given, the
                graph is limited to what they depend on. Otherwise every
                installed distribution is included.

        Returns:
            DependencyGraph with licenses from local metadata.

        Raises:
            GraphError: If a requested root package is not installed.
        """
        packages = [
            GraphPackage(
                name=dist.metadata["Name"],
                version=dist.metadata["Version"],
                license=license_from_distribution(dist),
                dependencies=self._requirement_ids(dist),
            )
            for _, dist in sorted(self._installed.items())
        ]
        graph = DependencyGraph(packages=packages)

        if not root_packages:
            logger.debug("Indexed %d installed distributions", len(graph))
            return graph

        roots: list[str] = []
        for name in root_packages:
            dist = self._installed.get(canonicalize_name(name))
            if dist is None:
                raise GraphError(f"Package '{name}' is not installed")
            roots.append(package_id(dist.metadata["Name"], dist.metadata["Version"]))

        keep = graph.reachable_from(roots)
        return DependencyGraph(
            packages=[pkg for pkg in graph.packages if pkg.id in keep],
            roots=roots,
        )


def build_environment_graph(root_packages: Optional[list[str]] = None) -> DependencyGraph:
    """Build the dependency graph of the current environment."""
    return EnvironmentGraphBuilder().build(root_packages)
