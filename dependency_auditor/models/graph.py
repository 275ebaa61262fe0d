"""Dependency graph models for dependency-auditor.

A graph is a flat list of packages. Each package lists the ids of the
packages it depends on, so diamonds and cycles are represented directly
instead of being unrolled into a tree.
"""
from __future__ import annotations

from collections import deque
from typing import Iterable, Optional

from pydantic import BaseModel, Field, PrivateAttr, model_validator

from dependency_auditor.constants import PACKAGE_ID_SEPARATOR


def package_id(name: str, version: str) -> str:
    """Build the id used for graph edges, e.g. ``serde@1.0.190``."""
    return f"{name}{PACKAGE_ID_SEPARATOR}{version}"


class AdvisoryFinding(BaseModel):
    """A published advisory that affects a package in the graph."""

    model_config = {"extra": "forbid"}

    id: str = Field(min_length=1, description="Advisory identifier")
    title: Optional[str] = Field(default=None, description="Short description")
    aliases: list[str] = Field(
        default_factory=list,
        description="Other identifiers for the same advisory (e.g. CVE ids)",
    )

    @property
    def all_ids(self) -> list[str]:
        """The primary id followed by its aliases."""
        return [self.id, *self.aliases]


class GraphPackage(BaseModel):
    """A single resolved package (a node in the graph)."""

    model_config = {"extra": "forbid"}

    name: str = Field(min_length=1, description="Package name")
    version: str = Field(min_length=1, description="Resolved version")
    license: Optional[str] = Field(
        default=None,
        description="SPDX license expression (None if unknown)",
    )
    advisories: list[AdvisoryFinding] = Field(
        default_factory=list,
        description="Advisories reported against this exact version",
    )
    dependencies: list[str] = Field(
        default_factory=list,
        description="Ids (name@version) of direct dependencies",
    )

    @property
    def id(self) -> str:
        """Graph id of this package."""
        return package_id(self.name, self.version)


class DependencyGraph(BaseModel):
    """Container for a resolved dependency graph.

    Provides lookups and traversal helpers used by the policy checks.
    ``roots`` may be omitted, in which case every package that no other
    package depends on is treated as a root.
    """

    model_config = {"extra": "forbid"}

    packages: list[GraphPackage] = Field(
        default_factory=list,
        description="All packages in the graph",
    )
    roots: Optional[list[str]] = Field(
        default=None,
        description="Ids of the top-level packages",
    )

    _index: dict[str, GraphPackage] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def _check_references(self) -> DependencyGraph:
        index: dict[str, GraphPackage] = {}
        for pkg in self.packages:
            if pkg.id in index:
                raise ValueError(f"duplicate package '{pkg.id}'")
            index[pkg.id] = pkg

        for pkg in self.packages:
            for dep in pkg.dependencies:
                if dep not in index:
                    raise ValueError(
                        f"package '{pkg.id}' depends on unknown package '{dep}'"
                    )

        for root in self.roots or []:
            if root not in index:
                raise ValueError(f"root '{root}' is not a package in the graph")

        self._index = index
        return self

    def __len__(self) -> int:
        return len(self.packages)

    def get(self, pkg_id: str) -> GraphPackage:
        """Look up a package by id.

        Raises:
            KeyError: If no package has this id.
        """
        return self._index[pkg_id]

    def __contains__(self, pkg_id: object) -> bool:
        return pkg_id in self._index

    def dependencies_of(self, pkg_id: str) -> list[GraphPackage]:
        """Direct dependencies of a package."""
        return [self._index[dep] for dep in self.get(pkg_id).dependencies]

    def root_ids(self) -> list[str]:
        """Ids of the graph roots.

        Uses the declared roots if present. Otherwise returns packages
        without dependents, falling back to every package when the whole
        graph is one cycle.
        """
        if self.roots is not None:
            return list(self.roots)

        depended_on = {dep for pkg in self.packages for dep in pkg.dependencies}
        roots = [pkg.id for pkg in self.packages if pkg.id not in depended_on]
        if not roots:
            return [pkg.id for pkg in self.packages]
        return roots

    def reachable_from(
        self,
        start: Iterable[str],
        max_depth: Optional[int] = None,
        blocked: Optional[set[str]] = None,
    ) -> set[str]:
        """Collect ids reachable from the start ids, including the starts.

        Args:
            start: Ids to begin the walk from (depth 0).
            max_depth: Stop descending below this depth (None for unlimited).
            blocked: Ids that are never entered or expanded.

        Returns:
            Set of reachable package ids.
        """
        blocked = blocked or set()
        seen: set[str] = set()
        queue: deque[tuple[str, int]] = deque()

        for pkg_id in start:
            if pkg_id not in blocked and pkg_id not in seen:
                seen.add(pkg_id)
                queue.append((pkg_id, 0))

        # Breadth-first, so each id is first seen at its minimum depth
        while queue:
            pkg_id, depth = queue.popleft()
            if max_depth is not None and depth >= max_depth:
                continue
            for dep in self._index[pkg_id].dependencies:
                if dep in blocked or dep in seen:
                    continue
                seen.add(dep)
                queue.append((dep, depth + 1))

        return seen

    def versions_by_name(self) -> dict[str, list[GraphPackage]]:
        """Group packages by name, preserving graph order."""
        grouped: dict[str, list[GraphPackage]] = {}
        for pkg in self.packages:
            grouped.setdefault(pkg.name, []).append(pkg)
        return grouped
