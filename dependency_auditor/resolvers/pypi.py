"""PyPI license resolver.

Used to fill in licenses for installed distributions whose local
metadata carries none.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from dependency_auditor.exceptions import NetworkError
from dependency_auditor.models.graph import DependencyGraph, GraphPackage
from dependency_auditor.resolvers.base import BaseResolver

logger = logging.getLogger(__name__)

PYPI_BASE_URL = "https://pypi.org/pypi"

# Rate limiting for concurrent HTTP requests
MAX_CONCURRENT_REQUESTS = 10

# Mapping of PyPI classifiers to SPDX identifiers
CLASSIFIER_TO_SPDX: dict[str, str] = {
    "License :: OSI Approved :: MIT License": "MIT",
    "License :: OSI Approved :: MIT No Attribution License (MIT-0)": "MIT-0",
    "License :: OSI Approved :: Apache Software License": "Apache-2.0",
    "License :: OSI Approved :: BSD License": "BSD-3-Clause",
    "License :: OSI Approved :: GNU General Public License v3 (GPLv3)": "GPL-3.0-only",
    "License :: OSI Approved :: GNU General Public License v2 (GPLv2)": "GPL-2.0-only",
    "License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)": (
        "LGPL-3.0-only"
    ),
    "License :: OSI Approved :: GNU Lesser General Public License v2 (LGPLv2)": (
        "LGPL-2.0-only"
    ),
    "License :: OSI Approved :: ISC License (ISCL)": "ISC",
    "License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)": "MPL-2.0",
    "License :: OSI Approved :: Python Software Foundation License": "PSF-2.0",
    "License :: OSI Approved :: The Unlicense (Unlicense)": "Unlicense",
    "License :: OSI Approved :: zlib/libpng License": "Zlib",
    "License :: CC0 1.0 Universal (CC0 1.0) Public Domain Dedication": "CC0-1.0",
}

# Free-text license values longer than this are license bodies, not names
MAX_LICENSE_FIELD_LENGTH = 100


def normalize_license_field(value: Optional[str]) -> Optional[str]:
    """Clean a free-text ``License`` metadata value.

    Returns:
        The stripped value, or None for empty, placeholder or full-text values.
    """
    if not value:
        return None
    cleaned = value.strip()
    if cleaned.upper() in ("UNKNOWN", "NONE", ""):
        return None
    if "\n" in cleaned or len(cleaned) > MAX_LICENSE_FIELD_LENGTH:
        return None
    return cleaned


def license_from_classifiers(classifiers: list[str]) -> Optional[str]:
    """Combine recognized license classifiers into an OR expression."""
    found: list[str] = []
    for classifier in classifiers:
        spdx = CLASSIFIER_TO_SPDX.get(classifier)
        if spdx is not None and spdx not in found:
            found.append(spdx)
    if not found:
        return None
    return " OR ".join(found)


async def fetch_pypi_metadata(
    package_name: str,
    version: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[dict[str, Any]]:
    """Fetch package metadata from PyPI JSON API.

    Args:
        package_name: The package name to fetch metadata for.
        version: Specific release to fetch. Fetches the latest if None.
        client: Optional httpx.AsyncClient to use. If not provided,
            a new client will be created.

    Returns:
        PyPI JSON API response dict, or None if package not found.

    Raises:
        NetworkError: If the network request fails.
    """
    if version is None:
        url = f"{PYPI_BASE_URL}/{package_name}/json"
    else:
        url = f"{PYPI_BASE_URL}/{package_name}/{version}/json"

    async def do_fetch(c: httpx.AsyncClient) -> Optional[dict[str, Any]]:
        try:
            response = await c.get(url, timeout=httpx.Timeout(30.0))
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()  # type: ignore[no-any-return]
        except httpx.HTTPStatusError:
            return None
        except httpx.RequestError as e:
            raise NetworkError(f"Failed to fetch {package_name}: {e}") from e

    if client:
        return await do_fetch(client)

    async with httpx.AsyncClient() as new_client:
        return await do_fetch(new_client)


def extract_license_from_metadata(metadata: Optional[dict[str, Any]]) -> Optional[str]:
    """Extract a license expression from PyPI metadata.

    Prefers the PEP 639 ``license_expression`` field, then the free-text
    ``license`` field, then trove classifiers.

    Args:
        metadata: PyPI JSON API response dict.

    Returns:
        License expression string, or None if not found.
    """
    if not metadata:
        return None

    info: dict[str, Any] = metadata.get("info", {})

    expression = normalize_license_field(info.get("license_expression"))
    if expression is not None:
        return expression

    license_str = normalize_license_field(info.get("license"))
    if license_str is not None:
        return license_str

    return license_from_classifiers(info.get("classifiers") or [])


class PyPIResolver(BaseResolver):
    """Resolver that fetches license info from PyPI JSON API."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        """Initialize the resolver.

        Args:
            client: Optional shared HTTP client.
        """
        self._client = client

    async def resolve(self, package_name: str, version: str) -> Optional[str]:
        """Resolve license from PyPI metadata for one release.

        Args:
            package_name: The package name to resolve.
            version: The package version.

        Returns:
            License expression string, or None if not found.

        Raises:
            NetworkError: If the network request fails.
        """
        metadata = await fetch_pypi_metadata(package_name, version, client=self._client)
        return extract_license_from_metadata(metadata)


async def resolve_missing_licenses(
    graph: DependencyGraph,
    console: Optional[Console] = None,
    show_progress: bool = True,
) -> DependencyGraph:
    """Look up licenses on PyPI for every graph package that has none.

    Args:
        graph: The graph to complete.
        console: Optional Rich Console for progress display.
        show_progress: Whether to show progress indicator (default: True).

    Returns:
        New DependencyGraph with licenses filled in where PyPI knows them.

    Note:
        NetworkErrors are logged, not propagated, so one unreachable
        package leaves only its own license unknown.
    """
    missing = [pkg for pkg in graph.packages if pkg.license is None]
    if not missing:
        return graph

    semaphore = asyncio.Semaphore(MAX_CONCURRENT_REQUESTS)
    found: dict[str, Optional[str]] = {}

    async with httpx.AsyncClient() as client:
        resolver = PyPIResolver(client=client)

        async def resolve_one(pkg: GraphPackage) -> None:
            async with semaphore:
                try:
                    found[pkg.id] = await resolver.resolve(pkg.name, pkg.version)
                except NetworkError as e:
                    logger.warning("License lookup failed for %s: %s", pkg.id, e)
                    found[pkg.id] = None

        tasks = [resolve_one(pkg) for pkg in missing]
        if console is not None and show_progress:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                task_id = progress.add_task(
                    f"Resolving licenses for {len(missing)} packages...",
                    total=len(missing),
                )
                for coro in asyncio.as_completed(tasks):
                    await coro
                    progress.advance(task_id)
        else:
            await asyncio.gather(*tasks)

    packages = [
        pkg.model_copy(update={"license": found[pkg.id]}) if pkg.id in found else pkg
        for pkg in graph.packages
    ]
    return DependencyGraph(packages=packages, roots=graph.roots)
