"""Policy configuration Pydantic models for dependency-auditor.

The models mirror the tables of a ``deny.toml`` policy document. Keys that
contain dashes in the document (``multiple-versions``, ``skip-tree``) are
exposed under snake_case attribute names via aliases.
"""
from __future__ import annotations

from typing import Any, List, Literal, Optional

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from pydantic import BaseModel, Field, field_serializer, field_validator

from dependency_auditor.constants import SUPPORTED_ADVISORY_VERSIONS, VERSION_OPERATORS

_MODEL_CONFIG: Any = {"extra": "forbid", "frozen": True, "populate_by_name": True}


class PackageSpec(BaseModel):
    """A package name with an optional version requirement."""

    model_config = _MODEL_CONFIG

    name: str = Field(min_length=1, description="Package name")
    version: Optional[str] = Field(
        default=None,
        description="Exact version, or a specifier such as '<2.0'. "
        "None matches every version.",
    )

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("version must not be empty")
        if value.startswith(VERSION_OPERATORS):
            try:
                SpecifierSet(value)
            except InvalidSpecifier as e:
                raise ValueError(f"invalid version specifier '{value}'") from e
        return value

    def display(self) -> str:
        """Return ``name`` or ``name@version`` for messages."""
        if self.version is None:
            return self.name
        return f"{self.name}@{self.version}"


class LicenseException(PackageSpec):
    """Additional licenses allowed for one package (and version)."""

    allow: List[str] = Field(
        default_factory=list,
        description="License identifiers allowed for this package only",
    )


class LicensesConfig(BaseModel):
    """The ``[licenses]`` table."""

    model_config = _MODEL_CONFIG

    allow: List[str] = Field(
        default_factory=list,
        description="License identifiers allowed for every package",
    )
    exceptions: List[LicenseException] = Field(
        default_factory=list,
        description="Per-package additions to the allow list",
    )

    @field_validator("allow")
    @classmethod
    def _unique_identifiers(cls, value: List[str]) -> List[str]:
        seen: set[str] = set()
        for identifier in value:
            if identifier in seen:
                raise ValueError(f"duplicate license identifier '{identifier}'")
            seen.add(identifier)
        return value


class AdvisoryIgnore(BaseModel):
    """An advisory ID that should not fail the audit."""

    model_config = _MODEL_CONFIG

    id: str = Field(min_length=1, description="Advisory identifier")
    reason: Optional[str] = Field(default=None, description="Why it is ignored")


class AdvisoriesConfig(BaseModel):
    """The ``[advisories]`` table."""

    model_config = _MODEL_CONFIG

    version: int = Field(default=2, description="Advisories table schema version")
    ignore: List[AdvisoryIgnore] = Field(
        default_factory=list,
        description="Advisory IDs to suppress, as strings or {id, reason} tables",
    )

    @field_validator("version")
    @classmethod
    def _supported_version(cls, value: int) -> int:
        if value not in SUPPORTED_ADVISORY_VERSIONS:
            supported = ", ".join(str(v) for v in SUPPORTED_ADVISORY_VERSIONS)
            raise ValueError(
                f"unsupported advisories version {value} (supported: {supported})"
            )
        return value

    @field_validator("ignore", mode="before")
    @classmethod
    def _expand_bare_ids(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"id": item} if isinstance(item, str) else item for item in value]
        return value

    @field_serializer("ignore")
    def _collapse_bare_ids(self, value: List[AdvisoryIgnore]) -> list[Any]:
        return [
            entry.id if entry.reason is None else {"id": entry.id, "reason": entry.reason}
            for entry in value
        ]

    @property
    def ignored_ids(self) -> set[str]:
        """Set of ignored advisory IDs."""
        return {entry.id for entry in self.ignore}


class SkipTreeEntry(PackageSpec):
    """Root of a subtree exempt from the duplicate-version check."""

    depth: Optional[int] = Field(
        default=None,
        ge=0,
        description="How many levels below the root are exempt. None is unlimited.",
    )


class BannedPackage(PackageSpec):
    """A package that must not appear in the graph."""

    reason: Optional[str] = Field(default=None, description="Why it is banned")


class BansConfig(BaseModel):
    """The ``[bans]`` table."""

    model_config = _MODEL_CONFIG

    multiple_versions: Literal["deny", "warn", "allow"] = Field(
        default="warn",
        alias="multiple-versions",
        description="How to treat a package present at several versions",
    )
    skip_tree: List[SkipTreeEntry] = Field(
        default_factory=list,
        alias="skip-tree",
        description="Subtrees exempt from the duplicate-version check",
    )
    skip: List[PackageSpec] = Field(
        default_factory=list,
        description="Single packages exempt from the duplicate-version check",
    )
    deny: List[BannedPackage] = Field(
        default_factory=list,
        description="Packages that fail the audit wherever they appear",
    )


class PolicyConfig(BaseModel):
    """A complete dependency policy.

    ``licenses`` is optional: when the table is absent the license check
    is not run. The other tables fall back to their defaults.
    """

    model_config = _MODEL_CONFIG

    licenses: Optional[LicensesConfig] = Field(
        default=None,
        description="License allow-list and exceptions",
    )
    advisories: AdvisoriesConfig = Field(
        default_factory=AdvisoriesConfig,
        description="Advisory ignore list",
    )
    bans: BansConfig = Field(
        default_factory=BansConfig,
        description="Duplicate-version and banned package rules",
    )

    def to_document(self) -> dict[str, Any]:
        """Return the policy as a plain document using the file's key names.

        Only values that were explicitly set are included, so a loaded
        policy serializes back to the tables it was read from.
        """
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
