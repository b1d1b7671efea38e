"""Core data models for the contract navigator."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from contract_navigator.core.exceptions import InvalidRoleError, UnknownSourceError

JSON_SUFFIX = ".json"


class ContractRole(str, Enum):
    """Which side of an API relationship a contract represents."""

    PROVIDER = "provider"
    CONSUMER = "consumer"


class ContractSource(str, Enum):
    """Where a contract is stored."""

    LOCAL = "local"
    S3 = "s3"


def coerce_role(role: "ContractRole | str") -> ContractRole:
    """Parse a role tag, case-insensitively.

    Raises:
        InvalidRoleError: If the value is not a known role
    """
    if isinstance(role, ContractRole):
        return role
    try:
        return ContractRole(str(role).lower())
    except ValueError:
        raise InvalidRoleError(role) from None


def coerce_source(source: "ContractSource | str") -> ContractSource:
    """Parse a source tag.

    Raises:
        UnknownSourceError: If the value is not a known source
    """
    if isinstance(source, ContractSource):
        return source
    try:
        return ContractSource(source)
    except ValueError:
        raise UnknownSourceError(source) from None


class ContractIdentity(BaseModel):
    """Unique identity of a retrievable contract; the cache key."""

    model_config = ConfigDict(frozen=True)

    source: ContractSource
    role: ContractRole
    name: str

    @property
    def cache_key(self) -> str:
        return f"{self.source.value}:{self.role.value}:{self.name}"


class DiffResult(BaseModel):
    """Structured diff between two specs.

    Difference records are produced by the diff engine and passed through
    untouched.
    """

    model_config = ConfigDict(populate_by_name=True)

    breaking_differences_found: bool = Field(default=False, alias="breakingDifferencesFound")
    non_breaking_differences: list[dict[str, Any]] = Field(
        default_factory=list, alias="nonBreakingDifferences"
    )
    unclassified_differences: list[dict[str, Any]] = Field(
        default_factory=list, alias="unclassifiedDifferences"
    )
    breaking_differences: list[dict[str, Any]] = Field(
        default_factory=list, alias="breakingDifferences"
    )

    @classmethod
    def from_engine(cls, raw: dict[str, Any] | None) -> "DiffResult":
        """Map a raw engine result, defaulting missing collections to empty."""
        raw = raw or {}
        return cls(
            breaking_differences_found=bool(raw.get("breakingDifferencesFound")),
            non_breaking_differences=list(raw.get("nonBreakingDifferences") or []),
            unclassified_differences=list(raw.get("unclassifiedDifferences") or []),
            breaking_differences=list(raw.get("breakingDifferences") or []),
        )

    def to_output(self) -> dict[str, Any]:
        """Serialize with the camelCase field names clients expect."""
        return self.model_dump(by_alias=True)


class CompatibilityReport(BaseModel):
    """Consumer vs provider compatibility verdict."""

    model_config = ConfigDict(populate_by_name=True)

    is_compatible: bool = Field(alias="isCompatible")
    breaking_differences_found: bool = Field(alias="breakingDifferencesFound")
    breaking_differences: list[dict[str, Any]] = Field(
        default_factory=list, alias="breakingDifferences"
    )
    raw: DiffResult

    def to_output(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class S3Info(BaseModel):
    """Non-secret S3 settings."""

    region: str
    bucket: str
    prefix: str


class StoreInfo(BaseModel):
    """Safe configuration summary. Never carries credentials."""

    local_contracts_dir: str = Field(alias="localContractsDir")
    s3_enabled: bool = Field(alias="s3Enabled")
    s3: S3Info | None = None

    model_config = ConfigDict(populate_by_name=True)

    def to_output(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
