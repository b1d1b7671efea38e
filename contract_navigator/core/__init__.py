"""Core abstractions and models."""

from contract_navigator.core.cache import InMemorySpecCache, SpecCache
from contract_navigator.core.exceptions import (
    ConfigError,
    ContractError,
    DiffEngineError,
    DiffError,
    EmptyBodyError,
    InvalidNameError,
    InvalidRoleError,
    NotFoundError,
    ParseError,
    ResolutionError,
    SourceDisabledError,
    UnknownSourceError,
)
from contract_navigator.core.models import (
    JSON_SUFFIX,
    CompatibilityReport,
    ContractIdentity,
    ContractRole,
    ContractSource,
    DiffResult,
    S3Info,
    StoreInfo,
    coerce_role,
    coerce_source,
)
from contract_navigator.core.normalize import normalize_spec

__all__ = [
    # Cache
    "SpecCache",
    "InMemorySpecCache",
    # Exceptions
    "ContractError",
    "InvalidNameError",
    "InvalidRoleError",
    "NotFoundError",
    "ParseError",
    "ConfigError",
    "SourceDisabledError",
    "UnknownSourceError",
    "EmptyBodyError",
    "ResolutionError",
    "DiffEngineError",
    "DiffError",
    # Models
    "JSON_SUFFIX",
    "ContractRole",
    "ContractSource",
    "ContractIdentity",
    "DiffResult",
    "CompatibilityReport",
    "S3Info",
    "StoreInfo",
    "coerce_role",
    "coerce_source",
    # Normalization
    "normalize_spec",
]
