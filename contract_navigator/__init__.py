"""Contract Navigator - OpenAPI contract store and breaking-change diff."""

from contract_navigator.core import (
    CompatibilityReport,
    ConfigError,
    ContractError,
    ContractIdentity,
    ContractRole,
    ContractSource,
    DiffEngineError,
    DiffError,
    DiffResult,
    EmptyBodyError,
    InMemorySpecCache,
    InvalidNameError,
    InvalidRoleError,
    NotFoundError,
    ParseError,
    ResolutionError,
    SourceDisabledError,
    SpecCache,
    StoreInfo,
    UnknownSourceError,
    normalize_spec,
)
from contract_navigator.diff import DiffOrchestrator, ReferenceResolver, StructuralDiffEngine
from contract_navigator.environment import NavigatorConfig
from contract_navigator.storage import LocalStorageBackend, S3StorageBackend, StorageBackend
from contract_navigator.store import SpecStore

__version__ = "1.0.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "ContractRole",
    "ContractSource",
    "ContractIdentity",
    "DiffResult",
    "CompatibilityReport",
    "StoreInfo",
    "SpecCache",
    "InMemorySpecCache",
    "normalize_spec",
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
    # Storage
    "StorageBackend",
    "LocalStorageBackend",
    "S3StorageBackend",
    # Store
    "SpecStore",
    # Diff
    "ReferenceResolver",
    "StructuralDiffEngine",
    "DiffOrchestrator",
    # Config
    "NavigatorConfig",
]
