"""Storage module for contract documents."""

from contract_navigator.storage.base import StorageBackend
from contract_navigator.storage.backends import LocalStorageBackend, S3StorageBackend

__all__ = ["StorageBackend", "LocalStorageBackend", "S3StorageBackend"]
