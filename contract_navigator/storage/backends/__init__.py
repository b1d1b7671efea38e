"""Storage backend implementations."""

from contract_navigator.storage.backends.local_backend import LocalStorageBackend
from contract_navigator.storage.backends.s3_backend import S3StorageBackend

__all__ = [
    "LocalStorageBackend",
    "S3StorageBackend",
]
