"""Single access point for contracts across storage backends."""

import logging
from typing import Any, Optional

from contract_navigator.core.cache import InMemorySpecCache, SpecCache
from contract_navigator.core.exceptions import SourceDisabledError
from contract_navigator.core.models import (
    ContractIdentity,
    ContractRole,
    ContractSource,
    S3Info,
    StoreInfo,
    coerce_role,
    coerce_source,
)
from contract_navigator.core.normalize import normalize_spec
from contract_navigator.environment.config import NavigatorConfig
from contract_navigator.storage.backends import LocalStorageBackend, S3StorageBackend
from contract_navigator.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class SpecStore:
    """Loads, normalizes and caches contracts from the local and S3 sources.

    Normalized specs are cached per (source, role, name) for the lifetime of
    the store. A cache hit returns the very object stored on the first load,
    so callers can compare results by identity.

    Two concurrent loads of the same uncached contract may both reach the
    backend; the last one to finish wins the cache slot. Loads are pure, so
    this only costs duplicate work.

    Args:
        local: Filesystem backend
        s3: S3 backend, or None when the remote source is disabled
        cache: Cache owned by this store (defaults to a fresh in-memory cache)
    """

    def __init__(
        self,
        local: LocalStorageBackend,
        s3: Optional[S3StorageBackend] = None,
        cache: Optional[SpecCache] = None,
    ) -> None:
        self.local = local
        self.s3 = s3
        self.cache = cache if cache is not None else InMemorySpecCache()
        self._backends: dict[ContractSource, Optional[StorageBackend]] = {
            ContractSource.LOCAL: local,
            ContractSource.S3: s3,
        }

        self._cache_hits = 0
        self._cache_misses = 0

    @classmethod
    def from_config(
        cls, config: NavigatorConfig, cache: Optional[SpecCache] = None
    ) -> "SpecStore":
        """Build a store from configuration.

        Raises:
            ConfigError: If S3 is enabled without a bucket
        """
        local = LocalStorageBackend(config.contracts_dir)
        s3_settings = config.s3_settings()
        s3 = (
            S3StorageBackend(
                bucket=s3_settings.bucket,
                region=s3_settings.region,
                prefix=s3_settings.prefix,
            )
            if s3_settings
            else None
        )
        return cls(local=local, s3=s3, cache=cache)

    def is_enabled(self, source: ContractSource | str) -> bool:
        """Whether a source has a configured backend.

        Raises:
            UnknownSourceError: If the source tag is not recognized
        """
        return self._backends[coerce_source(source)] is not None

    def is_s3_enabled(self) -> bool:
        return self.is_enabled(ContractSource.S3)

    def _backend_for(self, source: ContractSource | str) -> StorageBackend:
        resolved = coerce_source(source)
        backend = self._backends[resolved]
        if backend is None:
            raise SourceDisabledError(resolved.value)
        return backend

    async def list_contracts(
        self, source: ContractSource | str, role: ContractRole | str
    ) -> list[str]:
        """List contract names of a role from a source.

        Raises:
            SourceDisabledError: If S3 is requested but not configured
            UnknownSourceError: If the source tag is not recognized
            InvalidRoleError: If the role is not provider or consumer
        """
        backend = self._backend_for(source)
        return await backend.list_contracts(coerce_role(role))

    async def load_spec(
        self, source: ContractSource | str, role: ContractRole | str, name: str
    ) -> Any:
        """Return the normalized spec for a contract, loading it on first use.

        Backend errors (invalid name, not found, parse failure) propagate
        unchanged.

        Raises:
            SourceDisabledError: If S3 is requested but not configured
            UnknownSourceError: If the source tag is not recognized
        """
        identity = ContractIdentity(
            source=coerce_source(source), role=coerce_role(role), name=name
        )
        key = identity.cache_key
        backend = self._backend_for(identity.source)

        if await self.cache.has(key):
            self._cache_hits += 1
            logger.debug(f"Cache hit for {key}")
            return await self.cache.get(key)

        self._cache_misses += 1
        raw = await backend.load_contract(identity.role, identity.name)

        normalized = normalize_spec(raw)
        await self.cache.set(key, normalized)
        logger.debug(f"Cached normalized spec for {key}")
        return normalized

    def get_safe_info(self) -> StoreInfo:
        """Configuration summary that is safe to expose. Never includes credentials."""
        s3_info = (
            S3Info(region=self.s3.region, bucket=self.s3.bucket, prefix=self.s3.prefix)
            if self.s3
            else None
        )
        return StoreInfo(
            local_contracts_dir=str(self.local.contracts_dir),
            s3_enabled=self.s3 is not None,
            s3=s3_info,
        )

    def get_cache_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Hits, misses and hit rate since the store was created
        """
        lookups = self._cache_hits + self._cache_misses
        hit_rate = self._cache_hits / lookups if lookups > 0 else 0.0
        return {
            "cache_hits": self._cache_hits,
            "cache_misses": self._cache_misses,
            "hit_rate": round(hit_rate, 3),
        }

    async def close(self) -> None:
        """Close every configured backend."""
        for backend in self._backends.values():
            if backend is not None:
                await backend.close()
