"""Base interface for contract storage backends."""

from abc import ABC, abstractmethod
from typing import Any

from contract_navigator.core.exceptions import InvalidNameError
from contract_navigator.core.models import JSON_SUFFIX, ContractRole, ContractSource


class StorageBackend(ABC):
    """Abstract base class for contract storage backends.

    This interface defines the contract that every storage implementation must
    follow, whether contracts live on disk or in an object store.

    Implementations should handle:
    - Listing `.json` contract names for a role, sorted ordinally
    - Loading the raw JSON document behind a name
    - Treating a missing directory or prefix as "no contracts", not an error

    Example:
        >>> class MyStorage(StorageBackend):
        ...     source = ContractSource.LOCAL
        ...     async def list_contracts(self, role: ContractRole) -> list[str]:
        ...         return ["api-v1.json"]
        ...     async def load_contract(self, role: ContractRole, name: str) -> Any:
        ...         return {"openapi": "3.0.0"}
        ...
        >>> backend = MyStorage()
        >>> names = await backend.list_contracts(ContractRole.PROVIDER)
    """

    source: ContractSource

    @abstractmethod
    async def list_contracts(self, role: ContractRole) -> list[str]:
        """List contract names stored for a role.

        Args:
            role: Provider or consumer partition to list

        Returns:
            Contract names ending in `.json`, sorted by ordinal comparison.
            Empty when nothing is stored for the role.
        """
        pass

    @abstractmethod
    async def load_contract(self, role: ContractRole, name: str) -> Any:
        """Load the raw JSON document for a contract.

        Args:
            role: Provider or consumer partition
            name: Contract name, must end in `.json`

        Returns:
            The parsed JSON value, unmodified

        Raises:
            InvalidNameError: If the name does not end in `.json`
            NotFoundError: If nothing backs the name
            ParseError: If the content is not valid JSON
        """
        pass

    def ensure_json_name(self, name: str) -> str:
        """Reject names that do not end in `.json`.

        Raises:
            InvalidNameError: If the name lacks the `.json` suffix
        """
        if not isinstance(name, str) or not name.endswith(JSON_SUFFIX):
            raise InvalidNameError(str(name), source=self.source.value)
        return name

    async def close(self) -> None:
        """Release any client resources held by the backend."""
        pass

    async def __aenter__(self) -> "StorageBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
