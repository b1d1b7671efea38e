"""Filesystem storage backend.

Contracts live under a root directory, one subdirectory per role::

    contracts/
        provider/api-v1.json
        consumer/mobile.json

A flat legacy layout with the files directly under the root is still served
for both listing and loading.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from contract_navigator.core.exceptions import InvalidNameError, NotFoundError, ParseError
from contract_navigator.core.models import JSON_SUFFIX, ContractRole, ContractSource
from contract_navigator.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def _list_json_files(directory: Path) -> list[str]:
    return sorted(
        entry.name
        for entry in directory.iterdir()
        if entry.is_file() and entry.name.endswith(JSON_SUFFIX)
    )


class LocalStorageBackend(StorageBackend):
    """Reads contracts from a local directory tree.

    Args:
        contracts_dir: Root directory holding `provider/` and `consumer/`
    """

    source = ContractSource.LOCAL

    def __init__(self, contracts_dir: str | Path) -> None:
        self.contracts_dir = Path(contracts_dir)

    def role_dir(self, role: ContractRole) -> Path:
        return self.contracts_dir / role.value

    async def list_contracts(self, role: ContractRole) -> list[str]:
        """List `.json` files for a role, falling back to the flat root layout."""
        role_dir = self.role_dir(role)
        if await asyncio.to_thread(role_dir.is_dir):
            return await asyncio.to_thread(_list_json_files, role_dir)

        if await asyncio.to_thread(self.contracts_dir.is_dir):
            logger.debug(f"No {role_dir}, listing legacy layout in {self.contracts_dir}")
            return await asyncio.to_thread(_list_json_files, self.contracts_dir)

        logger.debug(f"Contracts directory {self.contracts_dir} does not exist")
        return []

    async def load_contract(self, role: ContractRole, name: str) -> Any:
        """Load a contract from `<root>/<role>/<name>` or `<root>/<name>`."""
        name = self.ensure_json_name(name)
        if Path(name).name != name:
            raise InvalidNameError(name, source=self.source.value)

        preferred = self.role_dir(role) / name
        fallback = self.contracts_dir / name

        if await asyncio.to_thread(preferred.is_file):
            path = preferred
        elif await asyncio.to_thread(fallback.is_file):
            path = fallback
        else:
            raise NotFoundError(name, str(preferred), source=self.source.value)

        logger.debug(f"Loading contract {path}")
        try:
            raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(name, str(e), source=self.source.value) from e
