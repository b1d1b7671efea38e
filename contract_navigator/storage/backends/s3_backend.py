"""S3 storage backend.

Contracts are stored under a flat key namespace::

    s3://<bucket>/<prefix>/<role>/<name>.json

The boto3 client is synchronous, so every SDK call is pushed to a worker
thread and awaited.
"""

import asyncio
import json
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import ClientError

from contract_navigator.core.exceptions import (
    ConfigError,
    EmptyBodyError,
    NotFoundError,
    ParseError,
)
from contract_navigator.core.models import JSON_SUFFIX, ContractRole, ContractSource
from contract_navigator.storage.base import StorageBackend

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class S3StorageBackend(StorageBackend):
    """Reads contracts from an S3 bucket.

    Example:
        ```python
        backend = S3StorageBackend(
            bucket="my-contracts",
            region="eu-west-2",
            prefix="openapi-contracts",
        )
        names = await backend.list_contracts(ContractRole.PROVIDER)
        spec = await backend.load_contract(ContractRole.PROVIDER, names[0])
        await backend.close()
        ```

    Args:
        bucket: Bucket name (required)
        region: AWS region of the bucket
        prefix: Key prefix above the role folders; trailing slashes are ignored
        client: Pre-built S3 client, mainly for tests

    Raises:
        ConfigError: If the bucket is empty
    """

    source = ContractSource.S3

    def __init__(
        self,
        bucket: str,
        region: str = "eu-west-2",
        prefix: str = "openapi-contracts",
        client: Optional[Any] = None,
    ) -> None:
        if not bucket:
            raise ConfigError("S3_BUCKET is required when S3_ENABLED=true", source="s3")

        self.bucket = bucket
        self.region = region
        self.prefix = prefix.rstrip("/")
        self.client = client or boto3.client("s3", region_name=region)

    def prefix_for(self, role: ContractRole) -> str:
        return f"{self.prefix}/{role.value}/"

    def key_for(self, role: ContractRole, name: str) -> str:
        return f"{self.prefix_for(role)}{name}"

    async def list_contracts(self, role: ContractRole) -> list[str]:
        """List `.json` keys under `<prefix>/<role>/`, following continuation tokens."""
        prefix = self.prefix_for(role)
        names: list[str] = []
        token: Optional[str] = None

        while True:
            params: dict[str, Any] = {"Bucket": self.bucket, "Prefix": prefix}
            if token:
                params["ContinuationToken"] = token

            response = await asyncio.to_thread(self.client.list_objects_v2, **params)

            for obj in response.get("Contents") or []:
                key = obj.get("Key") or ""
                if not key.endswith(JSON_SUFFIX):
                    continue
                name = key[len(prefix):]
                if name:
                    names.append(name)

            token = response.get("NextContinuationToken") if response.get("IsTruncated") else None
            if not token:
                break

        logger.debug(f"Listed {len(names)} contracts under s3://{self.bucket}/{prefix}")
        return sorted(names)

    async def load_contract(self, role: ContractRole, name: str) -> Any:
        """Fetch and parse `<prefix>/<role>/<name>`."""
        name = self.ensure_json_name(name)
        key = self.key_for(role, name)

        try:
            response = await asyncio.to_thread(
                self.client.get_object, Bucket=self.bucket, Key=key
            )
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_KEY_CODES:
                raise NotFoundError(name, f"s3://{self.bucket}/{key}", source="s3") from e
            raise

        body = response.get("Body")
        if body is None:
            raise EmptyBodyError(self.bucket, key)

        try:
            payload = await asyncio.to_thread(body.read)
        finally:
            body.close()

        if not payload:
            raise EmptyBodyError(self.bucket, key)

        try:
            text = payload.decode("utf-8") if isinstance(payload, bytes) else str(payload)
            return json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(name, str(e), source="s3") from e

    async def close(self) -> None:
        """Close the underlying S3 client."""
        close = getattr(self.client, "close", None)
        if close is not None:
            await asyncio.to_thread(close)
