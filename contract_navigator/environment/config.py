"""Environment-driven configuration for the navigator server."""

import os

from pydantic import BaseModel, Field

from contract_navigator.core.models import S3Info


def _parse_bool(value: str | None, default: bool) -> bool:
    """Parse a truthy env string (``1/true/t/yes/y/on``); unset means ``default``."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


class NavigatorConfig(BaseModel):
    """Server settings.

    Attributes:
        contracts_dir: Root of the local contract tree
        s3_enabled: Whether the S3 source is served
        aws_region: Region of the contract bucket
        s3_bucket: Contract bucket, required when S3 is enabled
        s3_prefix: Key prefix above the role folders
        debug: Log at DEBUG level
    """

    contracts_dir: str = Field(default="./contracts")
    s3_enabled: bool = Field(default=False)
    aws_region: str = Field(default="eu-west-2")
    s3_bucket: str = Field(default="")
    s3_prefix: str = Field(default="openapi-contracts")
    debug: bool = Field(default=False)

    @classmethod
    def from_env(cls) -> "NavigatorConfig":
        """Build settings from ``OPENAPI_CONTRACT_DIR``, ``S3_ENABLED``, ``AWS_REGION``,
        ``S3_BUCKET``, ``S3_PREFIX`` and ``DEBUG_MCP``; unset variables keep their defaults.
        """
        return cls(
            contracts_dir=os.getenv("OPENAPI_CONTRACT_DIR", "./contracts"),
            s3_enabled=_parse_bool(os.getenv("S3_ENABLED"), False),
            aws_region=os.getenv("AWS_REGION", "eu-west-2"),
            s3_bucket=os.getenv("S3_BUCKET", ""),
            s3_prefix=os.getenv("S3_PREFIX", "openapi-contracts"),
            debug=_parse_bool(os.getenv("DEBUG_MCP"), False),
        )

    def s3_settings(self) -> S3Info | None:
        """S3 settings when the remote source is switched on, else None."""
        if not self.s3_enabled:
            return None
        return S3Info(region=self.aws_region, bucket=self.s3_bucket, prefix=self.s3_prefix)
