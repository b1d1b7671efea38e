"""Tests for the S3 storage backend."""

import json
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from contract_navigator.core import (
    ConfigError,
    ContractRole,
    EmptyBodyError,
    InvalidNameError,
    NotFoundError,
    ParseError,
)
from contract_navigator.storage import S3StorageBackend


def make_body(payload: bytes) -> MagicMock:
    body = MagicMock()
    body.read.return_value = payload
    return body


@pytest.fixture
def s3_client():
    """Mock S3 client."""
    return MagicMock()


@pytest.fixture
def backend(s3_client):
    """Backend wired to the mock client."""
    return S3StorageBackend(bucket="contracts", region="eu-west-2", client=s3_client)


def test_requires_bucket():
    """Test an empty bucket is a configuration error."""
    with pytest.raises(ConfigError, match="S3_BUCKET is required"):
        S3StorageBackend(bucket="", client=MagicMock())


def test_builds_boto3_client_for_region(mocker):
    """Test the default client is built with the configured region."""
    client_factory = mocker.patch("contract_navigator.storage.backends.s3_backend.boto3.client")

    backend = S3StorageBackend(bucket="contracts", region="us-west-2")

    client_factory.assert_called_once_with("s3", region_name="us-west-2")
    assert backend.client is client_factory.return_value


def test_prefix_trailing_slashes_ignored(s3_client):
    """Test trailing slashes on the prefix are stripped."""
    backend = S3StorageBackend(bucket="contracts", prefix="specs///", client=s3_client)

    assert backend.prefix == "specs"
    assert backend.key_for(ContractRole.PROVIDER, "api.json") == "specs/provider/api.json"


@pytest.mark.asyncio
async def test_list_contracts_filters_and_strips_prefix(backend, s3_client):
    """Test only .json keys are returned, relative to the role prefix."""
    s3_client.list_objects_v2.return_value = {
        "Contents": [
            {"Key": "openapi-contracts/provider/b.json"},
            {"Key": "openapi-contracts/provider/notes.txt"},
            {"Key": "openapi-contracts/provider/a.json"},
        ],
        "IsTruncated": False,
    }

    names = await backend.list_contracts(ContractRole.PROVIDER)

    assert names == ["a.json", "b.json"]
    s3_client.list_objects_v2.assert_called_once_with(
        Bucket="contracts", Prefix="openapi-contracts/provider/"
    )


@pytest.mark.asyncio
async def test_list_contracts_follows_pagination(backend, s3_client):
    """Test continuation tokens are followed until exhausted."""
    s3_client.list_objects_v2.side_effect = [
        {
            "Contents": [{"Key": "openapi-contracts/consumer/z.json"}],
            "IsTruncated": True,
            "NextContinuationToken": "page-2",
        },
        {
            "Contents": [{"Key": "openapi-contracts/consumer/m.json"}],
            "IsTruncated": False,
        },
    ]

    names = await backend.list_contracts(ContractRole.CONSUMER)

    assert names == ["m.json", "z.json"]
    assert s3_client.list_objects_v2.call_count == 2
    second_call = s3_client.list_objects_v2.call_args_list[1]
    assert second_call.kwargs["ContinuationToken"] == "page-2"


@pytest.mark.asyncio
async def test_list_contracts_empty_prefix(backend, s3_client):
    """Test a prefix with no objects lists nothing."""
    s3_client.list_objects_v2.return_value = {"IsTruncated": False}

    assert await backend.list_contracts(ContractRole.PROVIDER) == []


@pytest.mark.asyncio
async def test_load_contract(backend, s3_client):
    """Test the object body is parsed as JSON."""
    body = make_body(json.dumps({"openapi": "3.0.0"}).encode("utf-8"))
    s3_client.get_object.return_value = {"Body": body}

    spec = await backend.load_contract(ContractRole.PROVIDER, "api.json")

    assert spec == {"openapi": "3.0.0"}
    s3_client.get_object.assert_called_once_with(
        Bucket="contracts", Key="openapi-contracts/provider/api.json"
    )
    body.close.assert_called_once()


@pytest.mark.asyncio
async def test_load_contract_rejects_non_json_name(backend, s3_client):
    """Test the name is validated before the bucket is touched."""
    with pytest.raises(InvalidNameError) as exc_info:
        await backend.load_contract(ContractRole.PROVIDER, "api.yaml")

    assert exc_info.value.source == "s3"
    s3_client.get_object.assert_not_called()


@pytest.mark.asyncio
async def test_load_contract_missing_body(backend, s3_client):
    """Test a response without a body raises EmptyBodyError."""
    s3_client.get_object.return_value = {}

    with pytest.raises(EmptyBodyError, match="s3://contracts/openapi-contracts/provider/api.json"):
        await backend.load_contract(ContractRole.PROVIDER, "api.json")


@pytest.mark.asyncio
async def test_load_contract_zero_byte_body(backend, s3_client):
    """Test an empty payload raises EmptyBodyError."""
    s3_client.get_object.return_value = {"Body": make_body(b"")}

    with pytest.raises(EmptyBodyError):
        await backend.load_contract(ContractRole.PROVIDER, "api.json")


@pytest.mark.asyncio
async def test_load_contract_invalid_json(backend, s3_client):
    """Test malformed content raises ParseError."""
    s3_client.get_object.return_value = {"Body": make_body(b"{oops")}

    with pytest.raises(ParseError):
        await backend.load_contract(ContractRole.CONSUMER, "api.json")


@pytest.mark.asyncio
async def test_load_contract_no_such_key(backend, s3_client):
    """Test a missing key maps to NotFoundError."""
    s3_client.get_object.side_effect = ClientError(
        {"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "GetObject"
    )

    with pytest.raises(NotFoundError, match="api.json"):
        await backend.load_contract(ContractRole.PROVIDER, "api.json")


@pytest.mark.asyncio
async def test_load_contract_other_client_errors_propagate(backend, s3_client):
    """Test access errors are not swallowed."""
    s3_client.get_object.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "GetObject"
    )

    with pytest.raises(ClientError):
        await backend.load_contract(ContractRole.PROVIDER, "api.json")


@pytest.mark.asyncio
async def test_close_closes_client(backend, s3_client):
    """Test closing the backend closes the client."""
    await backend.close()

    s3_client.close.assert_called_once()
