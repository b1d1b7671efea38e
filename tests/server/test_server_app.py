"""Tests for MCP server wiring and the entry point."""

import json
import logging
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from mcp import types

from contract_navigator.core import InvalidRoleError
from contract_navigator.server import app, handlers
from contract_navigator.storage import LocalStorageBackend, S3StorageBackend
from contract_navigator.store import SpecStore


@pytest.fixture
def restore_logging():
    """Put the root logger back the way it was."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


async def template_uris(server) -> set[str]:
    return {t.uriTemplate for t in await server.list_resource_templates()}


@pytest.mark.asyncio
async def test_build_server_local_only(tmp_path: Path):
    """Test the local-only server registers no S3 resources."""
    server = app.build_server(SpecStore(local=LocalStorageBackend(tmp_path)))

    resources = {r.name for r in await server.list_resources()}
    tools = {t.name for t in await server.list_tools()}

    assert server.name == "openapi-contract-navigator"
    assert resources == {
        "openapi-index",
        "server-info",
        "contracts-local-provider",
        "contracts-local-consumer",
    }
    assert await template_uris(server) == {
        "openapi://contracts/local/{kind}",
        "openapi://spec/local/{kind}/{name}",
    }
    assert tools == {"diff_contracts", "validate_compatibility"}
    assert types.CompleteRequest in server._mcp_server.request_handlers


@pytest.mark.asyncio
async def test_list_resources_enumerates_contracts(contracts_dir: Path):
    """Test every stored contract is listed as a concrete spec resource."""
    server = app.build_server(SpecStore(local=LocalStorageBackend(contracts_dir)))

    specs = {
        str(r.uri): r.name
        for r in await server.list_resources()
        if r.name.endswith(".json")
    }

    assert specs == {
        "openapi://spec/local/provider/api-v1.json": "api-v1.json",
        "openapi://spec/local/consumer/mobile.json": "mobile.json",
    }


@pytest.mark.asyncio
async def test_list_resources_picks_up_new_contracts(contracts_dir: Path):
    """Test contracts added after startup are listed."""
    server = app.build_server(SpecStore(local=LocalStorageBackend(contracts_dir)))
    (contracts_dir / "provider" / "api-v2.json").write_text("{}")

    names = {r.name for r in await server.list_resources()}

    assert "api-v2.json" in names


@pytest.mark.asyncio
async def test_list_resources_skips_failing_s3(contracts_dir: Path):
    """Test an unreachable bucket does not break resource listing."""
    s3 = S3StorageBackend(bucket="bucket", client=MagicMock())
    s3.list_contracts = AsyncMock(side_effect=RuntimeError("network down"))
    server = app.build_server(SpecStore(local=LocalStorageBackend(contracts_dir), s3=s3))

    names = {r.name for r in await server.list_resources()}

    assert {"contracts-s3-provider", "contracts-s3-consumer", "api-v1.json"} <= names


@pytest.mark.asyncio
async def test_read_role_directory(contracts_dir: Path):
    """Test a concrete role directory resource returns its listing."""
    server = app.build_server(SpecStore(local=LocalStorageBackend(contracts_dir)))

    [contents] = list(await server.read_resource("openapi://contracts/local/provider"))

    assert json.loads(contents.content) == {
        "source": "local",
        "kind": "provider",
        "contracts": ["api-v1.json"],
    }


def name_argument(prefix: str) -> types.CompletionArgument:
    return types.CompletionArgument(name="name", value=prefix)


def spec_template(source: str = "local") -> types.ResourceTemplateReference:
    return types.ResourceTemplateReference(
        type="ref/resource", uri=f"openapi://spec/{source}/{{kind}}/{{name}}"
    )


@pytest.mark.asyncio
async def test_complete_name_by_prefix(contracts_dir: Path):
    """Test names are completed from the chosen kind."""
    for name in ("api-v2.json", "billing.json"):
        (contracts_dir / "provider" / name).write_text("{}")
    store = SpecStore(local=LocalStorageBackend(contracts_dir))

    completion = await handlers.complete_argument(
        store,
        spec_template(),
        name_argument("api"),
        types.CompletionContext(arguments={"kind": "Provider"}),
    )

    assert completion.values == ["api-v1.json", "api-v2.json"]
    assert completion.total == 2
    assert completion.hasMore is False


@pytest.mark.asyncio
async def test_complete_name_is_capped(tmp_path: Path):
    """Test at most fifty suggestions are returned."""
    (tmp_path / "consumer").mkdir()
    for index in range(60):
        (tmp_path / "consumer" / f"app-{index:02d}.json").write_text("{}")
    store = SpecStore(local=LocalStorageBackend(tmp_path))

    completion = await handlers.complete_argument(
        store,
        spec_template(),
        name_argument(""),
        types.CompletionContext(arguments={"kind": "consumer"}),
    )

    assert len(completion.values) == 50
    assert completion.values[0] == "app-00.json"
    assert completion.total == 60
    assert completion.hasMore is True


@pytest.mark.asyncio
async def test_complete_name_without_kind(contracts_dir: Path):
    """Test no suggestions until a kind is chosen."""
    store = SpecStore(local=LocalStorageBackend(contracts_dir))

    completion = await handlers.complete_argument(store, spec_template(), name_argument("a"), None)

    assert completion.values == []


@pytest.mark.asyncio
async def test_complete_ignores_other_references(contracts_dir: Path):
    """Test other templates, disabled sources and other arguments get no completion."""
    store = SpecStore(local=LocalStorageBackend(contracts_dir))
    context = types.CompletionContext(arguments={"kind": "provider"})

    disabled = await handlers.complete_argument(store, spec_template("s3"), name_argument(""), context)
    directory = await handlers.complete_argument(
        store,
        types.ResourceTemplateReference(type="ref/resource", uri="openapi://contracts/local/{kind}"),
        name_argument(""),
        context,
    )
    kind_argument = await handlers.complete_argument(
        store, spec_template(), types.CompletionArgument(name="kind", value="p"), context
    )

    assert disabled is None
    assert directory is None
    assert kind_argument is None


@pytest.mark.asyncio
async def test_complete_invalid_kind(contracts_dir: Path):
    """Test an unknown kind is rejected."""
    store = SpecStore(local=LocalStorageBackend(contracts_dir))

    with pytest.raises(InvalidRoleError):
        await handlers.complete_argument(
            store,
            spec_template(),
            name_argument(""),
            types.CompletionContext(arguments={"kind": "gateway"}),
        )


@pytest.mark.asyncio
async def test_build_server_with_s3(tmp_path: Path):
    """Test S3 resources are registered when S3 is enabled."""
    store = SpecStore(
        local=LocalStorageBackend(tmp_path),
        s3=S3StorageBackend(bucket="bucket", client=MagicMock()),
    )

    server = app.build_server(store)

    assert await template_uris(server) == {
        "openapi://contracts/local/{kind}",
        "openapi://spec/local/{kind}/{name}",
        "openapi://contracts/s3/{kind}",
        "openapi://spec/s3/{kind}/{name}",
    }


def test_configure_logging_uses_stderr(restore_logging):
    """Test logs never go to stdout."""
    app.configure_logging(debug=True)

    assert restore_logging.level == logging.DEBUG
    [handler] = restore_logging.handlers
    assert handler.stream is sys.stderr


def test_configure_logging_default_level(restore_logging):
    """Test info level without debug."""
    app.configure_logging()

    assert restore_logging.level == logging.INFO


def test_main_exits_on_startup_failure(monkeypatch, mocker, restore_logging):
    """Test a bad configuration stops the process with status 1."""
    monkeypatch.setenv("S3_ENABLED", "true")
    monkeypatch.delenv("S3_BUCKET", raising=False)
    run = mocker.patch.object(app.FastMCP, "run")

    with pytest.raises(SystemExit) as exc_info:
        app.main()

    assert exc_info.value.code == 1
    run.assert_not_called()


def test_main_runs_server(monkeypatch, mocker, tmp_path: Path, restore_logging):
    """Test a valid configuration starts the stdio server."""
    monkeypatch.setenv("OPENAPI_CONTRACT_DIR", str(tmp_path))
    monkeypatch.delenv("S3_ENABLED", raising=False)
    run = mocker.patch.object(app.FastMCP, "run")

    app.main()

    run.assert_called_once_with()
