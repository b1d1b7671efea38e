"""MCP server wiring and the ``contract-navigator`` entry point."""

import logging
import sys
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import (
    Completion,
    CompletionArgument,
    CompletionContext,
    PromptReference,
    ResourceTemplateReference,
)
from mcp.types import Resource as MCPResource

from contract_navigator.core.models import ContractRole, ContractSource
from contract_navigator.diff.orchestrator import DiffOrchestrator
from contract_navigator.environment.config import NavigatorConfig
from contract_navigator.server import handlers
from contract_navigator.server.handlers import (
    ContractRef,
    SourcedContractRef,
    contracts_uri,
    spec_uri,
    to_json,
)
from contract_navigator.store.spec_store import SpecStore

logger = logging.getLogger(__name__)

SERVER_NAME = "openapi-contract-navigator"
JSON_MIME = "application/json"


def configure_logging(debug: bool = False) -> None:
    """Route all logging to stderr; stdout carries the JSON-RPC stream."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


class NavigatorServer(FastMCP):
    """FastMCP server whose resource listing also enumerates stored contracts.

    Spec resources are listed on every ``resources/list`` call, so contracts
    added after startup show up without a restart.

    Args:
        contract_store: Store the spec listing is read from
    """

    def __init__(self, contract_store: SpecStore, **settings: Any) -> None:
        self.contract_store = contract_store
        super().__init__(SERVER_NAME, **settings)

    async def list_resources(self) -> list[MCPResource]:
        resources = await super().list_resources()
        for source in ContractSource:
            if not self.contract_store.is_enabled(source):
                continue
            for entry in await handlers.list_spec_resources(self.contract_store, source):
                resources.append(
                    MCPResource(uri=entry["uri"], name=entry["name"], mimeType=JSON_MIME)
                )
        return resources


def _register_role_directory(
    server: FastMCP, store: SpecStore, source: ContractSource, role: ContractRole, label: str
) -> None:
    @server.resource(
        contracts_uri(source, role.value),
        name=f"contracts-{source.value}-{role.value}",
        description=f"Lists {label} JSON OpenAPI {role.value} contracts.",
        mime_type=JSON_MIME,
    )
    async def role_directory() -> str:
        return to_json(await handlers.read_contract_list(store, source, role.value))


def _register_source_resources(server: FastMCP, store: SpecStore, source: ContractSource) -> None:
    label = "S3" if source is ContractSource.S3 else "local"

    @server.resource(
        contracts_uri(source),
        name=f"contracts-{source.value}",
        description=f"Lists {label} JSON OpenAPI contracts for provider/consumer.",
        mime_type=JSON_MIME,
    )
    async def contract_directory(kind: str) -> str:
        return to_json(await handlers.read_contract_list(store, source, kind))

    for role in ContractRole:
        _register_role_directory(server, store, source, role, label)

    @server.resource(
        spec_uri(source),
        name=f"openapi-{source.value}",
        description=f"Reads a {label} OpenAPI JSON spec.",
        mime_type=JSON_MIME,
    )
    async def contract_spec(kind: str, name: str) -> str:
        return to_json(await handlers.read_spec(store, source, kind, name))


def build_server(store: SpecStore, orchestrator: Optional[DiffOrchestrator] = None) -> FastMCP:
    """Create the MCP server and register every resource, tool and completion.

    S3 resources are only registered when the store has an S3 backend.
    """
    orchestrator = orchestrator or DiffOrchestrator()
    server = NavigatorServer(store)

    @server.resource(
        "openapi://index",
        name="openapi-index",
        description="Lists available OpenAPI provider and consumer contracts",
        mime_type=JSON_MIME,
    )
    async def openapi_index() -> str:
        return to_json(await handlers.read_index(store))

    @server.resource(
        "openapi://server/info",
        name="server-info",
        description="Configuration summary (safe fields only).",
        mime_type=JSON_MIME,
    )
    async def server_info() -> str:
        return to_json(handlers.read_server_info(store))

    _register_source_resources(server, store, ContractSource.LOCAL)
    if store.is_s3_enabled():
        _register_source_resources(server, store, ContractSource.S3)

    @server.completion()
    async def complete_argument(
        ref: PromptReference | ResourceTemplateReference,
        argument: CompletionArgument,
        context: CompletionContext | None,
    ) -> Completion | None:
        return await handlers.complete_argument(store, ref, argument, context)

    @server.tool(
        name="diff_contracts",
        description=(
            "Diff two OpenAPI JSON specs and return structured results, "
            "including breaking changes."
        ),
    )
    async def diff_contracts(base: ContractRef, compare: ContractRef) -> dict[str, Any]:
        return await handlers.diff_contracts(store, orchestrator, base, compare)

    @server.tool(
        name="validate_compatibility",
        description=(
            "Contract testing helper: checks whether consumer changes introduce "
            "breaking differences compared to provider."
        ),
    )
    async def validate_compatibility(
        provider: SourcedContractRef, consumer: SourcedContractRef
    ) -> dict[str, Any]:
        return await handlers.validate_compatibility(store, orchestrator, provider, consumer)

    return server


def main() -> None:
    config = NavigatorConfig.from_env()
    configure_logging(config.debug)
    logger.info(f"Starting {SERVER_NAME}...")

    try:
        store = SpecStore.from_config(config)
        server = build_server(store)
    except Exception as e:
        logger.error(f"Fatal: {e}", exc_info=True)
        sys.exit(1)

    logger.info("Server ready, serving over stdio.")
    server.run()


if __name__ == "__main__":
    main()
