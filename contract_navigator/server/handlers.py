"""Request handlers behind the MCP resources and tools.

Kept free of server registration so they can be exercised directly.
"""

import json
import logging
from typing import Any, Literal

from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import (
    Completion,
    CompletionArgument,
    CompletionContext,
    PromptReference,
    ResourceTemplateReference,
)
from pydantic import BaseModel

from contract_navigator.core.models import ContractRole, ContractSource, coerce_role
from contract_navigator.diff.orchestrator import DiffOrchestrator
from contract_navigator.store.spec_store import SpecStore

logger = logging.getLogger(__name__)

MAX_COMPLETIONS = 50


def contracts_uri(source: ContractSource, kind: str = "{kind}") -> str:
    return f"openapi://contracts/{source.value}/{kind}"


def spec_uri(source: ContractSource, kind: str = "{kind}", name: str = "{name}") -> str:
    return f"openapi://spec/{source.value}/{kind}/{name}"


class ContractRef(BaseModel):
    """A contract addressed by source, kind and name."""

    source: str
    kind: str
    name: str


class SourcedContractRef(BaseModel):
    """A contract whose kind is implied by the tool argument it is passed as."""

    source: Literal["local", "s3"]
    name: str


def to_json(value: Any) -> str:
    return json.dumps(value, indent=2)


async def read_index(store: SpecStore) -> dict[str, Any]:
    """Contract index across sources. S3 listing failures degrade to empty lists."""
    providers = await store.list_contracts(ContractSource.LOCAL, ContractRole.PROVIDER)
    consumers = await store.list_contracts(ContractSource.LOCAL, ContractRole.CONSUMER)
    s3_enabled = store.is_s3_enabled()

    s3_index = None
    if s3_enabled:
        try:
            s3_providers = await store.list_contracts(ContractSource.S3, ContractRole.PROVIDER)
            s3_consumers = await store.list_contracts(ContractSource.S3, ContractRole.CONSUMER)
        except Exception as e:
            logger.warning(f"Failed to list S3 contracts: {e}")
            s3_providers, s3_consumers = [], []
        s3_index = {"providers": s3_providers, "consumers": s3_consumers}

    return {
        "local": {"providers": providers, "consumers": consumers},
        "s3": s3_index,
        "sources": {"local": True, "s3": s3_enabled},
    }


def read_server_info(store: SpecStore) -> dict[str, Any]:
    return store.get_safe_info().to_output()


async def read_contract_list(store: SpecStore, source: ContractSource, kind: str) -> dict[str, Any]:
    role = coerce_role(kind)
    contracts = await store.list_contracts(source, role)
    return {"source": source.value, "kind": role.value, "contracts": contracts}


async def read_spec(store: SpecStore, source: ContractSource, kind: str, name: str) -> Any:
    return await store.load_spec(source, coerce_role(kind), name)


async def list_spec_resources(store: SpecStore, source: ContractSource) -> list[dict[str, str]]:
    """Concrete spec resources for every contract stored in a source.

    A role whose listing fails is logged and skipped.

    Returns:
        One ``{"uri", "name"}`` entry per contract, providers first
    """
    resources: list[dict[str, str]] = []
    for role in ContractRole:
        try:
            names = await store.list_contracts(source, role)
        except Exception as e:
            logger.warning(f"Failed to list {source.value} {role.value} contracts: {e}")
            continue
        resources.extend(
            {"uri": spec_uri(source, role.value, name), "name": name} for name in names
        )
    return resources


async def complete_contract_name(
    store: SpecStore, source: ContractSource, kind: str, prefix: str
) -> Completion:
    """Contract names of a kind starting with ``prefix``, capped at MAX_COMPLETIONS.

    Raises:
        InvalidRoleError: If the kind is not provider or consumer
    """
    names = await store.list_contracts(source, coerce_role(kind))
    matches = [name for name in names if name.startswith(prefix)]
    return Completion(
        values=matches[:MAX_COMPLETIONS],
        total=len(matches),
        hasMore=len(matches) > MAX_COMPLETIONS,
    )


async def complete_argument(
    store: SpecStore,
    ref: PromptReference | ResourceTemplateReference,
    argument: CompletionArgument,
    context: CompletionContext | None,
) -> Completion | None:
    """Complete the ``name`` argument of the spec resource templates.

    Returns:
        Suggestions for a spec template of an enabled source, an empty
        completion when no kind has been chosen yet, None for anything else
    """
    if not isinstance(ref, ResourceTemplateReference) or argument.name != "name":
        return None

    source = next(
        (s for s in ContractSource if store.is_enabled(s) and ref.uri == spec_uri(s)),
        None,
    )
    if source is None:
        return None

    kind = (context.arguments or {}).get("kind") if context else None
    if not kind:
        return Completion(values=[])
    return await complete_contract_name(store, source, kind, argument.value or "")


async def diff_contracts(
    store: SpecStore,
    orchestrator: DiffOrchestrator,
    base: ContractRef,
    compare: ContractRef,
) -> dict[str, Any]:
    """Diff two contracts addressed by (source, kind, name).

    Raises:
        ToolError: If loading or diffing fails
    """
    try:
        base_spec = await store.load_spec(base.source, base.kind, base.name)
        compare_spec = await store.load_spec(compare.source, compare.kind, compare.name)
        result = await orchestrator.diff(base_spec, compare_spec)
    except Exception as e:
        logger.error(f"Error in diff_contracts tool: {e}")
        raise ToolError(f"Error diffing contracts: {e}") from e

    return result.to_output()


async def validate_compatibility(
    store: SpecStore,
    orchestrator: DiffOrchestrator,
    provider: SourcedContractRef,
    consumer: SourcedContractRef,
) -> dict[str, Any]:
    """Check a consumer contract against a provider contract.

    Raises:
        ToolError: If loading or diffing fails
    """
    try:
        provider_spec = await store.load_spec(provider.source, ContractRole.PROVIDER, provider.name)
        consumer_spec = await store.load_spec(consumer.source, ContractRole.CONSUMER, consumer.name)
        report = await orchestrator.check_compatibility(provider_spec, consumer_spec)
    except Exception as e:
        logger.error(f"Error in validate_compatibility tool: {e}")
        raise ToolError(f"Error validating compatibility: {e}") from e

    return report.to_output()
