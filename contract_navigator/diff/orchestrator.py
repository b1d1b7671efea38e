"""Dereference-then-diff pipeline."""

import logging
from typing import Any, Optional

from contract_navigator.core.exceptions import DiffError
from contract_navigator.core.models import CompatibilityReport, DiffResult
from contract_navigator.diff.engine import SpecDocument, StructuralDiffEngine, detect_format
from contract_navigator.diff.resolver import ReferenceResolver

logger = logging.getLogger(__name__)

SOURCE_LOCATION = "openapi://memory/source"
DESTINATION_LOCATION = "openapi://memory/destination"


class DiffOrchestrator:
    """Resolves both specs in memory, then runs the structural diff.

    Stateless between calls and never retries: diff failures come from the
    documents themselves, so a second attempt would fail the same way.

    Args:
        resolver: Reference resolver (default: in-memory jsonref resolver)
        engine: Structural diff engine
    """

    def __init__(
        self,
        resolver: Optional[ReferenceResolver] = None,
        engine: Optional[StructuralDiffEngine] = None,
    ) -> None:
        self.resolver = resolver or ReferenceResolver()
        self.engine = engine or StructuralDiffEngine()

    async def diff(self, base_spec: Any, compare_spec: Any) -> DiffResult:
        """Diff two specs.

        Args:
            base_spec: Baseline spec (raw or normalized)
            compare_spec: Spec compared against the baseline

        Returns:
            Diff result with all collections present

        Raises:
            DiffError: If resolution or diffing fails at any stage
        """
        try:
            base_resolved = self.resolver.resolve(base_spec)
            compare_resolved = self.resolver.resolve(compare_spec)

            raw = self.engine.diff_specs(
                SpecDocument(
                    content=base_resolved,
                    location=SOURCE_LOCATION,
                    format=detect_format(base_resolved),
                ),
                SpecDocument(
                    content=compare_resolved,
                    location=DESTINATION_LOCATION,
                    format=detect_format(compare_resolved),
                ),
            )
        except Exception as e:
            logger.debug(f"Diff failed: {e}")
            raise DiffError(f"Failed to diff OpenAPI specs: {e}") from e

        return DiffResult.from_engine(raw)

    async def check_compatibility(
        self, provider_spec: Any, consumer_spec: Any
    ) -> CompatibilityReport:
        """Check whether a consumer contract breaks against its provider.

        Raises:
            DiffError: If the diff fails
        """
        result = await self.diff(provider_spec, consumer_spec)
        return CompatibilityReport(
            is_compatible=not result.breaking_differences_found,
            breaking_differences_found=result.breaking_differences_found,
            breaking_differences=result.breaking_differences,
            raw=result,
        )
