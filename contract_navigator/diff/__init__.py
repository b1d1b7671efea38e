"""Reference resolution and structural diffing of OpenAPI specs."""

from contract_navigator.diff.engine import SpecDocument, StructuralDiffEngine, detect_format
from contract_navigator.diff.orchestrator import DiffOrchestrator
from contract_navigator.diff.resolver import ReferenceResolver

__all__ = [
    "DiffOrchestrator",
    "ReferenceResolver",
    "SpecDocument",
    "StructuralDiffEngine",
    "detect_format",
]
