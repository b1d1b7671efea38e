"""Spec store: backend dispatch, normalization and caching."""

from contract_navigator.store.spec_store import SpecStore

__all__ = ["SpecStore"]
