"""In-memory `$ref` dereferencing for OpenAPI documents."""

import logging
from typing import Any

import jsonref

from contract_navigator.core.exceptions import ResolutionError

logger = logging.getLogger(__name__)


def _refuse_external(uri: str, **kwargs: Any) -> Any:
    """jsonref loader that never touches the filesystem or the network."""
    raise ResolutionError(f"External reference '{uri}' is not supported")


class ReferenceResolver:
    """Replaces every internal `$ref` with the structure it points to.

    Only pointers into the document itself (``#/components/...``) resolve.
    References to files or URLs are rejected rather than fetched. Recursive
    schemas come back as cyclic Python structures.
    """

    def resolve(self, spec: Any) -> Any:
        """Return a fully dereferenced copy of ``spec``.

        The input is left untouched, so cached specs can be passed directly.

        Args:
            spec: Parsed OpenAPI document

        Returns:
            The document with all references replaced by plain dicts and lists

        Raises:
            ResolutionError: If a pointer dangles or a reference is external
        """
        try:
            return jsonref.replace_refs(
                spec,
                base_uri="",
                loader=_refuse_external,
                jsonschema=False,
                merge_props=False,
                proxies=False,
                lazy_load=False,
            )
        except jsonref.JsonRefError as e:
            logger.debug(f"Dereferencing failed: {e}")
            raise ResolutionError(f"Failed to dereference spec: {e}") from e
