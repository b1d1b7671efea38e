"""Conservative spec normalization.

Sorts object keys at every depth so two copies of the same document always
iterate in the same order. Arrays keep their element order and no value is
interpreted, added or dropped.
"""

from typing import Any


def normalize_spec(spec: Any) -> Any:
    """Return a copy of ``spec`` with every mapping's keys in ordinal order.

    Scalars are returned unchanged. Applying this twice gives the same result
    as applying it once.
    """
    if isinstance(spec, dict):
        return {key: normalize_spec(spec[key]) for key in sorted(spec)}
    if isinstance(spec, list):
        return [normalize_spec(item) for item in spec]
    return spec
