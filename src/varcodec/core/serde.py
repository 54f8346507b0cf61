"""
Lightweight JSON serialization/deserialization utilities.

Provides `json_loads` and `json_dumps_canonical` for the command line, where native values go
in and come out as JSON. Unpacked values may contain ``bytes``, which JSON cannot hold; they
are rendered as lists of ints. This module is zero-IO.

Notes:
    - Canonical JSON: sort_keys=True, separators=(",", ":"), ensure_ascii=False.
    - No side effects; stdlib-only.
"""

from __future__ import annotations

import json
from typing import Any

__all__ = [
    "json_loads",
    "json_dumps_canonical",
]


def _default(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return list(bytes(obj))
    # Variants left behind by shallow unpacking are shown in text format.
    if hasattr(obj, "classify") and hasattr(obj, "get_type_string"):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object; bytes-like values become lists of ints.

    Returns:
        str: Canonical JSON string with sort_keys=True, compact separators,
        and ensure_ascii=False.

    Examples:
        >>> json_dumps_canonical({"b": b"a\\x00", "a": 1})
        '{"a":1,"b":[97,0]}'
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=_default
    )


def json_loads(s: str) -> Any:
    """
    Deserialize a JSON string to Python objects using the stdlib json module.

    Args:
        s (str): JSON string to parse.

    Returns:
        Any: Decoded Python object (dict, list, str, int, float, bool, or None).
    """
    return json.loads(s)
