"""
Intrinsic signatures for native values.

When a value is packed against ``v`` without being a container already, it is first packed
against the signature its Python type implies. Dispatch is by ``isinstance`` in table order,
so ``bool`` is checked before ``int``.

| Python type                   | signature
|-------------------------------|----------
| Variant                       | its own type
| bool                          | b
| int                           | x (t above the int64 maximum)
| float                         | d
| str                           | s
| bytes / bytearray / memoryview| ay
| Mapping                       | a{sv}
| list / tuple                  | av
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.constants import MAXINT64
from ..core.errors import UnsupportedValueError
from ..host.variant import Variant

__all__ = ["infer_signature"]


def _integer_signature(value: int) -> str:
    return "t" if value > MAXINT64 else "x"


_INTRINSIC_TYPES: tuple[tuple[type | tuple[type, ...], Any], ...] = (
    (Variant, lambda v: v.type_string),
    (bool, lambda v: "b"),
    (int, _integer_signature),
    (float, lambda v: "d"),
    (str, lambda v: "s"),
    ((bytes, bytearray, memoryview), lambda v: "ay"),
    (Mapping, lambda v: "a{sv}"),
    ((list, tuple), lambda v: "av"),
)


def infer_signature(value: Any) -> str:
    """
    Return the signature ``value`` packs as when it is boxed in a variant.

    Raises:
      UnsupportedValueError: For None and for types without an intrinsic signature.

    Examples:
      >>> infer_signature(True), infer_signature(5), infer_signature(2**64 - 1)
      ('b', 'x', 't')
      >>> infer_signature({"k": [1, "a"]})
      'a{sv}'
    """
    for classinfo, signature_of in _INTRINSIC_TYPES:
        if isinstance(value, classinfo):
            return signature_of(value)
    raise UnsupportedValueError(
        f"cannot infer a type for {type(value).__name__}; pack it explicitly or pass a Variant"
    )
