"""
Lightweight typing aliases and the container protocol used by the codec.

Provides the VariantLike protocol, the structural interface the unpacker relies on, so that
any host container (the bundled ``varcodec.host.Variant`` or a foreign binding) can be
unpacked. This module contains no runtime logic and is zero-IO.

Notes:
    - The protocol is runtime-checkable for convenience; ``isinstance`` only checks method
      presence, not signatures.
    - Keep the surface small and stable to avoid churn in dependents.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

__all__ = [
    "VariantLike",
    "NativeValue",
]

# Anything pack() accepts or unpack() returns. Kept intentionally broad.
NativeValue = Any


@runtime_checkable
class VariantLike(Protocol):
    def classify(self) -> str: ...

    def get_type_string(self) -> str: ...

    def is_of_type(self, pattern: str) -> bool: ...

    def n_children(self) -> int: ...

    def get_child_value(self, index: int) -> VariantLike: ...

    def get_boolean(self) -> bool: ...

    def get_byte(self) -> int: ...

    def get_int16(self) -> int: ...

    def get_uint16(self) -> int: ...

    def get_int32(self) -> int: ...

    def get_uint32(self) -> int: ...

    def get_int64(self) -> int: ...

    def get_uint64(self) -> int: ...

    def get_handle(self) -> int: ...

    def get_double(self) -> float: ...

    def get_string(self) -> str: ...

    def get_variant(self) -> VariantLike: ...

    def get_maybe(self) -> VariantLike | None: ...

    def get_data_as_bytes(self) -> bytes: ...
