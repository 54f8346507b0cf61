"""
varcodec.codec: packer, unpacker, and intrinsic type inference.

## Public API
- pack(signature, value) -> Variant
- unpack / deep_unpack / recursive_unpack (container -> native value)
- pack_value / unpack_variant: cursor- and flag-level entry points
- infer_signature: signature a native value packs as inside ``v``

## Import DAG discipline
- Depends on varcodec.core, varcodec.host (constructors only), and varcodec.config.
- The unpacker reads containers through the VariantLike protocol only.
"""

from __future__ import annotations

from .infer import infer_signature
from .pack import byte_blob, pack, pack_value
from .unpack import deep_unpack, recursive_unpack, unpack, unpack_variant

__all__ = [
    "pack",
    "pack_value",
    "byte_blob",
    "unpack",
    "deep_unpack",
    "recursive_unpack",
    "unpack_variant",
    "infer_signature",
]
