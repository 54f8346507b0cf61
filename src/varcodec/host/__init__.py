"""
varcodec.host: the bundled in-memory container.

## Public API
- Variant: immutable tagged container with typed constructors/accessors, ``classify()``,
  child access, and ``is_of_type`` pattern checks.
- VariantDict: read-only key lookups over ``a{sv}`` containers.
- print_variant: GVariant text format rendering.

## Notes
- The codec talks to containers only through ``varcodec.core.typing.VariantLike``; this
  host is one implementation of it.
- No binary layout is defined here; ``new_from_bytes``/``get_data_as_bytes`` cover byte
  arrays only.
"""

from __future__ import annotations

from .text import print_variant
from .variant import Variant, is_object_path, variant_from_mapping
from .vdict import VariantDict

__all__ = [
    "Variant",
    "VariantDict",
    "print_variant",
    "is_object_path",
    "variant_from_mapping",
]
