"""
varcodec: a type-signature-driven codec between native Python values and tagged variants.

## Responsibilities
- Parse the single-character signature grammar (``b y n q i u x t h d s o g v m a ( ) { }``).
- Pack native values into immutable, self-describing containers, consuming exactly one
  complete type per call.
- Unpack containers by their own runtime tag, shallowly, deeply, or through variant boxes.

## Public API
- pack(signature, value) -> Variant
- unpack / deep_unpack / recursive_unpack
- Variant, VariantDict (bundled host container)
- CodecSettings (limits and text encoding; env/TOML loaders)
- Errors: GrammarError, VariantTypeError, UnsupportedValueError, ValueRangeError,
  DepthLimitError, InternalConsistencyError

## Examples
```python
from varcodec import pack, deep_unpack, recursive_unpack
v = pack("a{sv}", {"name": "x", "tags": ["a", "b"]})
recursive_unpack(v)  # {'name': 'x', 'tags': ['a', 'b']}
deep_unpack(pack("(ai(sb))", [[1, 2], ["k", True]]))  # [[1, 2], ['k', True]]
```
"""

from __future__ import annotations

from .codec import deep_unpack, infer_signature, pack, recursive_unpack, unpack
from .config import CodecSettings
from .core.errors import (
    ConfigError,
    DepthLimitError,
    GrammarError,
    InternalConsistencyError,
    UnsupportedValueError,
    ValueRangeError,
    VarcodecError,
    VariantTypeError,
)
from .core.grammar import parse_signature, type_matches
from .host import Variant, VariantDict, print_variant

__version__ = "0.1.0"

__all__ = [
    "pack",
    "unpack",
    "deep_unpack",
    "recursive_unpack",
    "infer_signature",
    "parse_signature",
    "type_matches",
    "Variant",
    "VariantDict",
    "print_variant",
    "CodecSettings",
    "VarcodecError",
    "GrammarError",
    "VariantTypeError",
    "UnsupportedValueError",
    "ValueRangeError",
    "DepthLimitError",
    "InternalConsistencyError",
    "ConfigError",
]
