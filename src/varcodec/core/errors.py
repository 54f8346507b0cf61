"""
Core exception types raised by signature parsing, packing, and unpacking.

Provides typed exceptions for codec failures:
- GrammarError for malformed signatures and type patterns.
- VariantTypeError for native values whose shape does not match the declared type.
- UnsupportedValueError for values a leaf constructor cannot encode.
- ValueRangeError for integral values outside a type's range and invalid string-like values.
- DepthLimitError for nesting deeper than the configured maximum.
- InternalConsistencyError for containers reporting a tag the unpacker does not know.
- ConfigError for invalid codec settings.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - InternalConsistencyError deliberately does not derive from VarcodecError: it signals a
      corrupt or foreign container, not a caller mistake, and should not be caught and retried.

Examples:
    Catch a malformed signature.

    >>> from varcodec.core.errors import GrammarError
    >>> from varcodec.core.grammar import parse_signature
    >>> try:
    ...     parse_signature("(ii")
    ... except GrammarError as e:
    ...     msg = str(e)
    >>> ")" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "VarcodecError",
    "GrammarError",
    "VariantTypeError",
    "UnsupportedValueError",
    "ValueRangeError",
    "DepthLimitError",
    "InternalConsistencyError",
    "ConfigError",
]


class VarcodecError(Exception):
    """Base class for recoverable codec errors."""


class GrammarError(VarcodecError, ValueError):
    """Malformed signature (unbalanced brackets, non-simple key, unknown character, etc.)."""


class VariantTypeError(VarcodecError, TypeError):
    """Native value shape does not match the declared type (arity, sequence, mapping)."""


class UnsupportedValueError(VariantTypeError):
    """Value kind cannot be encoded for the requested leaf type."""


class ValueRangeError(VarcodecError, ValueError):
    """Value has the right kind but is outside what the type can hold."""


class DepthLimitError(VarcodecError, RecursionError):
    """Signature or container nesting exceeds the configured maximum depth."""


class InternalConsistencyError(AssertionError):
    """Container reported a runtime tag outside the known tag set."""


class ConfigError(VarcodecError, ValueError):
    """Invalid or unsupported codec configuration."""
