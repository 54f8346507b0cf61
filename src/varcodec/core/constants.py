"""
Signature alphabet and numeric limits.

Defines the type codes understood by the grammar recognizer, the packer, and the unpacker,
together with the integer ranges enforced by the host constructors. This module is zero-IO
and uses only the Python standard library.

Notes:
    - BASIC_TYPES is ordered as the codes are usually listed; membership checks use the
      frozenset BASIC_CODES.
    - WILDCARD_CODES are valid only in type patterns (``is_of_type``), never in signatures
      handed to the packer.
    - DEFAULT_MAX_DEPTH mirrors GLib's maximum variant recursion depth.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "BASIC_TYPES",
    "BASIC_CODES",
    "STRING_CODES",
    "CONTAINER_CODES",
    "WILDCARD_CODES",
    "VARIANT_CODE",
    "MAYBE_CODE",
    "ARRAY_CODE",
    "TUPLE_OPEN",
    "TUPLE_CLOSE",
    "DICT_ENTRY_OPEN",
    "DICT_ENTRY_CLOSE",
    "INTEGER_RANGES",
    "MINBYTE",
    "MAXBYTE",
    "MININT16",
    "MAXINT16",
    "MAXUINT16",
    "MININT32",
    "MAXINT32",
    "MAXUINT32",
    "MININT64",
    "MAXINT64",
    "MAXUINT64",
    "DEFAULT_MAX_DEPTH",
    "MAX_DEPTH_LIMIT",
    "DEFAULT_TEXT_ENCODING",
]

BASIC_TYPES: Final[tuple[str, ...]] = ("b", "y", "n", "q", "i", "u", "x", "t", "h", "d", "s", "o", "g")
BASIC_CODES: Final[frozenset[str]] = frozenset(BASIC_TYPES)

# Codes whose host value is text.
STRING_CODES: Final[frozenset[str]] = frozenset({"s", "o", "g"})

VARIANT_CODE: Final[str] = "v"
MAYBE_CODE: Final[str] = "m"
ARRAY_CODE: Final[str] = "a"
TUPLE_OPEN: Final[str] = "("
TUPLE_CLOSE: Final[str] = ")"
DICT_ENTRY_OPEN: Final[str] = "{"
DICT_ENTRY_CLOSE: Final[str] = "}"

CONTAINER_CODES: Final[frozenset[str]] = frozenset(
    {VARIANT_CODE, MAYBE_CODE, ARRAY_CODE, TUPLE_OPEN, DICT_ENTRY_OPEN}
)

# Pattern-only codes: any type, any basic type, any tuple.
WILDCARD_CODES: Final[frozenset[str]] = frozenset({"*", "?", "r"})

MINBYTE: Final[int] = 0
MAXBYTE: Final[int] = 0xFF
MININT16: Final[int] = -0x8000
MAXINT16: Final[int] = 0x7FFF
MAXUINT16: Final[int] = 0xFFFF
MININT32: Final[int] = -0x8000_0000
MAXINT32: Final[int] = 0x7FFF_FFFF
MAXUINT32: Final[int] = 0xFFFF_FFFF
MININT64: Final[int] = -0x8000_0000_0000_0000
MAXINT64: Final[int] = 0x7FFF_FFFF_FFFF_FFFF
MAXUINT64: Final[int] = 0xFFFF_FFFF_FFFF_FFFF

# Inclusive (min, max) per integral code; handles are 32-bit signed indexes.
INTEGER_RANGES: Final[dict[str, tuple[int, int]]] = {
    "y": (MINBYTE, MAXBYTE),
    "n": (MININT16, MAXINT16),
    "q": (0, MAXUINT16),
    "i": (MININT32, MAXINT32),
    "u": (0, MAXUINT32),
    "x": (MININT64, MAXINT64),
    "t": (0, MAXUINT64),
    "h": (MININT32, MAXINT32),
}

DEFAULT_MAX_DEPTH: Final[int] = 128
# Upper bound accepted for CodecSettings.max_depth; also the ceiling for host re-parses.
MAX_DEPTH_LIMIT: Final[int] = 4096
DEFAULT_TEXT_ENCODING: Final[str] = "utf-8"
