"""
Type-directed packer: native value + signature -> container.

Every ``pack_value`` call consumes exactly one complete type from the shared cursor and
returns one container, recursing for child types. Dispatch is on the leading character,
mirroring the grammar recognizer, but value-aware:

- basic codes go straight to the host constructor, which performs its own checks;
- ``v`` boxes an existing container, or packs a native value against its intrinsic type;
- ``m`` packs a present value against the inner type, or builds an absent maybe whose inner
  type is read from the signature;
- ``a`` parses the element type once, then special-cases ``as`` (string vector), ``ay``
  (byte blob) and ``a{..}`` (mapping), and packs any other sequence element by element
  against a fresh cursor over the parsed element type;
- ``(`` and ``{`` pack successive elements against successive types and require their
  closing bracket.

Raises
- GrammarError for malformed signatures (including ``mv`` packed with None).
- VariantTypeError / UnsupportedValueError for values whose shape or kind does not fit.
- ValueRangeError for out-of-range integers and invalid string-like values.
- DepthLimitError when nesting exceeds ``CodecSettings.max_depth``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable

from ..config import CodecSettings, resolve_settings
from ..core.constants import (
    ARRAY_CODE,
    BASIC_CODES,
    DICT_ENTRY_CLOSE,
    DICT_ENTRY_OPEN,
    MAYBE_CODE,
    TUPLE_CLOSE,
    TUPLE_OPEN,
    VARIANT_CODE,
)
from ..core.errors import (
    GrammarError,
    UnsupportedValueError,
    ValueRangeError,
    VariantTypeError,
)
from ..core.grammar import (
    BasicType,
    DictEntryType,
    SignatureCursor,
    TypeNode,
    VariantType,
    check_depth,
    read_one,
)
from ..host.variant import Variant
from .infer import infer_signature

__all__ = [
    "pack",
    "pack_value",
    "byte_blob",
]

logger = logging.getLogger(__name__)

_BASIC_CONSTRUCTORS: dict[str, Callable[[Any], Variant]] = {
    "b": Variant.new_boolean,
    "y": Variant.new_byte,
    "n": Variant.new_int16,
    "q": Variant.new_uint16,
    "i": Variant.new_int32,
    "u": Variant.new_uint32,
    "x": Variant.new_int64,
    "t": Variant.new_uint64,
    "h": Variant.new_handle,
    "d": Variant.new_double,
    "s": Variant.new_string,
    "o": Variant.new_object_path,
    "g": Variant.new_signature,
}

# Values that are iterable but never stand for an ordered sequence of children.
_NOT_SEQUENCES = (str, bytes, bytearray, memoryview, Mapping, Variant)


def _as_sequence(value: Any, what: str) -> list[Any]:
    if isinstance(value, _NOT_SEQUENCES) or not isinstance(value, Iterable):
        raise VariantTypeError(f"{what} needs an ordered sequence (got {type(value).__name__})")
    return list(value)


def byte_blob(value: Any, encoding: str = "utf-8") -> bytes:
    """
    Convert a native value to the blob stored in an ``ay`` container.

    Text is encoded and gets a trailing NUL unless it already ends with one; any other value
    is taken as raw bytes unchanged.

    Examples:
      >>> byte_blob("ab"), byte_blob("ab\\x00"), byte_blob([97, 98, 0]), byte_blob(b"ab")
      (b'ab\\x00', b'ab\\x00', b'ab\\x00', b'ab')
    """
    if isinstance(value, str):
        try:
            blob = value.encode(encoding)
        except UnicodeEncodeError as exc:
            raise ValueRangeError(f"text cannot be encoded as {encoding}: {exc}") from exc
        if not blob.endswith(b"\x00"):
            blob += b"\x00"
        return blob
    if isinstance(value, (int, Mapping, Variant)) or value is None:
        raise UnsupportedValueError(f"cannot use {type(value).__name__} as a byte sequence")
    try:
        return bytes(value)
    except ValueError as exc:
        raise ValueRangeError(f"byte values must be in range(0, 256): {exc}") from exc
    except TypeError as exc:
        raise UnsupportedValueError(
            f"cannot use {type(value).__name__} as a byte sequence"
        ) from exc


def _missing_tuple_types(cursor: SignatureCursor, settings: CodecSettings, depth: int) -> int:
    """Count complete types left before ``)`` without touching ``cursor``."""
    probe = cursor.fork()
    count = 0
    while probe.peek() != TUPLE_CLOSE:
        if probe.exhausted:
            raise GrammarError(
                f"invalid signature {probe.signature!r} for type TUPLE (expected \")\")"
            )
        read_one(probe, depth=depth, max_depth=settings.max_depth)
        count += 1
    return count


def _box(value: Any, settings: CodecSettings, depth: int) -> Variant:
    if isinstance(value, Variant):
        return value
    signature = infer_signature(value)
    return pack_value(SignatureCursor(signature), value, settings=settings, depth=depth)


def _pack_array(element: TypeNode, value: Any, settings: CodecSettings, depth: int) -> Variant:
    if element == BasicType("s"):
        return Variant.new_strv(_as_sequence(value, "a string array"))
    if element == BasicType("y"):
        return Variant.new_from_bytes("ay", byte_blob(value, settings.text_encoding))

    element_signature = element.type_string
    if isinstance(element, DictEntryType):
        if not isinstance(value, Mapping):
            raise VariantTypeError(
                f"a dictionary {ARRAY_CODE + element_signature!r} needs a mapping "
                f"(got {type(value).__name__})"
            )
        children = [
            pack_value(SignatureCursor(element_signature), (k, v), settings=settings, depth=depth)
            for k, v in value.items()
        ]
    else:
        children = [
            pack_value(SignatureCursor(element_signature), item, settings=settings, depth=depth)
            for item in _as_sequence(value, "an array")
        ]
    return Variant.new_array(element, children)


def pack_value(
    cursor: SignatureCursor,
    value: Any,
    *,
    force_simple: bool = False,
    settings: CodecSettings | None = None,
    depth: int = 0,
) -> Variant:
    """
    Pack ``value`` against the next complete type of ``cursor``.

    Args:
      cursor (SignatureCursor): Shared cursor; advanced past exactly one complete type.
      value (Any): Native value (or a Variant for ``v``).
      force_simple (bool): Require a basic type (dictionary entry keys).
      settings (CodecSettings | None): Limits and text encoding.
      depth (int): Current nesting depth.

    Returns:
      Variant: Container of the consumed type.
    """
    s = resolve_settings(settings)
    check_depth(depth, s.max_depth)
    char = cursor.peek()
    if char is None:
        raise GrammarError(f"invalid signature {cursor.signature!r}: expected a complete type")
    if force_simple and char not in BASIC_CODES:
        raise GrammarError(
            f"invalid signature {cursor.signature!r}: a simple type was expected (got {char!r})"
        )

    if char in BASIC_CODES:
        if isinstance(value, Variant):
            raise UnsupportedValueError(
                f"a Variant can only be packed against 'v' (signature code {char!r})"
            )
        cursor.pop()
        return _BASIC_CONSTRUCTORS[char](value)

    if char == VARIANT_CODE:
        cursor.pop()
        return Variant.new_variant(_box(value, s, depth + 1))

    if char == MAYBE_CODE:
        cursor.pop()
        if value is not None:
            return Variant.new_maybe(None, pack_value(cursor, value, settings=s, depth=depth + 1))
        element = read_one(cursor, depth=depth + 1, max_depth=s.max_depth)
        if isinstance(element, VariantType):
            raise GrammarError(
                f"invalid signature {cursor.signature!r}: an absent maybe of variant carries no "
                "type information; pass a value or specify a concrete type"
            )
        return Variant.new_maybe(element, None)

    if char == ARRAY_CODE:
        cursor.pop()
        element = read_one(cursor, depth=depth + 1, max_depth=s.max_depth)
        return _pack_array(element, value, s, depth + 1)

    if char == TUPLE_OPEN:
        cursor.pop()
        items = _as_sequence(value, "a tuple")
        children: list[Variant] = []
        for item in items:
            nxt = cursor.peek()
            if nxt is None:
                raise GrammarError(
                    f"invalid signature {cursor.signature!r} for type TUPLE (expected \")\")"
                )
            if nxt == TUPLE_CLOSE:
                raise VariantTypeError(
                    f"tuple takes {len(children)} values, got {len(items)}"
                )
            children.append(pack_value(cursor, item, settings=s, depth=depth + 1))
        missing = _missing_tuple_types(cursor, s, depth + 1)
        if missing:
            raise VariantTypeError(
                f"tuple takes {len(children) + missing} values, got {len(items)}"
            )
        cursor.pop()
        return Variant.new_tuple(children)

    if char == DICT_ENTRY_OPEN:
        cursor.pop()
        items = _as_sequence(value, "a dictionary entry")
        if len(items) != 2:
            raise VariantTypeError(
                f"a dictionary entry needs exactly two values (key, value), got {len(items)}"
            )
        key = pack_value(cursor, items[0], force_simple=True, settings=s, depth=depth + 1)
        child = pack_value(cursor, items[1], settings=s, depth=depth + 1)
        if cursor.peek() != DICT_ENTRY_CLOSE:
            raise GrammarError(
                f"invalid signature {cursor.signature!r} for type DICT_ENTRY (expected \"}}\")"
            )
        cursor.pop()
        return Variant.new_dict_entry(key, child)

    raise GrammarError(
        f"invalid signature {cursor.signature!r} (unexpected character {char!r})"
    )


def pack(signature: str, value: Any, *, settings: CodecSettings | None = None) -> Variant:
    """
    Pack ``value`` against a signature holding exactly one complete type.

    Args:
      signature (str): Type signature, e.g. ``"a{sv}"``.
      value (Any): Native value.
      settings (CodecSettings | None): Optional limits and text encoding.

    Returns:
      Variant: Immutable container.

    Raises:
      GrammarError: Empty or malformed signature, or characters left after one type.
      VariantTypeError: Value shape does not match the signature.

    Examples:
      >>> pack("(si)", ["a", 5]).get_type_string()
      '(si)'
      >>> pack("ay", "ab").get_data_as_bytes()
      b'ab\\x00'
    """
    if isinstance(signature, str) and not signature:
        raise GrammarError("signature cannot be empty")
    s = resolve_settings(settings)
    cursor = SignatureCursor(signature)
    result = pack_value(cursor, value, settings=s)
    if not cursor.exhausted:
        raise GrammarError(
            f"invalid signature {signature!r} (more than one single complete type)"
        )
    logger.debug("packed value against %r", signature)
    return result
