"""
In-memory host container: an immutable, self-describing tagged value.

Variant plays the role of the external container library. It exposes the per-type
constructors and accessors, ``classify()``, child access, and ``is_of_type`` that the codec
relies on. It keeps Python objects rather than a binary layout: serializing containers to
bytes is out of scope.

Payload conventions
-------------------
| Type          | payload
|---------------|--------------------------------------------------
| basic         | bool / int / float / str
| ``v``         | the inner Variant
| ``m*``        | the child Variant, or None when absent
| ``ay``        | bytes (the blob; children are materialized on demand)
| other ``a*``  | tuple of child Variants
| ``(..)``      | tuple of child Variants
| ``{..}``      | 2-tuple (key Variant, value Variant)

Constructor checks follow the typed-bytes convention: an integral type accepts any value
whose ``int()`` equals the value itself and that lies in range; a double accepts any value
whose ``float()`` equals it. Everything else raises UnsupportedValueError or
ValueRangeError.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from math import isnan
from typing import Any

from ..core.constants import (
    ARRAY_CODE,
    BASIC_CODES,
    DICT_ENTRY_CLOSE,
    DICT_ENTRY_OPEN,
    INTEGER_RANGES,
    MAX_DEPTH_LIMIT,
    MAYBE_CODE,
    STRING_CODES,
    TUPLE_CLOSE,
    TUPLE_OPEN,
    VARIANT_CODE,
)
from ..core.errors import UnsupportedValueError, ValueRangeError, VariantTypeError
from ..core.grammar import TypeNode, is_valid_signature, parse_signature, type_matches

__all__ = [
    "Variant",
    "is_object_path",
    "MAX_SIGNATURE_LENGTH",
]

MAX_SIGNATURE_LENGTH = 255

_OBJECT_PATH_RE = re.compile(r"^/(?:[A-Za-z0-9_]+(?:/[A-Za-z0-9_]+)*)?$")

_INTEGER_NAMES = {
    "y": "byte",
    "n": "int16",
    "q": "uint16",
    "i": "int32",
    "u": "uint32",
    "x": "int64",
    "t": "uint64",
    "h": "handle",
}


def is_object_path(value: str) -> bool:
    """Return whether ``value`` is a valid object path (``/`` or ``/seg/seg``)."""
    return isinstance(value, str) and _OBJECT_PATH_RE.match(value) is not None


def _type_text(child_type: str | TypeNode) -> str:
    # Parsed nodes were already depth-checked by the caller; text gets the loosest bound.
    if isinstance(child_type, str):
        node = parse_signature(child_type, max_depth=MAX_DEPTH_LIMIT)
    else:
        node = child_type
    if not node.is_definite:
        raise VariantTypeError(f"container type must be definite (got {node.type_string!r})")
    return node.type_string


def _check_integral(code: str, value: Any) -> int:
    try:
        as_int = int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise UnsupportedValueError(
            f"cannot encode {type(value).__name__} as {_INTEGER_NAMES[code]}"
        ) from exc
    if as_int != value:
        raise UnsupportedValueError(
            f"{value!r} must be coercible to int without loss of information"
        )
    low, high = INTEGER_RANGES[code]
    if not (low <= as_int <= high):
        raise ValueRangeError(
            f"value is out of range for {_INTEGER_NAMES[code]} ({low}..{high})"
        )
    return as_int


def _require_variant(value: Any, what: str) -> Variant:
    if not isinstance(value, Variant):
        raise UnsupportedValueError(f"{what} must be a Variant (got {type(value).__name__})")
    return value


@dataclass(frozen=True, slots=True, repr=False)
class Variant:
    """
    Immutable tagged container.

    Build instances through the ``new_*`` constructors (or ``Variant.new`` to pack a native
    value against a signature); the dataclass fields are the raw storage.

    Attributes:
        type_string (str): Complete, definite type of the container.
        payload (Any): Storage per the module-level payload table.

    Examples:
        >>> v = Variant.new_tuple([Variant.new_string("a"), Variant.new_int32(5)])
        >>> v.classify(), v.get_type_string(), v.n_children()
        ('(', '(si)', 2)
        >>> str(v)
        "('a', 5)"
    """

    type_string: str
    payload: Any = None

    # ------------------------------------------------------------------
    # Basic constructors
    # ------------------------------------------------------------------

    @classmethod
    def new_boolean(cls, value: Any) -> Variant:
        return cls("b", bool(value))

    @classmethod
    def new_byte(cls, value: Any) -> Variant:
        return cls("y", _check_integral("y", value))

    @classmethod
    def new_int16(cls, value: Any) -> Variant:
        return cls("n", _check_integral("n", value))

    @classmethod
    def new_uint16(cls, value: Any) -> Variant:
        return cls("q", _check_integral("q", value))

    @classmethod
    def new_int32(cls, value: Any) -> Variant:
        return cls("i", _check_integral("i", value))

    @classmethod
    def new_uint32(cls, value: Any) -> Variant:
        return cls("u", _check_integral("u", value))

    @classmethod
    def new_int64(cls, value: Any) -> Variant:
        return cls("x", _check_integral("x", value))

    @classmethod
    def new_uint64(cls, value: Any) -> Variant:
        return cls("t", _check_integral("t", value))

    @classmethod
    def new_handle(cls, value: Any) -> Variant:
        return cls("h", _check_integral("h", value))

    @classmethod
    def new_double(cls, value: Any) -> Variant:
        if isinstance(value, (str, bytes)):
            raise UnsupportedValueError(f"cannot encode {type(value).__name__} as double")
        try:
            coerced = float(value)
        except (TypeError, ValueError) as exc:
            raise UnsupportedValueError(
                f"cannot encode {type(value).__name__} as double"
            ) from exc
        except OverflowError as exc:
            raise ValueRangeError("integer is out of range for double") from exc
        if (not isnan(coerced)) and coerced != value:
            raise UnsupportedValueError(
                f"{value!r} must be coercible to float without loss of information"
            )
        return cls("d", coerced)

    @classmethod
    def new_string(cls, value: Any) -> Variant:
        return cls("s", cls._check_text(value, "string"))

    @classmethod
    def new_object_path(cls, value: Any) -> Variant:
        text = cls._check_text(value, "object path")
        if not is_object_path(text):
            raise ValueRangeError(f"{text!r} is not a valid object path")
        return cls("o", text)

    @classmethod
    def new_signature(cls, value: Any) -> Variant:
        text = cls._check_text(value, "signature")
        if len(text) > MAX_SIGNATURE_LENGTH or not is_valid_signature(text, single=False):
            raise ValueRangeError(f"{text!r} is not a valid signature")
        return cls("g", text)

    @staticmethod
    def _check_text(value: Any, what: str) -> str:
        if not isinstance(value, str):
            raise UnsupportedValueError(f"cannot encode {type(value).__name__} as {what}")
        if "\x00" in value:
            raise ValueRangeError(f"{what} must not contain NUL characters")
        return value

    # ------------------------------------------------------------------
    # Container constructors (children are already packed)
    # ------------------------------------------------------------------

    @classmethod
    def new_variant(cls, value: Any) -> Variant:
        return cls(VARIANT_CODE, _require_variant(value, "variant content"))

    @classmethod
    def new_maybe(cls, child_type: str | TypeNode | None, child: Variant | None) -> Variant:
        """
        Build a maybe container.

        Args:
          child_type (str | TypeNode | None): Element type; required when ``child`` is None.
          child (Variant | None): Present value, or None for an absent maybe.
        """
        if child is None:
            if child_type is None:
                raise VariantTypeError("an absent maybe needs an explicit child type")
            return cls(MAYBE_CODE + _type_text(child_type), None)
        _require_variant(child, "maybe content")
        if child_type is not None and _type_text(child_type) != child.type_string:
            raise VariantTypeError(
                f"maybe child has type {child.type_string!r}, expected {_type_text(child_type)!r}"
            )
        return cls(MAYBE_CODE + child.type_string, child)

    @classmethod
    def new_array(cls, child_type: str | TypeNode | None, children: Iterable[Variant]) -> Variant:
        """
        Build a homogeneous array; ``child_type`` may be None only when there are children.
        """
        items = tuple(_require_variant(c, "array element") for c in children)
        if child_type is None:
            if not items:
                raise VariantTypeError("an empty array needs an explicit child type")
            element = items[0].type_string
        else:
            element = _type_text(child_type)
        for item in items:
            if item.type_string != element:
                raise VariantTypeError(
                    f"array element has type {item.type_string!r}, expected {element!r}"
                )
        if element == "y":
            return cls("ay", bytes(item.payload for item in items))
        return cls(ARRAY_CODE + element, items)

    @classmethod
    def new_strv(cls, strings: Iterable[str]) -> Variant:
        if isinstance(strings, (str, bytes)) or not isinstance(strings, Iterable):
            raise VariantTypeError(
                f"a string vector needs a sequence of str (got {type(strings).__name__})"
            )
        return cls("as", tuple(cls.new_string(s) for s in strings))

    @classmethod
    def new_tuple(cls, children: Iterable[Variant]) -> Variant:
        items = tuple(_require_variant(c, "tuple element") for c in children)
        return cls(TUPLE_OPEN + "".join(i.type_string for i in items) + TUPLE_CLOSE, items)

    @classmethod
    def new_dict_entry(cls, key: Variant, value: Variant) -> Variant:
        _require_variant(key, "dictionary key")
        _require_variant(value, "dictionary value")
        if not key.is_basic:
            raise VariantTypeError(f"dictionary key must be a basic type (got {key.type_string!r})")
        return cls(DICT_ENTRY_OPEN + key.type_string + value.type_string + DICT_ENTRY_CLOSE, (key, value))

    @classmethod
    def new_from_bytes(cls, type_: str | TypeNode, data: Any) -> Variant:
        """
        Build a container from a raw blob. Only byte arrays (``ay``) are supported, since this
        host does not define a binary layout for other types.
        """
        text = _type_text(type_)
        if text != "ay":
            raise UnsupportedValueError(f"cannot build {text!r} from raw bytes")
        try:
            blob = bytes(data)
        except (TypeError, ValueError) as exc:
            raise UnsupportedValueError(
                f"cannot use {type(data).__name__} as a byte sequence"
            ) from exc
        return cls("ay", blob)

    # ------------------------------------------------------------------
    # Packing / unpacking conveniences
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, signature: str, value: Any, *, settings: Any = None) -> Variant:
        """Pack ``value`` against ``signature`` (see ``varcodec.codec.pack``)."""
        from ..codec.pack import pack

        return pack(signature, value, settings=settings)

    def unpack(self) -> Any:
        from ..codec.unpack import unpack

        return unpack(self)

    def deep_unpack(self) -> Any:
        from ..codec.unpack import deep_unpack

        return deep_unpack(self)

    def recursive_unpack(self) -> Any:
        from ..codec.unpack import recursive_unpack

        return recursive_unpack(self)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def classify(self) -> str:
        return self.type_string[0]

    def get_type_string(self) -> str:
        return self.type_string

    @property
    def is_basic(self) -> bool:
        return self.type_string in BASIC_CODES

    @property
    def is_container(self) -> bool:
        return not self.is_basic

    def is_of_type(self, pattern: str | TypeNode) -> bool:
        return type_matches(self.type_string, pattern, max_depth=MAX_DEPTH_LIMIT)

    def n_children(self) -> int:
        code = self.classify()
        if code == VARIANT_CODE:
            return 1
        if code == MAYBE_CODE:
            return 0 if self.payload is None else 1
        if code in (ARRAY_CODE, TUPLE_OPEN, DICT_ENTRY_OPEN):
            return len(self.payload)
        raise VariantTypeError(f"a value of type {self.type_string!r} has no children")

    def get_child_value(self, index: int) -> Variant:
        count = self.n_children()
        if not (0 <= index < count):
            raise IndexError(f"child index {index} out of range for {count} children")
        code = self.classify()
        if code in (VARIANT_CODE, MAYBE_CODE):
            return self.payload
        if self.type_string == "ay":
            return Variant("y", self.payload[index])
        return self.payload[index]

    def __iter__(self):
        for i in range(self.n_children()):
            yield self.get_child_value(i)

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------

    def _expect(self, code: str, accessor: str) -> Any:
        if self.type_string != code:
            raise VariantTypeError(f"{accessor}() called on a value of type {self.type_string!r}")
        return self.payload

    def get_boolean(self) -> bool:
        return self._expect("b", "get_boolean")

    def get_byte(self) -> int:
        return self._expect("y", "get_byte")

    def get_int16(self) -> int:
        return self._expect("n", "get_int16")

    def get_uint16(self) -> int:
        return self._expect("q", "get_uint16")

    def get_int32(self) -> int:
        return self._expect("i", "get_int32")

    def get_uint32(self) -> int:
        return self._expect("u", "get_uint32")

    def get_int64(self) -> int:
        return self._expect("x", "get_int64")

    def get_uint64(self) -> int:
        return self._expect("t", "get_uint64")

    def get_handle(self) -> int:
        return self._expect("h", "get_handle")

    def get_double(self) -> float:
        return self._expect("d", "get_double")

    def get_string(self) -> str:
        if self.type_string not in STRING_CODES:
            raise VariantTypeError(f"get_string() called on a value of type {self.type_string!r}")
        return self.payload

    def get_variant(self) -> Variant:
        return self._expect(VARIANT_CODE, "get_variant")

    def get_maybe(self) -> Variant | None:
        if self.classify() != MAYBE_CODE:
            raise VariantTypeError(f"get_maybe() called on a value of type {self.type_string!r}")
        return self.payload

    def get_data_as_bytes(self) -> bytes:
        if self.type_string != "ay":
            raise UnsupportedValueError(
                f"raw data is only available for 'ay' (got {self.type_string!r})"
            )
        return self.payload

    def get_strv(self) -> list[str]:
        if self.type_string != "as":
            raise VariantTypeError(f"get_strv() called on a value of type {self.type_string!r}")
        return [child.payload for child in self.payload]

    def lookup_value(self, key: Any, expected_type: str | None = None) -> Variant | None:
        """
        Find the value stored under ``key`` in an ``a{?*}`` container.

        Returns None when the key is missing or the stored value does not match
        ``expected_type`` (values of ``a{sv}`` are looked up inside their variant box).
        """
        if not self.is_of_type("a{?*}"):
            raise VariantTypeError(f"lookup_value() called on a value of type {self.type_string!r}")
        for entry in self.payload:
            entry_key, entry_value = entry.payload
            if entry_key.payload != key:
                continue
            if entry_value.classify() == VARIANT_CODE and expected_type != VARIANT_CODE:
                entry_value = entry_value.payload
            if expected_type is not None and not entry_value.is_of_type(expected_type):
                return None
            return entry_value
        return None

    # ------------------------------------------------------------------
    # Text forms
    # ------------------------------------------------------------------

    def print(self, type_annotate: bool = False) -> str:
        from .text import print_variant

        return print_variant(self, type_annotate=type_annotate)

    def __str__(self) -> str:
        return self.print()

    def __repr__(self) -> str:
        return f"<Variant {self.type_string!r} {self.print()}>"


def variant_from_mapping(entries: Mapping[str, Variant]) -> Variant:
    """Build an ``a{sv}`` from string keys and already-packed values."""
    children = [
        Variant.new_dict_entry(Variant.new_string(k), Variant.new_variant(v))
        for k, v in entries.items()
    ]
    return Variant.new_array("{sv}", children)


