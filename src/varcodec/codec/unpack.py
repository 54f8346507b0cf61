"""
Self-describing unpacker: container -> native value.

Dispatch is on ``classify()``, the container's own runtime tag, never on an external
signature. Three public depths:

- ``unpack``: one level; children stay containers.
- ``deep_unpack``: recursive, but a ``v`` box is only opened one level.
- ``recursive_unpack``: recursive through every ``v`` box (variant type boundaries are lost).

Special cases under ``a``: ``a{..}`` becomes a ``dict`` (keys are always unpacked, so they
can be hashed), ``ay`` becomes ``bytes``. Everything else that has children becomes a
``list``.
"""

from __future__ import annotations

from typing import Any

from ..config import CodecSettings, resolve_settings
from ..core.constants import (
    ARRAY_CODE,
    DICT_ENTRY_OPEN,
    MAYBE_CODE,
    TUPLE_OPEN,
    VARIANT_CODE,
)
from ..core.errors import InternalConsistencyError
from ..core.grammar import check_depth
from ..core.typing import NativeValue, VariantLike

__all__ = [
    "unpack",
    "deep_unpack",
    "recursive_unpack",
    "unpack_variant",
]

# Scalar extraction per tag.
_BASIC_ACCESSORS: dict[str, str] = {
    "b": "get_boolean",
    "y": "get_byte",
    "n": "get_int16",
    "q": "get_uint16",
    "i": "get_int32",
    "u": "get_uint32",
    "x": "get_int64",
    "t": "get_uint64",
    "h": "get_handle",
    "d": "get_double",
    "s": "get_string",
    "o": "get_string",
    "g": "get_string",
}


def unpack_variant(
    variant: VariantLike,
    deep: bool,
    recursive: bool = False,
    *,
    settings: CodecSettings | None = None,
    depth: int = 0,
) -> NativeValue:
    """
    Convert ``variant`` to a native value.

    Args:
      variant (VariantLike): Container to unpack.
      deep (bool): Unpack children recursively.
      recursive (bool): With ``deep``, also unpack through variant boxes.
      settings (CodecSettings | None): Depth limit.
      depth (int): Current nesting depth.

    Returns:
      NativeValue: Scalar, str, bytes, list, dict, None, or a child container when not deep.

    Raises:
      DepthLimitError: If nesting exceeds ``settings.max_depth``.
      InternalConsistencyError: If ``classify()`` returns an unknown tag.
    """
    s = resolve_settings(settings)
    check_depth(depth, s.max_depth)
    tag = variant.classify()

    accessor = _BASIC_ACCESSORS.get(tag)
    if accessor is not None:
        return getattr(variant, accessor)()

    if tag == VARIANT_CODE:
        inner = variant.get_variant()
        if deep and recursive and isinstance(inner, VariantLike):
            return unpack_variant(inner, deep, recursive, settings=s, depth=depth + 1)
        return inner

    if tag == MAYBE_CODE:
        child = variant.get_maybe()
        if deep and child is not None:
            return unpack_variant(child, deep, recursive, settings=s, depth=depth + 1)
        return child

    if tag == ARRAY_CODE:
        if variant.is_of_type("a{?*}"):
            result: dict[Any, Any] = {}
            for i in range(variant.n_children()):
                # The entry itself is always unpacked; its key always is too, or it could
                # not serve as a dict key.
                entry = unpack_variant(
                    variant.get_child_value(i), deep, recursive, settings=s, depth=depth + 1
                )
                key = entry[0] if deep else unpack_variant(entry[0], True, settings=s, depth=depth + 2)
                result[key] = entry[1]
            return result
        if variant.is_of_type("ay"):
            return bytes(variant.get_data_as_bytes())

    if tag in (ARRAY_CODE, TUPLE_OPEN, DICT_ENTRY_OPEN):
        children = [variant.get_child_value(i) for i in range(variant.n_children())]
        if deep:
            return [
                unpack_variant(child, deep, recursive, settings=s, depth=depth + 1)
                for child in children
            ]
        return children

    raise InternalConsistencyError(
        f"assertion failure: classify() returned {tag!r}, which is not a known type tag"
    )


def unpack(variant: VariantLike, *, settings: CodecSettings | None = None) -> NativeValue:
    """
    Unpack one level.

    Examples:
      >>> from varcodec import pack
      >>> inner = unpack(pack("((ii)s)", [[1, 2], "a"]))
      >>> [type(x).__name__ for x in inner]
      ['Variant', 'Variant']
    """
    return unpack_variant(variant, False, settings=settings)


def deep_unpack(variant: VariantLike, *, settings: CodecSettings | None = None) -> NativeValue:
    """
    Unpack recursively, opening ``v`` boxes by one level only.

    Examples:
      >>> from varcodec import pack
      >>> deep_unpack(pack("((ii)s)", [[1, 2], "a"]))
      [[1, 2], 'a']
    """
    return unpack_variant(variant, True, settings=settings)


def recursive_unpack(variant: VariantLike, *, settings: CodecSettings | None = None) -> NativeValue:
    """
    Unpack recursively through every ``v`` box; variant type information is discarded.

    Examples:
      >>> from varcodec import pack
      >>> recursive_unpack(pack("a{sv}", {"n": 1, "l": ["a", True]}))
      {'n': 1, 'l': ['a', True]}
    """
    return unpack_variant(variant, True, True, settings=settings)
