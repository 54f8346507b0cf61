"""Read-only dictionary view over an ``a{sv}`` container."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from ..core.errors import VariantTypeError
from .variant import Variant

__all__ = ["VariantDict"]


class VariantDict:
    """
    Key lookups on an ``a{sv}`` (or any ``a{s*}``) container.

    Examples:
        >>> from varcodec import pack
        >>> d = VariantDict(pack("a{sv}", {"name": "x", "size": 3}))
        >>> d.lookup("size", "x")
        3
        >>> d.lookup("size", "s") is None
        True
    """

    __slots__ = ("_variant",)

    def __init__(self, variant: Variant) -> None:
        if not isinstance(variant, Variant) or not variant.is_of_type("a{s*}"):
            raise VariantTypeError("VariantDict needs a container of type 'a{s*}'")
        self._variant = variant

    @property
    def variant(self) -> Variant:
        return self._variant

    def lookup_value(self, key: str, variant_type: str | None = None) -> Variant | None:
        return self._variant.lookup_value(key, variant_type)

    def lookup(self, key: str, variant_type: str | None = None, deep: bool = False) -> Any:
        """
        Return the unpacked value stored under ``key``.

        Args:
          key (str): Entry key.
          variant_type (str | None): Expected type; a mismatch yields None.
          deep (bool): Unpack recursively instead of one level.

        Returns:
          Any: Unpacked value, or None if the key is missing or the type does not match.
        """
        from ..codec.unpack import unpack_variant

        value = self.lookup_value(key, variant_type)
        if value is None:
            return None
        return unpack_variant(value, deep)

    def contains(self, key: str) -> bool:
        return self.lookup_value(key) is not None

    __contains__ = contains

    def keys(self) -> list[str]:
        return [entry.get_child_value(0).get_string() for entry in self._variant]

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return self._variant.n_children()
