"""
GVariant text format printer.

Renders a container the way ``g_variant_print`` does: ``('a', 5)``, ``{'k': <1>}``,
``<int64 5>``, ``b'ab'``, ``@ms nothing``. Output is for logs and the CLI; the codec never
parses it back.
"""

from __future__ import annotations

from ..core.typing import VariantLike

__all__ = ["print_variant", "quote_string"]

# Integral types other than int32 need a prefix to be read back unambiguously.
_TYPE_KEYWORDS = {
    "y": "byte",
    "n": "int16",
    "q": "uint16",
    "u": "uint32",
    "x": "int64",
    "t": "uint64",
    "h": "handle",
    "o": "objectpath",
    "g": "signature",
}

_ESCAPES = {
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def quote_string(text: str) -> str:
    """Quote ``text`` with single quotes, or double quotes when only ``'`` occurs."""
    quote = '"' if ("'" in text and '"' not in text) else "'"
    out = [quote]
    for ch in text:
        if ch == quote:
            out.append("\\" + ch)
        elif ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ch == "\x7f":
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append(quote)
    return "".join(out)


def _is_printable_bytestring(blob: bytes) -> bool:
    if not blob or blob[-1] != 0:
        return False
    body = blob[:-1]
    return all(0x20 <= b < 0x7F for b in body)


def _print_bytes(blob: bytes, type_annotate: bool) -> str:
    if _is_printable_bytestring(blob):
        return "b" + quote_string(blob[:-1].decode("ascii"))
    if not blob:
        return "@ay []" if type_annotate else "[]"
    items = [f"0x{b:02x}" for b in blob]
    items[0] = "byte " + items[0]
    return "[" + ", ".join(items) + "]"


def _print(value: VariantLike, type_annotate: bool) -> str:
    code = value.classify()
    type_string = value.get_type_string()

    if code == "b":
        return "true" if value.get_boolean() else "false"
    if code == "y":
        text = f"0x{value.get_byte():02x}"
        return f"byte {text}" if type_annotate else text
    if code in ("n", "q", "i", "u", "x", "t", "h"):
        number = str(getattr(value, _ACCESSORS[code])())
        if type_annotate and code in _TYPE_KEYWORDS:
            return f"{_TYPE_KEYWORDS[code]} {number}"
        return number
    if code == "d":
        return repr(value.get_double())
    if code in ("s", "o", "g"):
        text = quote_string(value.get_string())
        if type_annotate and code in _TYPE_KEYWORDS:
            return f"{_TYPE_KEYWORDS[code]} {text}"
        return text
    if code == "v":
        return "<" + _print(value.get_variant(), True) + ">"
    if code == "m":
        child = value.get_maybe()
        if child is None:
            return f"@{type_string} nothing" if type_annotate else "nothing"
        inner = _print(child, type_annotate)
        return f"just {inner}" if child.classify() == "m" else inner
    if code == "a":
        if type_string == "ay":
            return _print_bytes(value.get_data_as_bytes(), type_annotate)
        count = value.n_children()
        if count == 0:
            empty = "{}" if type_string.startswith("a{") else "[]"
            return f"@{type_string} {empty}" if type_annotate else empty
        if type_string.startswith("a{"):
            entries = []
            for i in range(count):
                entry = value.get_child_value(i)
                key = _print(entry.get_child_value(0), type_annotate and i == 0)
                val = _print(entry.get_child_value(1), type_annotate and i == 0)
                entries.append(f"{key}: {val}")
            return "{" + ", ".join(entries) + "}"
        # Only the first element carries an annotation; the rest share its type.
        items = [_print(value.get_child_value(i), type_annotate and i == 0) for i in range(count)]
        return "[" + ", ".join(items) + "]"
    if code == "(":
        items = [_print(value.get_child_value(i), type_annotate) for i in range(value.n_children())]
        if len(items) == 1:
            return f"({items[0]},)"
        return "(" + ", ".join(items) + ")"
    if code == "{":
        key = _print(value.get_child_value(0), type_annotate)
        val = _print(value.get_child_value(1), type_annotate)
        return "{" + key + ", " + val + "}"
    return f"<unprintable {type_string!r}>"


_ACCESSORS = {
    "n": "get_int16",
    "q": "get_uint16",
    "i": "get_int32",
    "u": "get_uint32",
    "x": "get_int64",
    "t": "get_uint64",
    "h": "get_handle",
}


def print_variant(value: VariantLike, type_annotate: bool = False) -> str:
    """
    Render ``value`` in GVariant text format.

    Args:
      value (VariantLike): Container to render.
      type_annotate (bool): Prefix values whose type is not obvious from the text.

    Examples:
      >>> from varcodec import pack
      >>> print_variant(pack("(sv)", ["a", pack("x", 5)]))
      "('a', <int64 5>)"
      >>> print_variant(pack("ms", None), type_annotate=True)
      '@ms nothing'
    """
    return _print(value, type_annotate)
