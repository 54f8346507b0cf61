"""
Signature grammar, type nodes, and the recursive-descent recognizer.

Defines the type codes of the signature alphabet, the immutable TypeNode union that a parsed
signature reduces to, the SignatureCursor shared by recursive parse and pack calls, and the
structural matcher used by the host for ``is_of_type`` checks.

Responsibilities
- Expose the authoritative EBNF (``signature.ebnf``) and keep TypeCode in sync with it.
- Recognize exactly one complete type per ``read_one`` call, consuming only its characters.
- Reject malformed signatures with GrammarError and overly deep ones with DepthLimitError.
- Match concrete types against patterns containing the wildcards ``*``, ``?`` and ``r``.

Grammar summary
---------------
| Code      | Meaning                              | Node
|-----------|--------------------------------------|------------------------------
| b y n q i | boolean, byte, int16, uint16, int32  | BasicType
| u x t h d | uint32, int64, uint64, handle, double| BasicType
| s o g     | string, object path, signature       | BasicType
| v         | dynamically typed variant            | VariantType
| m<T>      | optional value of T                  | MaybeType
| a<T>      | homogeneous array of T               | ArrayType
| (<T>*)    | heterogeneous tuple                  | TupleType
| {<B><T>}  | dictionary entry, B basic            | DictEntryType
| * ? r     | pattern wildcards                    | WildcardType

Cursor discipline
-----------------
Every recursive call receives the same SignatureCursor and advances it past exactly the one
complete type it handles. A failing call raises before consuming anything past the offending
character, so callers never observe a half-consumed sibling.

Examples
--------
>>> from varcodec.core.grammar import parse_signature, SignatureCursor, read_one, type_matches
>>> parse_signature("a{sv}").type_string
'a{sv}'
>>> cursor = SignatureCursor("ias")
>>> read_one(cursor).type_string, cursor.remaining
('i', 'as')
>>> type_matches("a{sv}", "a{?*}")
True

Tags
----
grammar, signature, recursive-descent, ebnf, patterns
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final, Union

from .constants import (
    ARRAY_CODE,
    BASIC_CODES,
    BASIC_TYPES,
    DEFAULT_MAX_DEPTH,
    DICT_ENTRY_CLOSE,
    DICT_ENTRY_OPEN,
    MAYBE_CODE,
    TUPLE_CLOSE,
    TUPLE_OPEN,
    VARIANT_CODE,
)
from .errors import DepthLimitError, GrammarError

__all__ = [
    "TypeCode",
    "EBNF_GRAMMAR",
    "GrammarProduction",
    "ParsedGrammar",
    "PARSED_GRAMMAR",
    # nodes
    "TypeNode",
    "BasicType",
    "VariantType",
    "MaybeType",
    "ArrayType",
    "TupleType",
    "DictEntryType",
    "WildcardType",
    "AnyTypeNode",
    # recognizer
    "SignatureCursor",
    "read_one",
    "parse_signature",
    "parse_signatures",
    "parse_pattern",
    "is_valid_signature",
    "type_matches",
    "check_depth",
]

# Canonical grammar file next to this module
_EBNF_PATH = Path(__file__).with_name("signature.ebnf")


def _load_ebnf_text() -> str:
    # Return the canonical EBNF text (no normalization).
    return _EBNF_PATH.read_text(encoding="utf-8")


EBNF_GRAMMAR: Final[str] = _load_ebnf_text()


@dataclass(slots=True, frozen=True)
class GrammarProduction:
    """Parsed production with convenient accessors."""

    name: str
    expression: str
    alternatives: tuple[str, ...]
    leading_terminals: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class ParsedGrammar:
    """Container for parsed grammar productions."""

    productions: dict[str, GrammarProduction]

    def production(self, name: str) -> GrammarProduction:
        try:
            return self.productions[name]
        except KeyError as exc:
            raise KeyError(f"Unknown grammar production: {name}") from exc

    def terminals(self, name: str) -> tuple[str, ...]:
        return self.production(name).leading_terminals

    @classmethod
    def from_text(cls, text: str) -> ParsedGrammar:
        stripped = _strip_ebnf_comments(text)
        productions: dict[str, GrammarProduction] = {}
        for match in _RULE_RE.finditer(stripped):
            rule_name = match.group(1)
            expression = match.group(2).strip()
            alternatives = _split_alternatives(expression)
            leading = tuple(
                literal
                for literal in (_first_literal(part) for part in alternatives)
                if literal is not None
            )
            productions[rule_name] = GrammarProduction(
                name=rule_name,
                expression=expression,
                alternatives=alternatives,
                leading_terminals=_dedupe_preserving_order(leading),
            )
        return cls(productions=productions)


_COMMENT_RE = re.compile(r"\(\*.*?\*\)", re.DOTALL)
_RULE_RE = re.compile(r"(?ms)^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*;")
_LITERAL_RE = re.compile(r"[\"']([^\"']+)[\"']")


def _strip_ebnf_comments(text: str) -> str:
    return _COMMENT_RE.sub(" ", text)


def _split_alternatives(expression: str) -> tuple[str, ...]:
    parts: list[str] = []
    buffer: list[str] = []
    depth = 0
    quote: str | None = None
    i = 0
    while i < len(expression):
        ch = expression[i]
        if quote is not None:
            buffer.append(ch)
            if ch == quote:
                quote = None
            i += 1
            continue
        if ch in ('"', "'"):
            quote = ch
            buffer.append(ch)
        elif ch in "([{":
            depth += 1
            buffer.append(ch)
        elif ch in ")]}":
            depth = max(0, depth - 1)
            buffer.append(ch)
        elif ch == "|" and depth == 0:
            part = "".join(buffer).strip()
            if part:
                parts.append(part)
            buffer = []
        else:
            buffer.append(ch)
        i += 1
    tail = "".join(buffer).strip()
    if tail:
        parts.append(tail)
    return tuple(parts)


def _first_literal(alt: str) -> str | None:
    match = _LITERAL_RE.search(alt)
    return match.group(1) if match else None


def _dedupe_preserving_order(items: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return tuple(ordered)


# ============================================================================
# TYPE CODES
# ============================================================================


class TypeCode(Enum):
    """
    Leading character of every complete type.

    Serialized values are the single characters that appear in signatures and that a
    container's ``classify()`` returns.
    """

    BOOLEAN = "b"
    BYTE = "y"
    INT16 = "n"
    UINT16 = "q"
    INT32 = "i"
    UINT32 = "u"
    INT64 = "x"
    UINT64 = "t"
    HANDLE = "h"
    DOUBLE = "d"
    STRING = "s"
    OBJECT_PATH = "o"
    SIGNATURE = "g"
    VARIANT = "v"
    MAYBE = "m"
    ARRAY = "a"
    TUPLE = "("
    DICT_ENTRY = "{"

    @property
    def is_basic(self) -> bool:
        return self.value in BASIC_CODES


# ============================================================================
# TYPE NODES
# ============================================================================


class TypeNode:
    """Base for parsed types; subclasses render back to signature text."""

    __slots__ = ()

    @property
    def type_string(self) -> str:  # pragma: no cover - overridden
        raise NotImplementedError

    @property
    def is_basic(self) -> bool:
        return False

    @property
    def is_definite(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.type_string


@dataclass(slots=True, frozen=True)
class BasicType(TypeNode):
    code: str

    @property
    def type_string(self) -> str:
        return self.code

    @property
    def is_basic(self) -> bool:
        return True


@dataclass(slots=True, frozen=True)
class VariantType(TypeNode):
    @property
    def type_string(self) -> str:
        return VARIANT_CODE


@dataclass(slots=True, frozen=True)
class MaybeType(TypeNode):
    element: TypeNode

    @property
    def type_string(self) -> str:
        return MAYBE_CODE + self.element.type_string

    @property
    def is_definite(self) -> bool:
        return self.element.is_definite


@dataclass(slots=True, frozen=True)
class ArrayType(TypeNode):
    element: TypeNode

    @property
    def type_string(self) -> str:
        return ARRAY_CODE + self.element.type_string

    @property
    def is_definite(self) -> bool:
        return self.element.is_definite


@dataclass(slots=True, frozen=True)
class TupleType(TypeNode):
    children: tuple[TypeNode, ...] = ()

    @property
    def type_string(self) -> str:
        return TUPLE_OPEN + "".join(c.type_string for c in self.children) + TUPLE_CLOSE

    @property
    def is_definite(self) -> bool:
        return all(c.is_definite for c in self.children)


@dataclass(slots=True, frozen=True)
class DictEntryType(TypeNode):
    key: TypeNode
    value: TypeNode

    @property
    def type_string(self) -> str:
        return DICT_ENTRY_OPEN + self.key.type_string + self.value.type_string + DICT_ENTRY_CLOSE

    @property
    def is_definite(self) -> bool:
        return self.key.is_definite and self.value.is_definite


@dataclass(slots=True, frozen=True)
class WildcardType(TypeNode):
    """Pattern-only node: ``*`` any type, ``?`` any basic type, ``r`` any tuple."""

    code: str

    @property
    def type_string(self) -> str:
        return self.code

    @property
    def is_basic(self) -> bool:
        return self.code == "?"

    @property
    def is_definite(self) -> bool:
        return False


AnyTypeNode = Union[
    BasicType, VariantType, MaybeType, ArrayType, TupleType, DictEntryType, WildcardType
]


# ============================================================================
# CURSOR AND RECOGNIZER
# ============================================================================


class SignatureCursor:
    """
    Mutable, left-to-right view over a signature string.

    One cursor is shared by a whole recursive parse or pack. Each call advances it past the
    characters it consumed, so the caller always sees the position right after the last
    complete type.

    Examples:
        >>> c = SignatureCursor("(ii)s")
        >>> c.pop(), c.peek(), c.remaining
        ('(', 'i', 'ii)s')
    """

    __slots__ = ("_text", "_pos")

    def __init__(self, signature: str, position: int = 0) -> None:
        if not isinstance(signature, str):
            raise GrammarError(f"signature must be a str (got {type(signature).__name__})")
        self._text = signature
        self._pos = position

    @property
    def signature(self) -> str:
        return self._text

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> str:
        return self._text[self._pos :]

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._text)

    def peek(self) -> str | None:
        """Return the next character without consuming it, or None at the end."""
        if self.exhausted:
            return None
        return self._text[self._pos]

    def pop(self) -> str:
        """Consume and return the next character; GrammarError at the end."""
        if self.exhausted:
            raise GrammarError(f"invalid signature {self._text!r}: unexpected end of signature")
        ch = self._text[self._pos]
        self._pos += 1
        return ch

    def fork(self) -> SignatureCursor:
        """Independent cursor at the same position."""
        return SignatureCursor(self._text, self._pos)

    def __len__(self) -> int:
        return len(self._text) - self._pos

    def __repr__(self) -> str:
        return f"SignatureCursor({self._text!r}, position={self._pos})"


def check_depth(depth: int, max_depth: int) -> None:
    """Raise DepthLimitError when ``depth`` exceeds ``max_depth``."""
    if depth > max_depth:
        raise DepthLimitError(f"nesting depth exceeds the maximum of {max_depth}")


def read_one(
    cursor: SignatureCursor,
    force_simple: bool = False,
    *,
    allow_wildcards: bool = False,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> TypeNode:
    """
    Consume exactly one complete type from ``cursor`` and return its node.

    Args:
      cursor (SignatureCursor): Shared cursor, advanced past the type on success.
      force_simple (bool): Require a basic type (dictionary entry keys).
      allow_wildcards (bool): Accept the pattern codes ``*``, ``?`` and ``r``.
      depth (int): Current nesting depth.
      max_depth (int): Maximum nesting depth.

    Returns:
      TypeNode: Parsed node.

    Raises:
      GrammarError: On any malformed input, naming the offending character or the
        expected closer.
      DepthLimitError: If nesting exceeds ``max_depth``.
    """
    check_depth(depth, max_depth)
    char = cursor.pop()
    simple = char in BASIC_CODES or (allow_wildcards and char == "?")

    if force_simple and not simple:
        raise GrammarError(
            f"invalid signature {cursor.signature!r}: a simple type was expected (got {char!r})"
        )
    if simple:
        return WildcardType(char) if char == "?" else BasicType(char)
    if char == VARIANT_CODE:
        return VariantType()
    if allow_wildcards and char in ("*", "r"):
        return WildcardType(char)

    if char in (MAYBE_CODE, ARRAY_CODE):
        if cursor.exhausted:
            raise GrammarError(
                f"invalid signature {cursor.signature!r}: {char!r} must be followed by a complete type"
            )
        element = read_one(
            cursor, False, allow_wildcards=allow_wildcards, depth=depth + 1, max_depth=max_depth
        )
        return MaybeType(element) if char == MAYBE_CODE else ArrayType(element)

    if char == DICT_ENTRY_OPEN:
        if cursor.exhausted:
            raise GrammarError(
                f"invalid signature {cursor.signature!r} for type DICT_ENTRY (expected a key type)"
            )
        key = read_one(
            cursor, True, allow_wildcards=allow_wildcards, depth=depth + 1, max_depth=max_depth
        )
        if cursor.exhausted:
            raise GrammarError(
                f"invalid signature {cursor.signature!r} for type DICT_ENTRY (expected a value type)"
            )
        value = read_one(
            cursor, False, allow_wildcards=allow_wildcards, depth=depth + 1, max_depth=max_depth
        )
        if cursor.peek() != DICT_ENTRY_CLOSE:
            raise GrammarError(
                f"invalid signature {cursor.signature!r} for type DICT_ENTRY (expected \"}}\")"
            )
        cursor.pop()
        return DictEntryType(key, value)

    if char == TUPLE_OPEN:
        children: list[TypeNode] = []
        while True:
            nxt = cursor.peek()
            if nxt is None:
                raise GrammarError(
                    f"invalid signature {cursor.signature!r} for type TUPLE (expected \")\")"
                )
            if nxt == TUPLE_CLOSE:
                cursor.pop()
                return TupleType(tuple(children))
            children.append(
                read_one(
                    cursor,
                    False,
                    allow_wildcards=allow_wildcards,
                    depth=depth + 1,
                    max_depth=max_depth,
                )
            )

    raise GrammarError(f"invalid signature {cursor.signature!r}: {char!r} is not a valid type")


def parse_signature(signature: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> TypeNode:
    """
    Parse a signature holding exactly one complete type.

    Raises:
      GrammarError: If the signature is empty, malformed, or holds more than one type.

    Examples:
      >>> parse_signature("(sa{sv})")
      TupleType(children=(BasicType(code='s'), ArrayType(element=DictEntryType(key=BasicType(code='s'), value=VariantType()))))
    """
    if isinstance(signature, str) and not signature:
        raise GrammarError("signature cannot be empty")
    cursor = SignatureCursor(signature)
    node = read_one(cursor, max_depth=max_depth)
    if not cursor.exhausted:
        raise GrammarError(
            f"invalid signature {signature!r} (more than one single complete type)"
        )
    return node


def parse_signatures(signature: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> tuple[TypeNode, ...]:
    """Parse zero or more concatenated complete types (the value space of ``g``)."""
    cursor = SignatureCursor(signature)
    nodes: list[TypeNode] = []
    while not cursor.exhausted:
        nodes.append(read_one(cursor, max_depth=max_depth))
    return tuple(nodes)


def parse_pattern(pattern: str, *, max_depth: int = DEFAULT_MAX_DEPTH) -> TypeNode:
    """Parse one complete type that may contain the wildcards ``*``, ``?`` and ``r``."""
    if isinstance(pattern, str) and not pattern:
        raise GrammarError("type pattern cannot be empty")
    cursor = SignatureCursor(pattern)
    node = read_one(cursor, allow_wildcards=True, max_depth=max_depth)
    if not cursor.exhausted:
        raise GrammarError(f"invalid type pattern {pattern!r} (more than one single complete type)")
    return node


def is_valid_signature(signature: str, *, single: bool = True) -> bool:
    """
    Return whether ``signature`` parses; ``single`` requires exactly one complete type.

    Examples:
      >>> is_valid_signature("a{sv}"), is_valid_signature("{vs}"), is_valid_signature("", single=False)
      (True, False, True)
    """
    try:
        if single:
            parse_signature(signature)
        else:
            parse_signatures(signature)
    except (GrammarError, DepthLimitError):
        return False
    return True


def _matches(node: TypeNode, pattern: TypeNode) -> bool:
    if isinstance(pattern, WildcardType):
        if pattern.code == "*":
            return True
        if pattern.code == "?":
            return isinstance(node, BasicType)
        return isinstance(node, TupleType)
    if type(node) is not type(pattern):
        return False
    if isinstance(node, BasicType):
        return node.code == pattern.code  # type: ignore[attr-defined]
    if isinstance(node, (MaybeType, ArrayType)):
        return _matches(node.element, pattern.element)  # type: ignore[attr-defined]
    if isinstance(node, TupleType):
        others = pattern.children  # type: ignore[attr-defined]
        return len(node.children) == len(others) and all(
            _matches(c, p) for c, p in zip(node.children, others)
        )
    if isinstance(node, DictEntryType):
        return _matches(node.key, pattern.key) and _matches(  # type: ignore[attr-defined]
            node.value, pattern.value  # type: ignore[attr-defined]
        )
    return True


def type_matches(
    type_: str | TypeNode, pattern: str | TypeNode, *, max_depth: int = DEFAULT_MAX_DEPTH
) -> bool:
    """
    Structural "is of type" check of a definite type against a pattern.

    Args:
      type_ (str | TypeNode): Definite type (signature text or parsed node).
      pattern (str | TypeNode): Pattern, possibly containing wildcards.
      max_depth (int): Nesting limit used when either side is given as text.

    Returns:
      bool: True when every position of ``type_`` is covered by ``pattern``.
    """
    node = parse_signature(type_, max_depth=max_depth) if isinstance(type_, str) else type_
    pat = parse_pattern(pattern, max_depth=max_depth) if isinstance(pattern, str) else pattern
    return _matches(node, pat)


def _assert_production_matches(grammar: ParsedGrammar, rule_name: str, expected: Iterable[str]) -> None:
    actual = list(grammar.terminals(rule_name))
    wanted = list(expected)
    if actual != wanted:
        missing = sorted(set(wanted) - set(actual))
        extra = sorted(set(actual) - set(wanted))
        issues = []
        if missing:
            issues.append(f"missing {missing}")
        if extra:
            issues.append(f"unexpected {extra}")
        if not issues:
            issues.append("ordering differs")
        raise ValueError(f"Grammar production {rule_name!r} out of sync: " + "; ".join(issues))


PARSED_GRAMMAR: Final[ParsedGrammar] = ParsedGrammar.from_text(EBNF_GRAMMAR)
_assert_production_matches(PARSED_GRAMMAR, "basic_type", BASIC_TYPES)
_assert_production_matches(
    PARSED_GRAMMAR, "basic_type", (c.value for c in TypeCode if c.is_basic)
)
