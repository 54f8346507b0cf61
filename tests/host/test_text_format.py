import pytest

from varcodec import Variant, pack, print_variant
from varcodec.host.text import quote_string


@pytest.mark.parametrize(
    "signature,value,expected",
    [
        ("b", True, "true"),
        ("i", -5, "-5"),
        ("d", 1.5, "1.5"),
        ("s", "hi", "'hi'"),
        ("y", 10, "0x0a"),
        ("(sv)", ["a", Variant.new_int64(5)], "('a', <int64 5>)"),
        ("(i)", [1], "(1,)"),
        ("()", [], "()"),
        ("ai", [1, 2], "[1, 2]"),
        ("a{si}", {"a": 1}, "{'a': 1}"),
        ("a{si}", {}, "{}"),
        ("as", [], "[]"),
        ("ms", None, "nothing"),
        ("ms", "x", "'x'"),
        ("mmi", 5, "just 5"),
        ("ay", "ab", "b'ab'"),
        ("ay", [1, 2], "[byte 0x01, 0x02]"),
        ("ay", b"", "[]"),
        ("{sv}", ["k", 1], "{'k', <int64 1>}"),
    ],
)
def test_plain_rendering(signature: str, value, expected: str) -> None:
    assert print_variant(pack(signature, value)) == expected


@pytest.mark.parametrize(
    "signature,value,expected",
    [
        ("ms", None, "@ms nothing"),
        ("ai", [], "@ai []"),
        ("a{sv}", {}, "@a{sv} {}"),
        ("ay", b"", "@ay []"),
        ("ax", [1, 2], "[int64 1, 2]"),
        ("o", "/a", "objectpath '/a'"),
        ("y", 1, "byte 0x01"),
        ("i", 1, "1"),
    ],
)
def test_annotated_rendering(signature: str, value, expected: str) -> None:
    assert pack(signature, value).print(type_annotate=True) == expected


def test_quote_string_escapes() -> None:
    assert quote_string("it's") == '"it\'s"'
    assert quote_string("a\nb") == "'a\\nb'"
    assert quote_string("'\"") == "'\\'\"'"
    assert quote_string("\x01") == "'\\u0001'"


def test_str_and_repr() -> None:
    v = pack("i", 5)
    assert str(v) == "5"
    assert repr(v) == "<Variant 'i' 5>"
