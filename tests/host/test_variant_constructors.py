"""Tests for the bundled `varcodec.host.Variant` container."""

import math

import pytest

from varcodec.core.constants import MAXINT64, MAXUINT64, MININT64
from varcodec.core.errors import UnsupportedValueError, ValueRangeError, VariantTypeError
from varcodec.host import Variant, is_object_path, variant_from_mapping


@pytest.mark.parametrize(
    "ctor,low,high",
    [
        (Variant.new_byte, 0, 255),
        (Variant.new_int16, -32768, 32767),
        (Variant.new_uint16, 0, 65535),
        (Variant.new_int32, -(2**31), 2**31 - 1),
        (Variant.new_uint32, 0, 2**32 - 1),
        (Variant.new_int64, MININT64, MAXINT64),
        (Variant.new_uint64, 0, MAXUINT64),
        (Variant.new_handle, -(2**31), 2**31 - 1),
    ],
)
def test_integer_ranges(ctor, low: int, high: int) -> None:
    assert ctor(low).payload == low
    assert ctor(high).payload == high
    with pytest.raises(ValueRangeError):
        ctor(low - 1)
    with pytest.raises(ValueRangeError):
        ctor(high + 1)


@pytest.mark.parametrize("bad", ["5", 1.5, None, [1], float("nan")])
def test_integers_reject_lossy_or_foreign_values(bad) -> None:
    with pytest.raises(UnsupportedValueError):
        Variant.new_int32(bad)


def test_integral_floats_are_accepted() -> None:
    assert Variant.new_int32(2.0).payload == 2
    assert isinstance(Variant.new_int32(2.0).payload, int)


def test_double_accepts_numbers_and_nan() -> None:
    assert Variant.new_double(3).payload == 3.0
    assert math.isnan(Variant.new_double(float("nan")).payload)
    with pytest.raises(UnsupportedValueError):
        Variant.new_double("1.5")
    with pytest.raises(UnsupportedValueError):
        Variant.new_double(None)


def test_boolean_uses_truth_value() -> None:
    assert Variant.new_boolean(1).payload is True
    assert Variant.new_boolean("").payload is False


def test_string_checks() -> None:
    assert Variant.new_string("héllo").get_string() == "héllo"
    with pytest.raises(UnsupportedValueError):
        Variant.new_string(b"bytes")
    with pytest.raises(ValueRangeError, match="NUL"):
        Variant.new_string("a\x00b")


@pytest.mark.parametrize("path,ok", [("/", True), ("/org/example/Obj_1", True), ("", False), ("/a/", False), ("a/b", False), ("/a//b", False), ("/a-b", False)])
def test_object_paths(path: str, ok: bool) -> None:
    assert is_object_path(path) is ok
    if ok:
        assert Variant.new_object_path(path).classify() == "o"
    else:
        with pytest.raises(ValueRangeError):
            Variant.new_object_path(path)


def test_signature_values() -> None:
    assert Variant.new_signature("").get_string() == ""
    assert Variant.new_signature("isa{sv}").get_string() == "isa{sv}"
    with pytest.raises(ValueRangeError):
        Variant.new_signature("(i")


def test_maybe_requires_type_when_absent() -> None:
    absent = Variant.new_maybe("s", None)
    assert absent.get_type_string() == "ms"
    assert absent.get_maybe() is None
    assert absent.n_children() == 0
    with pytest.raises(VariantTypeError):
        Variant.new_maybe(None, None)
    present = Variant.new_maybe(None, Variant.new_int32(1))
    assert present.get_type_string() == "mi"
    with pytest.raises(VariantTypeError):
        Variant.new_maybe("s", Variant.new_int32(1))


def test_array_children_must_share_type() -> None:
    arr = Variant.new_array("i", [Variant.new_int32(1), Variant.new_int32(2)])
    assert arr.get_type_string() == "ai"
    assert [c.get_int32() for c in arr] == [1, 2]
    with pytest.raises(VariantTypeError):
        Variant.new_array("i", [Variant.new_int32(1), Variant.new_string("x")])
    with pytest.raises(VariantTypeError):
        Variant.new_array(None, [])
    assert Variant.new_array("s", []).n_children() == 0


def test_byte_arrays_are_stored_as_blobs() -> None:
    arr = Variant.new_array("y", [Variant.new_byte(97), Variant.new_byte(0)])
    assert arr.get_data_as_bytes() == b"a\x00"
    assert arr.get_child_value(0) == Variant.new_byte(97)
    assert Variant.new_from_bytes("ay", bytearray(b"xy")) == Variant("ay", b"xy")
    with pytest.raises(UnsupportedValueError):
        Variant.new_from_bytes("ai", b"xy")


def test_dict_entry_key_must_be_basic() -> None:
    entry = Variant.new_dict_entry(Variant.new_string("k"), Variant.new_variant(Variant.new_int32(1)))
    assert entry.get_type_string() == "{sv}"
    with pytest.raises(VariantTypeError):
        Variant.new_dict_entry(Variant.new_variant(Variant.new_int32(1)), Variant.new_int32(1))


def test_variant_content_must_be_a_variant() -> None:
    with pytest.raises(UnsupportedValueError):
        Variant.new_variant(5)


def test_accessors_check_the_tag() -> None:
    v = Variant.new_int32(5)
    assert v.get_int32() == 5
    with pytest.raises(VariantTypeError):
        v.get_int64()
    with pytest.raises(VariantTypeError):
        v.get_string()
    with pytest.raises(VariantTypeError):
        v.n_children()


def test_child_index_bounds() -> None:
    tup = Variant.new_tuple([Variant.new_int32(1)])
    assert tup.get_child_value(0).get_int32() == 1
    with pytest.raises(IndexError):
        tup.get_child_value(1)


def test_variants_are_immutable_and_hashable() -> None:
    v = Variant.new_tuple([Variant.new_string("a"), Variant.new_int32(1)])
    with pytest.raises(AttributeError):
        v.type_string = "(ss)"  # type: ignore[misc]
    same = Variant.new_tuple([Variant.new_string("a"), Variant.new_int32(1)])
    assert v == same
    assert hash(v) == hash(same)
    assert Variant.new_int32(1) != Variant.new_int64(1)


def test_strv() -> None:
    strv = Variant.new_strv(["a", "b"])
    assert strv.get_type_string() == "as"
    assert strv.get_strv() == ["a", "b"]
    with pytest.raises(VariantTypeError):
        Variant.new_strv("ab")
    with pytest.raises(UnsupportedValueError):
        Variant.new_strv(["a", 1])


def test_is_of_type_and_lookup_value() -> None:
    d = Variant.new_array(
        "{sv}",
        [Variant.new_dict_entry(Variant.new_string("n"), Variant.new_variant(Variant.new_int32(7)))],
    )
    assert d.is_of_type("a{?*}")
    assert d.is_of_type("a{sv}")
    assert not d.is_of_type("ay")
    assert d.lookup_value("n") == Variant.new_int32(7)
    assert d.lookup_value("n", "i") == Variant.new_int32(7)
    assert d.lookup_value("n", "s") is None
    assert d.lookup_value("missing") is None


def test_variant_from_mapping_boxes_values() -> None:
    v = variant_from_mapping({"a": Variant.new_int32(1), "b": Variant.new_string("x")})
    assert v.get_type_string() == "a{sv}"
    assert v.lookup_value("a") == Variant.new_int32(1)
    assert v.lookup_value("b", "v").get_variant() == Variant.new_string("x")


def test_double_rejects_integers_beyond_float_range() -> None:
    with pytest.raises(ValueRangeError):
        Variant.new_double(10**400)
    with pytest.raises(ValueRangeError):
        Variant.new_int64(10**5000)


def test_deep_container_types_are_not_capped_by_default_depth() -> None:
    element = Variant.new_array("i", [])
    for _ in range(199):
        element = Variant.new_array(element.type_string, [element])
    assert element.type_string == "a" * 200 + "i"
    assert element.is_of_type("a*")
