import pytest

from varcodec import deep_unpack, pack, recursive_unpack


@pytest.mark.parametrize(
    "signature,value",
    [
        ("a{si}", {"a": 1, "b": -2}),
        ("(sa{sb}ai)", ["x", {"k": True}, [1, 2]]),
        ("aas", [["a"], [], ["b", "c"]]),
        ("a(ss)", [["k", "v"]]),
        ("mai", [3]),
        ("a{sas}", {"k": ["v"]}),
        ("ay", b"\x00\xff"),
    ],
)
def test_deep_unpack_restores_values(signature: str, value) -> None:
    assert deep_unpack(pack(signature, value)) == value


@pytest.mark.parametrize(
    "value",
    [
        {"n": 1, "s": "x", "f": 1.5, "b": False},
        {"nested": {"inner": [1, [2, "three"]]}},
        {},
    ],
)
def test_vardict_recursive_roundtrip(value) -> None:
    assert recursive_unpack(pack("a{sv}", value)) == value


def test_repacking_unpacked_containers_is_stable() -> None:
    original = pack("(sa{sv})", ["a", {"k": [1, "x"]}])
    assert pack("(sa{sv})", deep_unpack(original)) == original
