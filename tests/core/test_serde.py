from varcodec import pack
from varcodec.core.serde import json_dumps_canonical, json_loads


def test_json_dumps_canonical_sorted_and_ascii_policy() -> None:
    obj1 = {"b": 2, "a": 1, "nested": {"y": 2, "x": 1}, "emoji": "🙂"}
    obj2 = {"nested": {"x": 1, "y": 2}, "a": 1, "emoji": "🙂", "b": 2}
    s1 = json_dumps_canonical(obj1)
    assert s1 == json_dumps_canonical(obj2)
    assert "🙂" in s1


def test_bytes_render_as_int_lists() -> None:
    assert json_dumps_canonical({"blob": b"ab\x00"}) == '{"blob":[97,98,0]}'


def test_leftover_containers_render_as_text() -> None:
    assert json_dumps_canonical([pack("i", 5)]) == '["5"]'


def test_serde_roundtrip() -> None:
    obj = {"k": [1, 2, 3], "m": {"n": 4}}
    assert json_loads(json_dumps_canonical(obj)) == obj
