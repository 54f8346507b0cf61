from __future__ import annotations

import json

import pytest

from varcodec.cli import main


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VARCODEC_MAX_DEPTH", raising=False)
    monkeypatch.delenv("VARCODEC_TEXT_ENCODING", raising=False)


def test_parse_prints_type_tree(capsys) -> None:
    assert _run(["parse", "a{sv}"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "ArrayType a{sv}",
        "  DictEntryType {sv}",
        "    BasicType s",
        "    VariantType v",
    ]


def test_pack_prints_text_format(capsys) -> None:
    assert _run(["pack", "(sv)", '["a", 5]']) == 0
    assert capsys.readouterr().out.strip() == "('a', <int64 5>)"


def test_pack_annotate(capsys) -> None:
    assert _run(["pack", "ms", "null", "--annotate"]) == 0
    assert capsys.readouterr().out.strip() == "@ms nothing"


def test_roundtrip_prints_canonical_json(capsys) -> None:
    assert _run(["roundtrip", "a{sv}", '{"b": [1, "x"], "a": 1}', "--recursive"]) == 0
    assert json.loads(capsys.readouterr().out) == {"a": 1, "b": [1, "x"]}


def test_codec_errors_exit_with_code_2(capsys) -> None:
    assert _run(["parse", "(i"]) == 2
    assert capsys.readouterr().err.startswith("[ERROR]")
    assert _run(["pack", "(is)", "[1]"]) == 2


def test_max_depth_override(capsys) -> None:
    assert _run(["parse", "aaai", "--max-depth", "2"]) == 2
    assert "[ERROR]" in capsys.readouterr().err


def test_unknown_command(capsys) -> None:
    assert _run(["frobnicate"]) == 2
    assert "Unknown command: frobnicate" in capsys.readouterr().err


def test_no_arguments_prints_help(capsys) -> None:
    main([])
    assert "usage" in capsys.readouterr().out.lower()


def test_out_of_range_double_exits_with_code_2(capsys) -> None:
    assert _run(["pack", "d", "1" + "0" * 400]) == 2
    assert capsys.readouterr().err.startswith("[ERROR]")
