from __future__ import annotations

from pathlib import Path

import pytest

from varcodec.config import CodecSettings
from varcodec.core.errors import ConfigError

_ENV_KEYS = ["VARCODEC_MAX_DEPTH", "VARCODEC_TEXT_ENCODING"]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _write_varcodec_toml(tmp: Path, content: str) -> Path:
    p = tmp / "varcodec.toml"
    p.write_text(content)
    return p


def test_codec_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    _write_varcodec_toml(
        tmp_path,
        """
        [codec]
        max_depth = 32
        text_encoding = "latin-1"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("VARCODEC_MAX_DEPTH", "64")

    s = CodecSettings.load()

    assert s.max_depth == 64  # env override
    assert s.text_encoding == "latin-1"  # from TOML


def test_codec_settings_top_level_keys(tmp_path: Path, monkeypatch) -> None:
    _write_varcodec_toml(tmp_path, "max_depth = 16")
    monkeypatch.chdir(tmp_path)

    assert CodecSettings.load().max_depth == 16


def test_codec_settings_from_pyproject(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
        [tool.varcodec]
        text_encoding = "UTF-16"
        """.strip()
    )
    monkeypatch.chdir(tmp_path)

    s = CodecSettings.load()

    assert s.text_encoding == "utf-16"
    assert s.max_depth == 128


def test_codec_settings_defaults_when_no_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    s = CodecSettings.load()

    assert s == CodecSettings()
    assert s.max_depth == 128
    assert s.text_encoding == "utf-8"


def test_explicit_path(tmp_path: Path) -> None:
    cfg = tmp_path / "custom.toml"
    cfg.write_text("[codec]\nmax_depth = 10\n")

    assert CodecSettings.from_toml(cfg).max_depth == 10


@pytest.mark.parametrize(
    "content",
    [
        "[codec]\nmax_depth = 0\n",
        "[codec]\nmax_depth = 5000\n",
        '[codec]\ntext_encoding = "no-such-codec"\n',
        "[codec\n",
    ],
)
def test_invalid_toml_raises_config_error(tmp_path: Path, monkeypatch, content: str) -> None:
    _write_varcodec_toml(tmp_path, content)
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigError):
        CodecSettings.load()


def test_invalid_env_raises_config_error(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("VARCODEC_MAX_DEPTH", "deep")

    with pytest.raises(ConfigError):
        CodecSettings.load()


def test_settings_are_frozen_and_override_validates() -> None:
    s = CodecSettings()
    with pytest.raises(Exception):
        s.max_depth = 3  # type: ignore[misc]
    assert s.override(max_depth=3).max_depth == 3
    with pytest.raises(ConfigError):
        s.override(max_depth=-1)
