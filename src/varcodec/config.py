"""
Configuration for the codec.

Defines CodecSettings, a frozen Pydantic model carrying the runtime limits of the grammar
recognizer, packer, and unpacker. Defaults are sourced from varcodec.core.constants (the
single source of truth).

Source of truth
- varcodec.core.constants.DEFAULT_MAX_DEPTH, DEFAULT_TEXT_ENCODING

Notes
- Precedence when loading: environment > TOML > defaults.
- Every codec entry point takes ``settings=``; None means ``CodecSettings()``.
"""

from __future__ import annotations

import codecs
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .core.constants import DEFAULT_MAX_DEPTH, DEFAULT_TEXT_ENCODING, MAX_DEPTH_LIMIT
from .core.errors import ConfigError

__all__ = [
    "CodecSettings",
    "DEFAULT_SETTINGS",
    "resolve_settings",
]


class CodecSettings(BaseModel):
    """
    Runtime settings for pack/unpack.

    Attributes:
        max_depth (int): Maximum nesting depth of signatures and containers. Deeper input
            raises DepthLimitError instead of exhausting the interpreter stack.
        text_encoding (str): Encoding used when text is packed as a byte array (``ay``).

    Examples:
        >>> CodecSettings(max_depth=16).max_depth
        16
        >>> CodecSettings(text_encoding="latin-1").text_encoding
        'latin-1'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, le=MAX_DEPTH_LIMIT)
    text_encoding: str = DEFAULT_TEXT_ENCODING

    @field_validator("text_encoding", mode="before")
    @classmethod
    def _validate_encoding(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("text_encoding must be a non-empty string")
        try:
            codecs.lookup(v.strip())
        except LookupError as exc:
            raise ValueError(f"unknown text encoding {v!r}") from exc
        return v.strip().lower()

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: CodecSettings, cfg: dict[str, Any] | None) -> CodecSettings:
        """Apply a loose config mapping onto ``base``, returning a new instance."""
        if not isinstance(cfg, dict):
            return base
        known = {k: cfg[k] for k in ("max_depth", "text_encoding") if k in cfg}
        if not known:
            return base
        try:
            return cls.model_validate({**base.model_dump(), **known})
        except ValidationError as exc:
            raise ConfigError(f"invalid codec settings: {exc}") from exc

    def override(self, **changes: Any) -> CodecSettings:
        """Return a validated copy with ``changes`` applied; ConfigError on bad values."""
        return type(self)._apply_mapping(self, changes)

    @classmethod
    def from_env(cls, base: CodecSettings | None = None, prefix: str = "VARCODEC_") -> CodecSettings:
        """
        Build settings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - VARCODEC_MAX_DEPTH
            - VARCODEC_TEXT_ENCODING
        """
        s = base or cls()

        def get(name: str) -> str | None:
            return os.getenv(prefix + name)

        mapping: dict[str, Any] = {}
        v = get("MAX_DEPTH")
        if v:
            try:
                mapping["max_depth"] = int(v)
            except ValueError as exc:
                raise ConfigError(f"{prefix}MAX_DEPTH must be an integer (got {v!r})") from exc
        v = get("TEXT_ENCODING")
        if v:
            mapping["text_encoding"] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> CodecSettings:
        """
        Build settings from a TOML file.

        Search order when `path` is None:
            1) ./varcodec.toml (with either a top-level [codec] table or direct keys)
            2) ./pyproject.toml under [tool.varcodec]

        Returns defaults if no file is present.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "varcodec.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise ConfigError(f"cannot read {p}: {exc}") from exc
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("varcodec") if isinstance(tool, dict) else None
            elif isinstance(data.get("codec"), dict):
                cfg = data["codec"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> CodecSettings:
        """
        Load settings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (varcodec.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        return cls.from_env(base=s)


DEFAULT_SETTINGS = CodecSettings()


def resolve_settings(settings: CodecSettings | None) -> CodecSettings:
    return DEFAULT_SETTINGS if settings is None else settings
