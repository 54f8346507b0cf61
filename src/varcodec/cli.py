from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from .codec.pack import pack
from .codec.unpack import deep_unpack, recursive_unpack
from .config import CodecSettings
from .core.errors import VarcodecError
from .core.grammar import (
    ArrayType,
    DictEntryType,
    MaybeType,
    TupleType,
    TypeNode,
    parse_signature,
)
from .core.serde import json_dumps_canonical, json_loads


def _describe(node: TypeNode, indent: int = 0) -> list[str]:
    """Render a parsed type as an indented tree, one node per line."""
    pad = "  " * indent
    lines = [f"{pad}{type(node).__name__} {node.type_string}"]
    if isinstance(node, (MaybeType, ArrayType)):
        lines.extend(_describe(node.element, indent + 1))
    elif isinstance(node, TupleType):
        for child in node.children:
            lines.extend(_describe(child, indent + 1))
    elif isinstance(node, DictEntryType):
        lines.extend(_describe(node.key, indent + 1))
        lines.extend(_describe(node.value, indent + 1))
    return lines


def _load_value(text: str) -> Any:
    try:
        return json_loads(text)
    except ValueError as exc:
        raise SystemExit(f"VALUE must be JSON: {exc}") from exc


def _settings(args: argparse.Namespace) -> CodecSettings:
    settings = CodecSettings.load(args.config)
    if args.max_depth is not None:
        settings = settings.override(max_depth=args.max_depth)
    return settings


def _common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=str, default=None, help="TOML config (default: varcodec.toml / pyproject.toml).")
    p.add_argument("--max-depth", type=int, default=None, help="Override the maximum nesting depth.")


def _cmd_parse(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="parse", description="Parse a signature and print its type tree.")
    p.add_argument("signature", help="Type signature holding one complete type.")
    _common_args(p)
    args = p.parse_args(argv)

    node = parse_signature(args.signature, max_depth=_settings(args).max_depth)
    print("\n".join(_describe(node)))
    return 0


def _cmd_pack(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="pack", description="Pack a JSON value and print it in text format.")
    p.add_argument("signature", help="Type signature holding one complete type.")
    p.add_argument("value", help="Value as JSON.")
    p.add_argument("--annotate", action="store_true", help="Annotate types in the output.")
    _common_args(p)
    args = p.parse_args(argv)

    variant = pack(args.signature, _load_value(args.value), settings=_settings(args))
    print(variant.print(type_annotate=args.annotate))
    return 0


def _cmd_roundtrip(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="roundtrip", description="Pack a JSON value, unpack it again, and print canonical JSON."
    )
    p.add_argument("signature", help="Type signature holding one complete type.")
    p.add_argument("value", help="Value as JSON.")
    p.add_argument(
        "--recursive",
        action="store_true",
        help="Unpack through nested variants too (default stops at the first variant level).",
    )
    _common_args(p)
    args = p.parse_args(argv)

    settings = _settings(args)
    variant = pack(args.signature, _load_value(args.value), settings=settings)
    unpack_fn = recursive_unpack if args.recursive else deep_unpack
    print(json_dumps_canonical(unpack_fn(variant, settings=settings)))
    return 0


_COMMANDS = {
    "parse": _cmd_parse,
    "pack": _cmd_pack,
    "roundtrip": _cmd_roundtrip,
}


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="varcodec", description="Signature-driven variant codec utilities.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("parse", help="Parse a signature.")
    sub.add_parser("pack", help="Pack a JSON value against a signature.")
    sub.add_parser("roundtrip", help="Pack then unpack a JSON value.")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    if argv[0] == "--debug":
        logging.basicConfig(level=logging.DEBUG)
        argv = argv[1:]
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    handler = _COMMANDS.get(cmd)
    if handler is None:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        raise SystemExit(2)
    try:
        code = handler(rest)
    except VarcodecError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        code = 2
    raise SystemExit(code)


if __name__ == "__main__":
    main()
