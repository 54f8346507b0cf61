"""
Structured log fields carried as an ``a{sv}`` container.

Lets callers attach typed fields to stdlib ``logging`` records the way structured journal
logging does: each field is a string, a byte blob, or an already-built Variant, and the set
travels as one ``a{sv}`` on the record. Formatters and writer callbacks get the fields back
through ``recursive_unpack``.

Examples:
    >>> import logging
    >>> handler = logging.StreamHandler()
    >>> handler.setFormatter(StructuredFieldsFormatter("%(levelname)s %(message)s"))
    >>> log_structured("app", logging.INFO, {"MESSAGE": "ready", "UNIT": "worker"})  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .codec.pack import pack
from .codec.unpack import recursive_unpack
from .core.errors import UnsupportedValueError
from .core.serde import json_dumps_canonical
from .host.variant import Variant

__all__ = [
    "FIELDS_ATTR",
    "pack_log_fields",
    "unpack_log_fields",
    "log_structured",
    "StructuredFieldsFormatter",
    "StructuredFieldsHandler",
]

# LogRecord attribute holding the packed fields.
FIELDS_ATTR = "varcodec_fields"

MESSAGE_FIELD = "MESSAGE"


def pack_log_fields(fields: Mapping[str, Any]) -> Variant:
    """
    Pack log fields into an ``a{sv}`` container.

    Args:
      fields (Mapping[str, Any]): Field name -> str, bytes-like, or Variant.

    Returns:
      Variant: ``a{sv}`` container.

    Raises:
      UnsupportedValueError: For any other field value.
    """
    packed: dict[str, Variant] = {}
    for key, field in fields.items():
        if isinstance(field, (bytes, bytearray, memoryview)):
            packed[key] = pack("ay", bytes(field))
        elif isinstance(field, str):
            packed[key] = Variant.new_string(field)
        elif isinstance(field, Variant):
            packed[key] = field
        else:
            raise UnsupportedValueError(
                f"Unsupported value {field!r}; structured fields support Variant, bytes, and str values"
            )
    return pack("a{sv}", packed)


def unpack_log_fields(variant: Variant) -> dict[str, Any]:
    """Return the fields of an ``a{sv}`` container as native values."""
    return dict(recursive_unpack(variant))


def log_structured(
    domain: str,
    level: int,
    fields: Mapping[str, Any],
    message: str | None = None,
) -> None:
    """
    Emit a record on ``logging.getLogger(domain)`` carrying ``fields`` as an ``a{sv}``.

    Args:
      domain (str): Logger name.
      level (int): Logging level (e.g. ``logging.INFO``).
      fields (Mapping[str, Any]): Structured fields (see ``pack_log_fields``).
      message (str | None): Record message; defaults to the ``MESSAGE`` field.
    """
    variant = pack_log_fields(fields)
    if message is None:
        raw = fields.get(MESSAGE_FIELD, "")
        message = raw if isinstance(raw, str) else str(raw)
    logging.getLogger(domain).log(level, message, extra={FIELDS_ATTR: variant})


def _fields_of(record: logging.LogRecord) -> dict[str, Any] | None:
    variant = getattr(record, FIELDS_ATTR, None)
    if variant is None:
        return None
    return unpack_log_fields(variant)


class StructuredFieldsFormatter(logging.Formatter):
    """Formatter that appends ``KEY=value`` pairs for the record's structured fields."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        fields = _fields_of(record)
        if not fields:
            return base
        rendered = " ".join(
            f"{key}={json_dumps_canonical(value)}"
            for key, value in sorted(fields.items())
            if key != MESSAGE_FIELD
        )
        return f"{base} {rendered}" if rendered else base


class StructuredFieldsHandler(logging.Handler):
    """
    Handler forwarding ``(levelno, fields)`` to a writer callback.

    Records without structured fields are forwarded with ``{"MESSAGE": <message>}``.
    """

    def __init__(self, writer: Callable[[int, dict[str, Any]], Any], level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.writer = writer

    def emit(self, record: logging.LogRecord) -> None:
        try:
            fields = _fields_of(record)
            if fields is None:
                fields = {MESSAGE_FIELD: record.getMessage()}
            self.writer(record.levelno, fields)
        except Exception:
            self.handleError(record)
