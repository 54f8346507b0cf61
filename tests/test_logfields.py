from __future__ import annotations

import logging

import pytest

from varcodec import Variant
from varcodec.core.errors import UnsupportedValueError
from varcodec.logfields import (
    FIELDS_ATTR,
    StructuredFieldsFormatter,
    StructuredFieldsHandler,
    log_structured,
    pack_log_fields,
    unpack_log_fields,
)


def test_pack_log_fields_accepts_text_bytes_and_variants() -> None:
    v = pack_log_fields({"MESSAGE": "hi", "RAW": b"\x01\x02", "CODE": Variant.new_int32(3)})
    assert v.get_type_string() == "a{sv}"
    assert unpack_log_fields(v) == {"MESSAGE": "hi", "RAW": b"\x01\x02", "CODE": 3}


def test_pack_log_fields_rejects_other_values() -> None:
    with pytest.raises(UnsupportedValueError, match="Unsupported value"):
        pack_log_fields({"N": 5})


def test_log_structured_attaches_fields(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="varcodec.test"):
        log_structured("varcodec.test", logging.INFO, {"MESSAGE": "ready", "UNIT": "worker"})
    (record,) = caplog.records
    assert record.getMessage() == "ready"
    assert unpack_log_fields(getattr(record, FIELDS_ATTR))["UNIT"] == "worker"


def test_formatter_appends_sorted_fields() -> None:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "ready", None, None)
    setattr(record, FIELDS_ATTR, pack_log_fields({"MESSAGE": "ready", "B": "2", "A": b"\x00"}))
    out = StructuredFieldsFormatter("%(message)s").format(record)
    assert out == 'ready A=[0] B="2"'


def test_formatter_without_fields_is_plain() -> None:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "plain", None, None)
    assert StructuredFieldsFormatter("%(message)s").format(record) == "plain"


def test_handler_forwards_fields_to_writer() -> None:
    seen: list[tuple[int, dict]] = []
    logger = logging.getLogger("varcodec.test.handler")
    handler = StructuredFieldsHandler(lambda level, fields: seen.append((level, fields)))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        log_structured("varcodec.test.handler", logging.WARNING, {"MESSAGE": "m", "K": "v"})
        logger.info("unstructured")
    finally:
        logger.removeHandler(handler)
    assert seen == [
        (logging.WARNING, {"MESSAGE": "m", "K": "v"}),
        (logging.INFO, {"MESSAGE": "unstructured"}),
    ]
