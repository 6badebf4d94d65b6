from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("services.reader", logging.WARNING, __file__, 1, "Sensor read failed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_context() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s | %(message)s")

    line = formatter.format(_record(sensor="bme280", reason="bus timeout", read_errors=3, ignored="x"))

    assert line == "WARNING | Sensor read failed | sensor=bme280 reason=bus timeout read_errors=3"


def test_formatter_without_context() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", extra_keys=["sensor"])

    assert formatter.format(_record(reason="ignored")) == "Sensor read failed"
