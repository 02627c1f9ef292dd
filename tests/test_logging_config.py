"""Tests for logging setup."""

import json
import logging
from decimal import Decimal

from posledger.logging_config import StructuredFormatter, configure_logging, get_logger


def _record(**extra):
    record = logging.LogRecord("posledger.test", logging.WARNING, __file__, 1, "Journal entry rejected", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_get_logger_namespaces():
    assert get_logger("posledger.domain.journal").name == "posledger.domain.journal"
    assert get_logger("config").name == "posledger.config"


def test_structured_formatter_includes_extra_fields():
    line = StructuredFormatter().format(_record(total_debits=Decimal("100.00"), reference="42"))
    payload = json.loads(line)

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "posledger.test"
    assert payload["message"] == "Journal entry rejected"
    assert payload["total_debits"] == "100.00"
    assert payload["reference"] == "42"


def test_configure_logging_replaces_handler():
    root = logging.getLogger("posledger")

    configure_logging("info")
    configure_logging("DEBUG", json_output=True)

    handlers = [h for h in root.handlers if getattr(h, "_posledger_handler", False)]
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, StructuredFormatter)
    assert root.level == logging.DEBUG
