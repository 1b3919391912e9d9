"""Component loggers and config resolution."""

from __future__ import annotations

import logging

from plainyaml.logger import Logger
from plainyaml.utils import resolve_config


def test_resolve_config_overrides_known_keys_only():
    defaults = {"indent_size": 2, "enable_logger": False}
    resolved = resolve_config({"indent_size": 4, "unknown": True}, defaults)
    assert resolved == {"indent_size": 4, "enable_logger": False}
    assert defaults == {"indent_size": 2, "enable_logger": False}


def test_enabled_logger_gets_a_single_handler():
    name = "plainyaml.tests.enabled"
    first = Logger(config={"name": name, "is_enabled": True, "level": logging.INFO}).logger
    second = Logger(config={"name": name, "is_enabled": True}).logger
    assert first is second
    assert len(first.handlers) == 1
    assert first.level == logging.DEBUG


def test_disabled_logger_is_left_untouched():
    name = "plainyaml.tests.disabled"
    logger = Logger(config={"name": name, "is_enabled": False}).logger
    assert logger.handlers == []
    assert logger.level == logging.NOTSET


def test_components_log_through_named_loggers(caplog):
    from plainyaml import parse

    with caplog.at_level(logging.DEBUG, logger="plainyaml.parser"):
        parse("a: 1", config={"enable_logger": False})
    assert any(record.name == "plainyaml.parser" and "Parsed key 'a'" in record.getMessage() for record in caplog.records)
