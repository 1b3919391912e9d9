"""Named loggers for the lexer, parser and emitter.

A component passes ``is_enabled`` from its own config; an enabled logger gets
one stream handler at the configured level, a disabled one is left as found.
"""

from typing import NotRequired, TypedDict
import logging
from plainyaml.utils import resolve_config


class LoggerConfig(TypedDict):
    name: NotRequired[str]
    is_enabled: NotRequired[bool]
    level: NotRequired[int]
    format: NotRequired[str]


class LoggerConfigRequired(TypedDict):
    name: str
    is_enabled: bool
    level: int
    format: str


DEFAULT_LOGGER_CONFIG: LoggerConfigRequired = {
    "name": "plainyaml",
    "is_enabled": True,
    "level": logging.DEBUG,
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


class Logger:
    def __init__(self, config: LoggerConfig | None = None):
        self.config = resolve_config(config or {}, DEFAULT_LOGGER_CONFIG)
        self.logger = logging.getLogger(self.config["name"])
        self.set_configuration()

    def set_configuration(self):
        # disabled loggers are left as found so records follow normal propagation
        if not self.config["is_enabled"]:
            return

        self.logger.setLevel(self.config["level"])
        if any(getattr(handler, "_plainyaml_handler", False) for handler in self.logger.handlers):
            return
        self.formatter = logging.Formatter(self.config["format"])
        self.ch = logging.StreamHandler()
        self.ch.setFormatter(self.formatter)
        self.ch._plainyaml_handler = True  # type: ignore[attr-defined]
        self.logger.addHandler(self.ch)
