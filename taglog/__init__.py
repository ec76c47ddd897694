"""taglog: tagged, leveled logging through an ordered chain of handlers."""

from taglog.builder import build_handler, build_logger
from taglog.config import ConfigError, HandlerConfig, LoggerConfig, load_config, load_yaml_config
from taglog.dispatcher import Channel, Logger
from taglog.event import EventHandler
from taglog.formatter import DEFAULT_FORMAT, compile_template, get_formatter, render_value
from taglog.handler import Handler, HandlerStatus
from taglog.levels import (
    ALERT, CRITICAL, DEBUG, EMERGENCY, ERROR, INFO, LEVELS, NOTICE, WARNING,
    get_levels, level_name, level_rank, resolve_level,
)
from taglog.record import LogRecord, build_record, format_timestamp
from taglog.routes import DEFAULT_LEVEL_TAGS, DEFAULT_TAG, parse_route
from taglog.stream import LogDirectoryError, StreamHandler

__version__ = "1.0.0"

__all__ = [
    "Logger", "Channel",
    "Handler", "HandlerStatus", "StreamHandler", "EventHandler",
    "LogRecord", "build_record", "format_timestamp",
    "DEFAULT_FORMAT", "compile_template", "get_formatter", "render_value",
    "EMERGENCY", "ALERT", "CRITICAL", "ERROR", "WARNING", "NOTICE", "INFO", "DEBUG",
    "LEVELS", "get_levels", "level_name", "level_rank", "resolve_level",
    "DEFAULT_TAG", "DEFAULT_LEVEL_TAGS", "parse_route",
    "HandlerConfig", "LoggerConfig", "load_config", "load_yaml_config", "build_handler", "build_logger",
    "ConfigError", "LogDirectoryError",
]
