"""Turns a LoggerConfig into handlers and a ready Logger."""

import logging
import sys

from taglog.config import ConfigError, HandlerConfig, LoggerConfig
from taglog.dispatcher import Logger
from taglog.event import EventHandler
from taglog.handler import Handler
from taglog.stream import StreamHandler

logger = logging.getLogger(__name__)

STANDARD_STREAMS = {
    "stdout": lambda: sys.stdout,
    "stderr": lambda: sys.stderr,
}


def _resolve_stream(spec):
    if isinstance(spec, str) and spec.strip().lower() in STANDARD_STREAMS:
        return STANDARD_STREAMS[spec.strip().lower()]()
    return spec


def build_handler(cfg: HandlerConfig) -> Handler:
    if cfg.type == "stream":
        return StreamHandler(
            [_resolve_stream(s) for s in cfg.streams],
            tags=cfg.tags,
            fmt=cfg.format,
            file_permission=cfg.file_permission,
            use_locking=cfg.use_locking,
            dir_permission=cfg.dir_permission,
            bubble=cfg.bubble,
        )
    if cfg.type == "event":
        return EventHandler(tags=cfg.tags, fmt=cfg.format, bubble=cfg.bubble)
    raise ConfigError(f"Unknown handler type {cfg.type!r}")


def build_logger(config: LoggerConfig) -> Logger:
    handlers = [build_handler(h) for h in config.handlers]
    try:
        log = Logger(
            handlers,
            timezone=config.timezone,
            use_microseconds=config.use_microseconds,
            level_tags=config.level_tags,
            default_tag=config.default_tag,
        )
    except (ValueError, LookupError) as e:
        raise ConfigError(str(e)) from e
    logger.info("Logger ready with %d handler(s)", len(handlers))
    return log
