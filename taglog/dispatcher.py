"""Logger: routes tagged, leveled messages through an ordered handler chain.

Dispatch rules:
    1. Handlers are asked ``can_handle(tag, level)`` in registration order.
    2. An accepting handler with ``bubble=False`` ends the scan.
    3. No accepting handler: the call returns False and no record is built.
    4. Otherwise one record is built and every accepting handler gets its own copy,
       in order; a handler failure never stops the others.

Example::

    logger = Logger([StreamHandler("./logs", tags={"mail": ["ERROR"]})])
    logger.log_route("mailError", "SMTP refused", {"code": 554})
    logger.channel("cron").warning("job overran")
"""

import copy
import dataclasses
import logging
import threading
from collections.abc import Iterable, Mapping
from datetime import datetime, tzinfo
from typing import Callable
from zoneinfo import ZoneInfo

from taglog.handler import Handler
from taglog.levels import (
    ALERT, CRITICAL, DEBUG, EMERGENCY, ERROR, INFO, NOTICE, WARNING,
    get_levels, resolve_level,
)
from taglog.record import LogRecord, build_record
from taglog.routes import DEFAULT_TAG, level_tags as merge_level_tags, parse_route

logger = logging.getLogger(__name__)

# Receives a copy of the record mapping, returns fields to merge into "extra".
Processor = Callable[[dict], Mapping | None]


def _local_timezone() -> tzinfo:
    return datetime.now().astimezone().tzinfo


def _to_tzinfo(tz) -> tzinfo | None:
    """None keeps the host zone, looked up again for every record."""
    if tz is None:
        return None
    if isinstance(tz, tzinfo):
        return tz
    return ZoneInfo(str(tz))


class Logger:
    """Front-end that owns the handler chain and builds records.

    The handler list is guarded by a lock and dispatch works on a snapshot,
    so handlers may be added or removed while other threads are logging.
    """

    def __init__(
        self,
        handlers: Iterable[Handler] | None = None,
        processors: Iterable[Processor] | None = None,
        timezone=None,
        use_microseconds: bool = True,
        level_tags: Mapping | None = None,
        default_tag: str = DEFAULT_TAG,
    ):
        self._handlers: list[Handler] = list(handlers or [])
        self._processors: list[Processor] = list(processors or [])
        self._timezone = _to_tzinfo(timezone)
        self._use_microseconds = use_microseconds
        self._level_tags = merge_level_tags(level_tags)
        self._default_tag = default_tag
        self._lock = threading.Lock()

    # -- handler chain -----------------------------------------------------

    def add_handler(self, handler: Handler) -> "Logger":
        with self._lock:
            self._handlers.append(handler)
        return self

    def remove_handler(self, index: int) -> "Logger":
        """Remove the handler at *index*; out-of-range indexes are ignored."""
        with self._lock:
            if 0 <= index < len(self._handlers):
                del self._handlers[index]
        return self

    def get_handler(self, index: int) -> Handler | None:
        with self._lock:
            if 0 <= index < len(self._handlers):
                return self._handlers[index]
        return None

    def set_handlers(self, handlers: Iterable[Handler]) -> "Logger":
        replacement = list(handlers)
        with self._lock:
            self._handlers = replacement
        return self

    def get_handlers(self) -> list[Handler]:
        with self._lock:
            return list(self._handlers)

    def add_processor(self, processor: Processor) -> "Logger":
        self._processors.append(processor)
        return self

    # -- timestamps --------------------------------------------------------

    def use_microsecond_timestamps(self, micro: bool) -> None:
        self._use_microseconds = bool(micro)

    @property
    def use_microseconds(self) -> bool:
        return self._use_microseconds

    @property
    def timezone(self) -> tzinfo:
        if self._timezone is None:
            return _local_timezone()
        return self._timezone

    @timezone.setter
    def timezone(self, tz) -> None:
        self._timezone = _to_tzinfo(tz)

    def get_timezone(self) -> tzinfo:
        return self.timezone

    def set_timezone(self, tz) -> "Logger":
        self.timezone = tz
        return self

    @property
    def level_tags(self) -> dict[int, str]:
        return dict(self._level_tags)

    @property
    def default_tag(self) -> str:
        return self._default_tag

    @staticmethod
    def get_levels() -> dict[int, str]:
        return get_levels()

    # -- logging entry points ----------------------------------------------

    def log(self, level, message="", context: Mapping | None = None, tag: str | None = None) -> bool:
        """Log *message* at *level* (rank or name) under *tag*.

        Returns whether any handler accepted the record.
        """
        rank = resolve_level(level)
        return self._dispatch(tag or self._default_tag, rank, message, context)

    def log_route(self, route: str, message="", context: Mapping | None = None) -> bool:
        """Log through a route such as ``mailError`` or ``cron_warning``."""
        tag, rank = parse_route(route)
        return self._dispatch(tag, rank, message, context)

    def channel(self, tag: str) -> "Channel":
        return Channel(self, tag)

    def _log_level(self, rank: int, message, context) -> bool:
        return self._dispatch(self._level_tags[rank], rank, message, context)

    def debug(self, message, context: Mapping | None = None) -> bool:
        return self._log_level(DEBUG, message, context)

    def info(self, message, context: Mapping | None = None) -> bool:
        return self._log_level(INFO, message, context)

    def notice(self, message, context: Mapping | None = None) -> bool:
        return self._log_level(NOTICE, message, context)

    def warning(self, message, context: Mapping | None = None) -> bool:
        return self._log_level(WARNING, message, context)

    def error(self, message, context: Mapping | None = None) -> bool:
        return self._log_level(ERROR, message, context)

    def critical(self, message, context: Mapping | None = None) -> bool:
        return self._log_level(CRITICAL, message, context)

    def alert(self, message, context: Mapping | None = None) -> bool:
        return self._log_level(ALERT, message, context)

    def emergency(self, message, context: Mapping | None = None) -> bool:
        return self._log_level(EMERGENCY, message, context)

    # -- dispatch ----------------------------------------------------------

    def select_handlers(self, tag: str, level: int) -> list[Handler]:
        """Return the handlers that would receive a (tag, level) record."""
        active = []
        for handler in self.get_handlers():
            if handler.can_handle(tag, level):
                active.append(handler)
                if not handler.bubble:
                    break
        return active

    def _dispatch(self, tag: str, level: int, message, context: Mapping | None) -> bool:
        active = self.select_handlers(tag, level)
        if not active:
            return False

        record = self._build_record(tag, level, message, context)
        for handler in active:
            try:
                handler.handle(tag, record.copy())
            except Exception:
                logger.error("Handler %r raised while handling tag %r", handler, tag, exc_info=True)
        return True

    def _build_record(self, tag: str, level: int, message, context) -> LogRecord:
        record = build_record(
            tag, level, message, context,
            microseconds=self._use_microseconds, tz=self._timezone,
        )
        if not self._processors:
            return record
        extra: dict = {}
        for processor in self._processors:
            try:
                fields = processor(record.as_dict())
            except Exception:
                logger.error("Processor %r failed, skipping", processor, exc_info=True)
                continue
            if fields:
                extra.update(fields)
        if not extra:
            return record
        return dataclasses.replace(record, extra=copy.deepcopy(extra))

    # -- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        """End every handler in the chain."""
        for handler in self.get_handlers():
            handler.end()

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class Channel:
    """A Logger bound to one tag: ``logger.channel("cron").error("failed")``."""

    def __init__(self, logger: Logger, tag: str):
        self._logger = logger
        self.tag = tag

    def log(self, level, message="", context: Mapping | None = None) -> bool:
        return self._logger.log(level, message, context, tag=self.tag)

    def debug(self, message, context: Mapping | None = None) -> bool:
        return self.log(DEBUG, message, context)

    def info(self, message, context: Mapping | None = None) -> bool:
        return self.log(INFO, message, context)

    def notice(self, message, context: Mapping | None = None) -> bool:
        return self.log(NOTICE, message, context)

    def warning(self, message, context: Mapping | None = None) -> bool:
        return self.log(WARNING, message, context)

    def error(self, message, context: Mapping | None = None) -> bool:
        return self.log(ERROR, message, context)

    def critical(self, message, context: Mapping | None = None) -> bool:
        return self.log(CRITICAL, message, context)

    def alert(self, message, context: Mapping | None = None) -> bool:
        return self.log(ALERT, message, context)

    def emergency(self, message, context: Mapping | None = None) -> bool:
        return self.log(EMERGENCY, message, context)
