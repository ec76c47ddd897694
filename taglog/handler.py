"""Handler capability shared by every sink variant."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from enum import IntEnum

from taglog.formatter import DEFAULT_FORMAT, get_formatter
from taglog.levels import resolve_level
from taglog.record import LogRecord

logger = logging.getLogger(__name__)


class HandlerStatus(IntEnum):
    ERROR = -1
    PENDING = 0
    READY = 1
    CLOSED = 2


def normalize_tags(tags: Mapping | None) -> dict[str, frozenset | None] | None:
    """Lower-case the tag keys and resolve level names to ranks.

    A ``None`` level set means every level of that tag.
    """
    if not tags:
        return None
    normalized: dict[str, frozenset | None] = {}
    for tag, levels in tags.items():
        if levels is None:
            normalized[str(tag).lower()] = None
            continue
        if isinstance(levels, (str, int)):
            levels = [levels]
        ranks = frozenset(resolve_level(level, default=-1) for level in levels)
        normalized[str(tag).lower()] = ranks - {-1}
    return normalized


class Handler(ABC):
    """Decides which records it accepts and renders/persists the accepted ones.

    Subclasses implement ``handle`` and ``end``. ``handle`` must never raise
    for a sink failure; the failure is kept in ``errors`` instead.
    """

    def __init__(self, tags: Mapping | None = None, fmt=DEFAULT_FORMAT, bubble: bool = True):
        self._tags = normalize_tags(tags)
        self._format = get_formatter(fmt)
        self._bubble = bool(bubble)
        self._errors: list[str] = []
        self._status = HandlerStatus.PENDING

    def can_handle(self, tag: str, level: int) -> bool:
        if not self._tags:
            return True
        key = str(tag).lower()
        if key not in self._tags:
            return False
        levels = self._tags[key]
        return levels is None or level in levels

    @abstractmethod
    def handle(self, tag: str, record: LogRecord) -> None:
        ...

    @abstractmethod
    def end(self) -> None:
        ...

    def render(self, tag: str, raw: Mapping) -> str:
        return str(self._format(tag, raw))

    @property
    def tags(self) -> dict | None:
        return dict(self._tags) if self._tags else None

    @property
    def status(self) -> HandlerStatus:
        return self._status

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    @property
    def bubble(self) -> bool:
        return self._bubble

    @bubble.setter
    def bubble(self, value: bool) -> None:
        self._bubble = bool(value)

    def set_bubble(self, value: bool) -> "Handler":
        self.bubble = value
        return self

    @property
    def accepting(self) -> bool:
        """True while the handler can still write (READY)."""
        return self._status == HandlerStatus.READY

    def _record_error(self, message: str) -> None:
        self._errors.append(message)
        logger.warning("%s: %s", type(self).__name__, message)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} status={self._status.name} bubble={self._bubble}>"


def describe_errors(handlers: Iterable[Handler]) -> list[str]:
    """Flatten the error lists of *handlers* into ``"<Handler>: <error>"`` lines."""
    lines = []
    for handler in handlers:
        for error in handler.errors:
            lines.append(f"{type(handler).__name__}: {error}")
    return lines
