"""Event handler: forwards rendered records to an in-process subscriber."""

from collections.abc import Mapping
from typing import Callable

from taglog.formatter import DEFAULT_FORMAT
from taglog.handler import Handler, HandlerStatus
from taglog.record import LogRecord

# (tag, rendered line, raw record mapping)
Subscriber = Callable[[str, str, dict], None]


class EventHandler(Handler):
    """Calls a single subscriber for every accepted record.

    Without a subscriber the handler still accepts records and drops them.
    """

    def __init__(
        self,
        tags: Mapping | None = None,
        fmt=DEFAULT_FORMAT,
        bubble: bool = True,
        on_log: Subscriber | None = None,
    ):
        super().__init__(tags=tags, fmt=fmt, bubble=bubble)
        self._subscriber = on_log
        self._status = HandlerStatus.READY

    def on_log(self, callback: Subscriber | None) -> "EventHandler":
        self._subscriber = callback
        return self

    @property
    def subscriber(self) -> Subscriber | None:
        return self._subscriber

    def handle(self, tag: str, record: LogRecord) -> None:
        if not self.accepting:
            return
        raw = record.as_dict()
        try:
            line = self.render(tag, raw)
            if self._subscriber is not None:
                self._subscriber(tag, line, raw)
        except Exception as e:
            self._record_error(f"Subscriber failed for tag {tag!r}: {type(e).__name__}: {e}")

    def end(self) -> None:
        if self._status == HandlerStatus.CLOSED:
            return
        self._subscriber = None
        self._status = HandlerStatus.CLOSED
