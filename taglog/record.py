"""Log record model: one immutable record per dispatched log call."""

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime, tzinfo

from taglog.levels import level_name

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LogRecord:
    message: str
    level: int
    level_name: str
    channel: str                  # tag the record was dispatched under
    datetime: str                 # rendered timestamp, see format_timestamp()
    context: dict = field(default_factory=dict)
    extra: dict = field(default_factory=dict)

    @property
    def tag(self) -> str:
        return self.channel

    def copy(self) -> "LogRecord":
        """Return a record whose context and extra are private to the caller."""
        return replace(self, context=copy.deepcopy(self.context), extra=copy.deepcopy(self.extra))

    def as_dict(self) -> dict:
        """Return a private deep copy of the record as an ordered mapping.

        Handlers render from this copy, so whatever one handler does to it
        is never seen by the others.
        """
        return {
            "message": self.message,
            "context": copy.deepcopy(self.context),
            "level": self.level,
            "level_name": self.level_name,
            "channel": self.channel,
            "datetime": self.datetime,
            "extra": copy.deepcopy(self.extra),
        }


def format_timestamp(moment: datetime, microseconds: bool = True) -> str:
    """Render *moment* as ``YYYY-MM-DD HH:MM:SS`` with optional ``.UUUUUU``."""
    text = moment.strftime(TIMESTAMP_FORMAT)
    if microseconds:
        text += f".{moment.microsecond:06d}"
    return text


def build_record(
    tag: str,
    level: int,
    message: str,
    context: dict | None = None,
    extra: dict | None = None,
    *,
    microseconds: bool = True,
    tz: tzinfo | None = None,
    now: datetime | None = None,
) -> LogRecord:
    """Create the record for one log call, stamped with the current time."""
    moment = now if now is not None else datetime.now(tz)
    return LogRecord(
        message=str(message),
        level=level,
        level_name=level_name(level),
        channel=tag,
        datetime=format_timestamp(moment, microseconds),
        context=copy.deepcopy(dict(context or {})),
        extra=copy.deepcopy(dict(extra or {})),
    )
