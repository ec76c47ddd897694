"""Severity levels from the syslog protocol (RFC 5424); lower rank is more severe."""

EMERGENCY = 0   # system is unusable
ALERT = 1       # action must be taken immediately
CRITICAL = 2    # critical conditions
ERROR = 3       # error conditions
WARNING = 4     # warning conditions
NOTICE = 5      # normal but significant condition
INFO = 6        # informational messages
DEBUG = 7       # debug-level messages

UNKNOWN_LEVEL = "UNKNOWN_LEVEL"

LEVELS: dict[int, str] = {
    EMERGENCY: "EMERGENCY",
    ALERT: "ALERT",
    CRITICAL: "CRITICAL",
    ERROR: "ERROR",
    WARNING: "WARNING",
    NOTICE: "NOTICE",
    INFO: "INFO",
    DEBUG: "DEBUG",
}

_NAME_TO_RANK: dict[str, int] = {name: rank for rank, name in LEVELS.items()}


def get_levels() -> dict[int, str]:
    """Return a copy of the rank -> name table."""
    return dict(LEVELS)


def level_rank(name: str, default: int = DEBUG) -> int:
    """Return the rank for a level name (case-insensitive), or *default* if unknown."""
    if not isinstance(name, str):
        return default
    return _NAME_TO_RANK.get(name.strip().upper(), default)


def level_name(rank: int) -> str:
    return LEVELS.get(rank, UNKNOWN_LEVEL)


def resolve_level(level, default: int = DEBUG) -> int:
    """Accept either a rank or a level name and return a rank.

    Ranks outside the table are passed through unchanged, and a string of
    digits such as ``"3"`` is read as a rank. Only names are looked up, so an
    unknown name falls back to *default*.
    """
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    if isinstance(level, str) and level.strip().isascii() and level.strip().isdigit():
        return int(level.strip())
    return level_rank(level, default)
