"""Route parsing (``mailError``, ``mail_error``) and the default tag per severity."""

from collections.abc import Mapping

from taglog.levels import (
    ALERT, CRITICAL, DEBUG, EMERGENCY, ERROR, INFO, LEVELS, NOTICE, WARNING,
    level_rank, resolve_level,
)

DEFAULT_TAG = "debug"

# Tag used by the Logger's per-severity methods. The grouping is inherited
# from earlier releases; pass level_tags to Logger to change it.
DEFAULT_LEVEL_TAGS: dict[int, str] = {
    EMERGENCY: "critical",
    ALERT: "debug",
    CRITICAL: "critical",
    ERROR: "critical",
    WARNING: "debug",
    NOTICE: "debug",
    INFO: "info",
    DEBUG: "debug",
}


def level_tags(overrides: Mapping | None = None) -> dict[int, str]:
    """Return the default level -> tag table with *overrides* applied.

    Override keys may be ranks or level names.

    Raises:
        ValueError: an override key is not a known level.
    """
    table = dict(DEFAULT_LEVEL_TAGS)
    for level, tag in (overrides or {}).items():
        rank = resolve_level(level, default=-1)
        if rank not in LEVELS:
            raise ValueError(f"Unknown level in tag table: {level!r}")
        table[rank] = str(tag)
    return table


def _split_route(route: str) -> tuple[str, str | None]:
    for i in range(1, len(route)):
        if route[i].isupper():
            return route[:i], route[i:]
    if "_" in route:
        tag, level = route.split("_", 1)
        return tag, level
    return route, None


def parse_route(route: str) -> tuple[str, int]:
    """Split a route such as ``mailError`` or ``mail_error`` into (tag, level).

    The level defaults to DEBUG when the suffix is missing or not a level name.

    Raises:
        ValueError: the route or its tag part is empty.
    """
    if not route or not route.strip():
        raise ValueError("route must not be empty")
    tag, level = _split_route(route.strip())
    tag = tag.strip().rstrip("_").lower()
    if not tag:
        raise ValueError(f"route {route!r} has no tag")
    rank = DEBUG if level is None else level_rank(level.strip(), DEBUG)
    return tag, rank
