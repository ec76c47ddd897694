"""Record formatters: ``%key%`` templates or caller-supplied functions."""

import json
import re
from collections.abc import Mapping
from typing import Any, Callable

DEFAULT_FORMAT = "[%datetime%] %channel%.%level_name%: %message% %context% %extra%\n"

_PLACEHOLDER = re.compile(r"%([A-Za-z0-9_]+)%")

# (tag, record mapping) -> rendered text
Formatter = Callable[[str, Mapping], str]


def render_value(value: Any) -> str:
    """Render one record field for substitution into a template.

    Containers become compact JSON, an empty container or None becomes "".
    """
    if value is None:
        return ""
    if isinstance(value, (Mapping, list, tuple)):
        if not value:
            return ""
        return json.dumps(
            dict(value) if isinstance(value, Mapping) else list(value),
            separators=(",", ":"),
            default=str,
        )
    return str(value)


def compile_template(template: str) -> Formatter:
    """Compile *template* once into a ``(tag, record) -> str`` formatter.

    Placeholders whose key is missing from the record are left as-is.
    Substituted values are not re-scanned for placeholders.
    """
    if not isinstance(template, str):
        raise TypeError(f"template must be a string, got {type(template).__name__}")

    def format_record(tag: str, record: Mapping) -> str:
        def substitute(match: re.Match) -> str:
            key = match.group(1)
            if key not in record:
                return match.group(0)
            return render_value(record[key])

        return _PLACEHOLDER.sub(substitute, template)

    return format_record


def get_formatter(fmt) -> Formatter:
    """Return a formatter for a template string or a custom callable."""
    if isinstance(fmt, str):
        return compile_template(fmt)
    if callable(fmt):
        return fmt
    raise TypeError(f"format must be a template string or a callable, got {type(fmt).__name__}")
