"""Configuration loading from an optional YAML file plus environment overrides."""

import logging
import os
from dataclasses import dataclass, field

import yaml

from taglog.formatter import DEFAULT_FORMAT
from taglog.routes import DEFAULT_TAG

logger = logging.getLogger(__name__)

HANDLER_TYPES = ("stream", "event")


class ConfigError(ValueError):
    """Raised when a configuration file or value is malformed."""


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def _parse_mode(value, name: str) -> int | None:
    """Accept 0o775, 509, "0775" or "0o775"; None disables chmod.

    YAML reads a bare 775 as decimal (0o1407), so ints above 0o777 are
    rejected and octal modes must be quoted.
    """
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        if not 0 <= value <= 0o777:
            raise ConfigError(f"Invalid {name}: {value!r}, quote octal modes such as \"0775\"")
        return value
    try:
        return int(str(value).strip(), 8)
    except ValueError:
        raise ConfigError(f"Invalid {name}: {value!r}") from None


@dataclass(frozen=True)
class HandlerConfig:
    type: str = "stream"
    streams: tuple = ("stdout",)
    tags: dict | None = None
    format: str = DEFAULT_FORMAT
    file_permission: int | None = 0o775
    dir_permission: int = 0o755
    use_locking: bool = False
    bubble: bool = True


@dataclass(frozen=True)
class LoggerConfig:
    handlers: tuple = field(default_factory=lambda: (HandlerConfig(),))
    use_microseconds: bool = True
    timezone: str | None = None
    default_tag: str = DEFAULT_TAG
    level_tags: dict = field(default_factory=dict)


def load_yaml_config(path: str | None) -> dict:
    """Load the YAML config file. Returns an empty dict if no path or no file."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
    logger.info("Loaded YAML config from %s", path)
    return data


def parse_handler(data: dict) -> HandlerConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"Handler entry must be a mapping, got {data!r}")
    handler_type = str(data.get("type", HandlerConfig.type)).strip().lower()
    if handler_type not in HANDLER_TYPES:
        raise ConfigError(f"Unknown handler type {handler_type!r}, expected one of {HANDLER_TYPES}")

    streams = data.get("streams", HandlerConfig.streams)
    if isinstance(streams, str):
        streams = [streams]
    tags = data.get("tags")
    if tags is not None and not isinstance(tags, dict):
        raise ConfigError(f"Handler tags must be a mapping of tag -> levels, got {tags!r}")

    return HandlerConfig(
        type=handler_type,
        streams=tuple(streams or ()),
        tags=tags,
        format=data.get("format", DEFAULT_FORMAT),
        file_permission=_parse_mode(data.get("file_permission", HandlerConfig.file_permission), "file_permission"),
        dir_permission=_parse_mode(data.get("dir_permission", HandlerConfig.dir_permission), "dir_permission"),
        use_locking=_parse_bool(data.get("use_locking", False)),
        bubble=_parse_bool(data.get("bubble", True)),
    )


def load_config(yaml_data: dict | None = None) -> LoggerConfig:
    """Build LoggerConfig from parsed YAML data and environment variables.

    Environment variables win over the file:
        TAGLOG_MICROSECONDS, TAGLOG_TIMEZONE, TAGLOG_DEFAULT_TAG
    """
    yaml_data = yaml_data or {}

    raw_handlers = yaml_data.get("handlers")
    if raw_handlers is None:
        handlers = LoggerConfig().handlers
    elif isinstance(raw_handlers, list):
        handlers = tuple(parse_handler(h) for h in raw_handlers)
    else:
        raise ConfigError("'handlers' must be a list")

    level_tags = yaml_data.get("level_tags") or {}
    if not isinstance(level_tags, dict):
        raise ConfigError("'level_tags' must be a mapping of level -> tag")

    return LoggerConfig(
        handlers=handlers,
        use_microseconds=_parse_bool(
            os.environ.get("TAGLOG_MICROSECONDS", yaml_data.get("use_microseconds", True))
        ),
        timezone=os.environ.get("TAGLOG_TIMEZONE", yaml_data.get("timezone")),
        default_tag=os.environ.get("TAGLOG_DEFAULT_TAG", yaml_data.get("default_tag", DEFAULT_TAG)),
        level_tags=level_tags,
    )
