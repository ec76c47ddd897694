#!/usr/bin/env python3
"""taglog: send tagged, leveled messages through a configured handler chain."""

import argparse
import json
import logging
import os
import sys

from taglog.builder import build_logger
from taglog.config import ConfigError, load_config, load_yaml_config
from taglog.handler import describe_errors
from taglog.levels import get_levels
from taglog.stream import LogDirectoryError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taglog",
        description="Log messages under a tag and level through the configured handlers.",
    )
    parser.add_argument(
        "message", nargs="*",
        help="Message to log (default: read one message per line from stdin)",
    )
    parser.add_argument(
        "--config", default=os.environ.get("TAGLOG_CONFIG"),
        help="Path to YAML config file (default: $TAGLOG_CONFIG)",
    )
    parser.add_argument("--tag", help="Tag (channel) to log under")
    parser.add_argument(
        "--level", default="info",
        help="Level name or rank (default: info)",
    )
    parser.add_argument(
        "--route",
        help="Tag and level in one word, e.g. mailError or cron_warning",
    )
    parser.add_argument("--context", help="JSON object attached as record context")
    parser.add_argument(
        "--no-microseconds", action="store_true",
        help="Render timestamps without fractional seconds",
    )
    parser.add_argument("--timezone", help="IANA timezone for timestamps, e.g. UTC")
    parser.add_argument(
        "--list-levels", action="store_true",
        help="Print the level table and exit",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show internal diagnostics")
    return parser


def _parse_context(raw: str | None) -> dict:
    if not raw:
        return {}
    context = json.loads(raw)
    if not isinstance(context, dict):
        raise ValueError("--context must be a JSON object")
    return context


def _messages(args):
    if args.message:
        yield " ".join(args.message)
        return
    for line in sys.stdin:
        line = line.rstrip("\n")
        if line:
            yield line


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [TAGLOG] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    if args.list_levels:
        for rank, name in sorted(get_levels().items()):
            print(f"{rank}  {name}")
        return 0

    try:
        context = _parse_context(args.context)
        config = load_config(load_yaml_config(args.config))
        log = build_logger(config)
    except (ConfigError, LogDirectoryError, ValueError) as e:
        logger.error("%s", e)
        return 2

    if args.no_microseconds:
        log.use_microsecond_timestamps(False)
    if args.timezone:
        try:
            log.timezone = args.timezone
        except (ValueError, LookupError):
            logger.error("Unknown timezone %r", args.timezone)
            return 2

    all_accepted = True
    with log:
        for message in _messages(args):
            if args.route:
                try:
                    accepted = log.log_route(args.route, message, context)
                except ValueError as e:
                    logger.error("%s", e)
                    return 2
            else:
                accepted = log.log(args.level, message, context, tag=args.tag)
            if not accepted:
                logger.info("No handler accepted: %s", message)
                all_accepted = False

    for line in describe_errors(log.get_handlers()):
        logger.warning("%s", line)
    return 0 if all_accepted else 1


if __name__ == "__main__":
    sys.exit(main())
