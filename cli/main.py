#!/usr/bin/env python3
"""
rolling-log CLI

Small command-line front end for the rolling log writer, mostly useful to
inspect or seed the log files of an application from a shell.

Commands:

1) write
   - Start the logger, record each MESSAGE at the given level and flush:
       rolling-log write --level error "disk almost full"
       some_command | rolling-log write -

2) show
   - Print the previous file (<prefix>.1) followed by the current file
     (<prefix>.0).

3) clear
   - Delete both log files.

4) config
   - Print the effective configuration (defaults, ROLLING_LOG_* environment
     overrides and command-line options) as JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Ensure project root is on sys.path when running as a script
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from configs.settings import settings
from exceptions.exceptions import DegradedModeError, FileStoreIOError
from runtime.models.config_models import LogConfig
from runtime.models.log_models import LogLevel
from runtime.rolling_log import build_config, create_rolling_log
from runtime.store.file_store import FileHandle
from runtime.store.local_file_store import LocalFileStore


def configure_logging(level: str) -> None:
    """Basic stream logging for diagnostics and console mirroring."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _options_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    if args.directory is not None:
        options["directory"] = args.directory
    if args.prefix is not None:
        options["prefix"] = args.prefix
    if args.log_size is not None:
        options["logSize"] = args.log_size
    if args.event_buffer is not None:
        options["eventBuffer"] = args.event_buffer
    if getattr(args, "console", False):
        options["console"] = True
    return options


def _read_messages(messages: List[str]) -> List[str]:
    """Expand '-' into the lines read from stdin."""
    out: List[str] = []
    for message in messages:
        if message == "-":
            out.extend(line.rstrip("\n") for line in sys.stdin if line.strip())
        else:
            out.append(message)
    return out


# ---------------------------------------------------------------------------
# write
# ---------------------------------------------------------------------------


async def cmd_write(options: Dict[str, Any], level: str, messages: List[str]) -> int:
    """Record messages and flush them to the current log file."""
    rolling = create_rolling_log(options)
    try:
        directory = await rolling.start()
    except DegradedModeError as e:
        print(f"[rolling-log] ✗ {e}")
        return 1

    log_call = getattr(rolling, LogLevel(level).value)
    for message in messages:
        log_call(message)

    result = await rolling.close()
    if result is None:
        result = await rolling.pending_flush()

    current = directory.path / rolling.config.current_name
    if result is not None and not result.ok:
        print(f"[rolling-log] ✗ Flush failed: {result.reason}")
        return 1

    print(f"[rolling-log] ✓ {len(messages)} message(s) written → {current}")
    if result is not None and result.rotated:
        print(f"[rolling-log] ✓ Rotated previous log → {rolling.config.previous_name}")
    return 0


# ---------------------------------------------------------------------------
# show / clear
# ---------------------------------------------------------------------------


async def cmd_show(config: LogConfig) -> int:
    """Print previous then current log file contents."""
    store = LocalFileStore(settings.symbolic_locations(), create_missing=False)
    try:
        directory = await store.resolve_directory(config.directory)
    except FileStoreIOError as e:
        print(f"[rolling-log] ✗ {e}")
        return 1

    for name in (config.previous_name, config.current_name):
        text = await store.read_text(FileHandle(directory=directory, name=name))
        if text is None:
            print(f"[rolling-log] {name}: (missing)")
            continue
        print(f"[rolling-log] {name}:")
        print(text.lstrip("\n"))
    return 0


async def cmd_clear(config: LogConfig) -> int:
    """Delete both log files."""
    store = LocalFileStore(settings.symbolic_locations(), create_missing=False)
    try:
        directory = await store.resolve_directory(config.directory)
        for name in (config.current_name, config.previous_name):
            await store.remove_file(directory.path / name, missing_ok=True)
    except FileStoreIOError as e:
        print(f"[rolling-log] ✗ {e}")
        return 1

    print(f"[rolling-log] ✓ Removed {config.current_name} and {config.previous_name} from {directory.path}")
    return 0


def cmd_config(config: LogConfig) -> int:
    print(json.dumps(config.to_options(), indent=2))
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rolling log CLI")
    parser.add_argument(
        "--directory",
        default=None,
        help="Symbolic location (dataDirectory, cacheDirectory, tempDirectory) or path",
    )
    parser.add_argument("--prefix", default=None, help="Log file prefix (default: 'log')")
    parser.add_argument("--log-size", type=int, default=None, help="Rotation threshold in bytes")
    parser.add_argument("--event-buffer", type=int, default=None, help="Entries buffered before a flush")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Level of diagnostic output (default: ROLLING_LOG_LOG_LEVEL or WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # write
    p_write = subparsers.add_parser("write", help="Record messages and flush them to disk")
    p_write.add_argument(
        "--level",
        default=LogLevel.LOG.value,
        choices=[level.value for level in LogLevel],
        help="Level of the recorded entries",
    )
    p_write.add_argument(
        "--console",
        action="store_true",
        help="Mirror entries to the console logger",
    )
    p_write.add_argument("messages", nargs="+", help="Messages to record ('-' reads stdin)")

    # show
    subparsers.add_parser("show", help="Print previous and current log files")

    # clear
    subparsers.add_parser("clear", help="Delete both log files")

    # config
    subparsers.add_parser("config", help="Print the effective configuration")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    options = _options_from_args(args)
    command: str = args.command

    if command == "write":
        code = asyncio.run(
            cmd_write(options, level=args.level, messages=_read_messages(args.messages))
        )
    elif command == "show":
        code = asyncio.run(cmd_show(build_config(options)))
    elif command == "clear":
        code = asyncio.run(cmd_clear(build_config(options)))
    elif command == "config":
        code = cmd_config(build_config(options))
    else:
        parser.error(f"Unknown command: {command}")

    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
