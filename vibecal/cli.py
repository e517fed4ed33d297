#!/usr/bin/env python3
"""
vibecal Command Line Interface

Main entry point for the `vibecal` command. Event files are YAML or JSON,
either a list of events or a mapping with an ``events`` key.

Usage:
    vibecal slots --events events.yaml --date 2024-01-01 --duration 60
    vibecal check --events events.yaml --title "Sync" --date 2024-01-01 --time 11:00
    vibecal expand --title "Standup" --date 2024-01-31 --time 09:00 --repeat monthly
    vibecal remind --events events.yaml --once
    vibecal --version
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from vibecal import __version__
from vibecal.calendar import REPEAT_OPTIONS
from vibecal.calendar.config_models import load_config
from vibecal.calendar.errors import CalendarError
from vibecal.calendar.models import Event, validate_event
from vibecal.calendar.recurrence import expand
from vibecal.calendar.reminders import ReminderScheduler
from vibecal.calendar.runner import ReminderRunner
from vibecal.calendar.store import EventStore
from vibecal.logging_config import setup_logging


def load_events_file(path: Path) -> list[dict[str, Any]]:
    """Read events from a YAML/JSON file."""
    with open(path) as f:
        raw = yaml.safe_load(f) or []

    if isinstance(raw, dict):
        raw = raw.get("events", [])
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of events")

    # YAML 1.1 reads an unquoted 10:30 as the base-60 integer 630
    for item in raw:
        if isinstance(item, dict) and isinstance(item.get("time"), int):
            item["time"] = f"{item['time'] // 60:02d}:{item['time'] % 60:02d}"
    return raw


def _build_store(args) -> EventStore:
    config = load_config(Path(args.config) if args.config else None)
    events = load_events_file(Path(args.events)) if args.events else []
    return EventStore(events=events, config=config)


def _draft_from_args(args) -> dict[str, Any]:
    draft = {
        "title": getattr(args, "title", None),
        "date": getattr(args, "date", None),
        "time": getattr(args, "time", None),
        "duration": args.duration,
        "buffer": args.buffer,
        "timezone": args.timezone,
    }
    return {k: v for k, v in draft.items() if v is not None}


def _print(result: Any) -> None:
    print(json.dumps(result, indent=2, default=str))


def cmd_version(args):
    """Show version information."""
    print(f"vibecal {__version__}")


def cmd_slots(args):
    """Print free start times on a date."""
    store = _build_store(args)
    slots = store.compute_availability(args.date, _draft_from_args(args))
    if not slots:
        print("No free slots in the work window.")
        return 1
    for slot in slots:
        print(slot.strftime("%H:%M"))
    return 0


def cmd_check(args):
    """Preview conflicts for a proposed event."""
    store = _build_store(args)
    result = store.check_conflicts(_draft_from_args(args))
    _print(result)
    if not result["success"] or result["data"]["has_conflicts"]:
        return 1
    return 0


def cmd_expand(args):
    """Print the dates a repeating event would occupy."""
    config = load_config(Path(args.config) if args.config else None)
    base = Event.from_dict(_draft_from_args(args))
    validate_event(base)
    print(base.date.isoformat())
    for occurrence in expand(base, args.repeat, count=config.recurrence.occurrences):
        print(occurrence.date.isoformat())
    return 0


def cmd_remind(args):
    """Evaluate reminders once, or keep polling until interrupted."""
    store = _build_store(args)
    if not store.config.reminders.enabled:
        print("Reminders are disabled in the calendar config.")
        return 0

    reminders = ReminderScheduler(store)

    if args.once:
        for notification in reminders.tick():
            print(notification.text)
        return 0

    interval = args.interval or store.config.reminders.poll_interval_seconds

    async def _watch():
        runner = ReminderRunner(
            reminders,
            interval_seconds=interval,
            on_notify=lambda n: print(n.text, flush=True),
        )
        async with runner:
            while runner.is_running:
                await asyncio.sleep(1)

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        print("Stopped.")
    return 0


def _add_event_options(parser: argparse.ArgumentParser, with_identity: bool = True) -> None:
    if with_identity:
        parser.add_argument("--title", help="Event title")
        parser.add_argument("--time", help="Start time (HH:MM)")
    parser.add_argument("--date", required=True, help="Date (YYYY-MM-DD)")
    parser.add_argument("--duration", type=int, help="Duration in minutes")
    parser.add_argument("--buffer", type=int, help="Buffer after the event in minutes")
    parser.add_argument("--timezone", help="IANA timezone (e.g. Europe/Berlin)")


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="vibecal",
        description="vibecal - conflict-aware calendar scheduling",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version and exit"
    )
    parser.add_argument(
        "--config", default=None, help="Path to calendar.yaml (default: args/calendar.yaml)"
    )
    parser.add_argument(
        "--log-level", default=None, help="Log level (default: VIBECAL_LOG_LEVEL or INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # slots
    slots_parser = subparsers.add_parser("slots", help="Suggest free start times on a date")
    slots_parser.add_argument("--events", help="Events file (YAML or JSON)")
    _add_event_options(slots_parser, with_identity=False)
    slots_parser.set_defaults(func=cmd_slots)

    # check
    check_parser = subparsers.add_parser("check", help="Preview conflicts for a proposed event")
    check_parser.add_argument("--events", help="Events file (YAML or JSON)")
    _add_event_options(check_parser)
    check_parser.set_defaults(func=cmd_check)

    # expand
    expand_parser = subparsers.add_parser("expand", help="Show the dates of a recurrence series")
    _add_event_options(expand_parser)
    expand_parser.add_argument(
        "--repeat", choices=REPEAT_OPTIONS, default="weekly"
    )
    expand_parser.set_defaults(func=cmd_expand)

    # remind
    remind_parser = subparsers.add_parser("remind", help="Evaluate event reminders")
    remind_parser.add_argument("--events", required=True, help="Events file (YAML or JSON)")
    remind_parser.add_argument("--once", action="store_true", help="Run a single tick and exit")
    remind_parser.add_argument(
        "--interval", type=float, default=None, help="Seconds between ticks"
    )
    remind_parser.set_defaults(func=cmd_remind)

    args = parser.parse_args(argv)

    # Handle --version at top level
    if args.version:
        cmd_version(args)
        return

    # If no command given, show help
    if not args.command:
        parser.print_help()
        return

    setup_logging(level=args.log_level)

    try:
        result = args.func(args)
    except (CalendarError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    # Commands may return an exit code
    if isinstance(result, int) and result != 0:
        sys.exit(result)


if __name__ == "__main__":
    main()
