"""CLI: load panel options and a snapshot, run one refresh, print the event table."""

from __future__ import annotations

import argparse
import asyncio
import re
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import EVENT_SEVERITY_MAP, EVENT_STATUS_MAP, PanelSettings, load_settings
from .datasource.snapshot import SnapshotDataSource
from .events.models import EnrichedEvent
from .exceptions import ConfigError, DataSourceError
from .log_setup import setup_logger
from .panel import EventPanel

_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Show enriched trigger events from a snapshot.")
    parser.add_argument("snapshot", type=Path, help="JSON snapshot of triggers and events.")
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Override max number of events shown.",
    )
    parser.add_argument(
        "--sort",
        choices=["priority", "age-dsc", "age-asc"],
        default=None,
        help="Override event sort order.",
    )
    parser.add_argument(
        "--unresolved-only",
        action="store_true",
        help="Hide events already closed by a recovery event.",
    )
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Template variable for filter strings (repeatable).",
    )
    parser.add_argument("--ack", metavar="EVENTID", default=None, help="Acknowledge an event.")
    parser.add_argument("--message", default="", help="Acknowledgment message.")
    parser.add_argument("--user", default="operator", help="User name recorded with the ack.")
    return parser.parse_args(argv)


def _parse_vars(pairs: Sequence[str]) -> dict[str, str]:
    variables: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise ConfigError(f"Template variable must be NAME=VALUE, got {pair!r}.")
        variables[name] = value
    return variables


def _color_swatch(color: str) -> Text:
    if _HEX_COLOR_RE.match(color):
        return Text("  ", style=f"on {color}")
    return Text(color, style="dim")


def _print_events(
    console: Console,
    events: Sequence[EnrichedEvent],
    settings: PanelSettings,
) -> None:
    if not events:
        console.print("No events matched the current filters.")
        return

    table = Table(title=f"Trigger Events ({settings.sort_events_by})")
    table.add_column("", width=2)
    table.add_column("Event ID")
    table.add_column("Host", overflow="fold")
    table.add_column("Severity")
    table.add_column("Status")
    table.add_column("Resolved")
    table.add_column("Age", justify="right")
    table.add_column("Problem", overflow="fold")
    table.add_column("Acks", overflow="fold")

    for event in events:
        table.add_row(
            _color_swatch(event.color),
            event.eventid,
            event.host or "-",
            EVENT_SEVERITY_MAP.get(event.severity or "", event.severity or "-"),
            EVENT_STATUS_MAP.get(event.value or "", "-"),
            event.resolved_status or "-",
            event.age,
            event.problem or "-",
            "; ".join(f"{ack.time} {ack.user}" for ack in event.acknowledges) or "-",
        )
    console.print(table)


async def _run(args: argparse.Namespace, panel: EventPanel) -> None:
    if args.ack:
        await panel.acknowledge_trigger(
            {"triggerid": "-", "lastEvent": {"eventid": args.ack}},
            args.message,
            args.user,
        )
    else:
        await panel.refresh()


def main(argv: Sequence[str] | None = None) -> int:
    """Run one panel refresh and print the result."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    overrides: dict[str, object] = {}
    if args.limit is not None:
        overrides["limit"] = args.limit
    if args.sort is not None:
        overrides["sort_events_by"] = args.sort
    if args.unresolved_only:
        overrides["show_unresolved_only"] = True

    try:
        settings = load_settings(**overrides)
        variables = _parse_vars(args.var)
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    logger.info("Panel options: %s", settings.safe_summary())

    try:
        datasource = SnapshotDataSource.from_file(args.snapshot, variables=variables)
        panel = EventPanel(settings, datasource, logger=logger)
        asyncio.run(_run(args, panel))
    except ConfigError as exc:
        logger.error("Filter configuration failure: %s", exc)
        return 2
    except DataSourceError as exc:
        logger.error("Refresh failed: %s", exc)
        return 3

    _print_events(console, panel.event_list, settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
