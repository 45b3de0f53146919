"""
CLI (Command Line Interface).

This module provides quick terminal commands, e.g.:

    zutplan plan --view week --date 2024-03-14 --album 12345
    zutplan plan --view month --category teacher --query "Kowalski"
    zutplan suggest teacher Kowal
    zutplan periods
    zutplan conflicts --album 12345
    zutplan cache-clear

Note:
- All schedule logic lives in zutplan.engine / zutplan.service
- Output is printed with rich; --json prints the raw ScheduleResult instead
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Optional

from rich.console import Console
from rich.markup import escape

from zutplan.cache import JsonFileStore
from zutplan.client import PlanClient
from zutplan.config import Settings, load_settings
from zutplan.exceptions import ConfigurationError, ZutPlanError
from zutplan.layout import find_conflicts
from zutplan.periods import period_kind
from zutplan.render import render_schedule
from zutplan.service import PlanRequest, PlanService, build_cache


def _request_from_args(args: argparse.Namespace, view_mode: str) -> PlanRequest:
    return PlanRequest(
        view_mode=view_mode,
        current_date=args.date,
        album=(args.album or "").strip(),
        search_category=(args.category or "").strip(),
        query=(args.query or "").strip(),
    )


def _cmd_plan(args: argparse.Namespace, service: PlanService, console: Console) -> int:
    """
    Show one timetable view.
    """
    result = service.load(_request_from_args(args, args.view), force_refresh=args.refresh)

    if args.json:
        console.print_json(json.dumps(result.to_dict(), ensure_ascii=False))
        return 0

    if not result.diagnostics.identity:
        console.print("No album or search query given (use --album or --query).")
    render_schedule(result, console)
    return 0


def _cmd_conflicts(args: argparse.Namespace, service: PlanService, console: Console) -> int:
    """
    Print overlapping classes of the week containing --date.
    """
    result = service.load(_request_from_args(args, "week"), force_refresh=args.refresh)
    events = [item.event for col in result.day_columns for item in col.events]

    confs = find_conflicts(events)
    if not confs:
        console.print(f"No conflicts in {result.header_label}.")
        return 0

    console.print(f"Conflicts found: {len(confs)}")
    for a, b in confs:
        console.print(
            escape(f"- {a.day} {a.start_str}-{a.end_str} {a.title}  <->  {b.start_str}-{b.end_str} {b.title}")
        )
    return 0


def _cmd_suggest(args: argparse.Namespace, client: PlanClient, console: Console) -> int:
    text = (args.text or "").strip()
    if not text:
        console.print("Please provide a search text.")
        return 1

    items = client.fetch_suggestions(args.kind, text)
    if not items:
        console.print("No results.")
        return 0

    # show max 20
    for item in items[:20]:
        console.print(escape(item))
    if len(items) > 20:
        console.print(f"... and {len(items) - 20} more results")
    return 0


def _cmd_periods(client: PlanClient, console: Console) -> int:
    periods = client.fetch_session_periods()
    if not periods:
        console.print("No academic calendar periods found.")
        return 0
    for p in periods:
        console.print(f"{p.start} .. {p.end}  {p.key} ({period_kind(p.key)})")
    return 0


def _cmd_cache_clear(settings: Settings, console: Console) -> int:
    removed = JsonFileStore(settings.cache_dir).clear()
    console.print(f"Removed {removed} cached entries from {settings.cache_dir}")
    return 0


def _add_target_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--date", "-d", type=str, default="", help="Anchor date YYYY-MM-DD (default: today)")
    p.add_argument("--album", "-a", type=str, default="", help="Student album number")
    p.add_argument("--category", "-c", type=str, default="", help="Search category: teacher, room, group, subject")
    p.add_argument("--query", "-q", type=str, default="", help="Search text (overrides --album)")
    p.add_argument("--refresh", action="store_true", help="Ignore cached results")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="zutplan", description="ZUT timetable in the terminal")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log what is fetched and cached")
    sub = parser.add_subparsers(dest="command", required=True)

    p_plan = sub.add_parser("plan", help="Show the timetable")
    p_plan.add_argument("--view", choices=["day", "week", "month"], default="week")
    p_plan.add_argument("--json", action="store_true", help="Print the result as JSON")
    _add_target_args(p_plan)

    p_conf = sub.add_parser("conflicts", help="Show overlapping classes in a week")
    _add_target_args(p_conf)

    p_suggest = sub.add_parser("suggest", help="Autocomplete a search value")
    p_suggest.add_argument("kind", type=str, help="teacher, room, group or subject")
    p_suggest.add_argument("text", type=str, help="Beginning of the value")

    sub.add_parser("periods", help="Show exam sessions and breaks of the academic year")
    sub.add_parser("cache-clear", help="Remove cached results")

    return parser


def main(argv: list[str] | None = None, console: Optional[Console] = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    console = console or Console()

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings()
    except ConfigurationError as e:
        console.print(f"Configuration error: {e}")
        raise SystemExit(1)

    if args.command == "cache-clear":
        raise SystemExit(_cmd_cache_clear(settings, console))

    client = PlanClient(settings)
    service = PlanService(client, build_cache(settings), settings)

    try:
        if args.command == "plan":
            raise SystemExit(_cmd_plan(args, service, console))
        if args.command == "conflicts":
            raise SystemExit(_cmd_conflicts(args, service, console))
        if args.command == "suggest":
            raise SystemExit(_cmd_suggest(args, client, console))
        if args.command == "periods":
            raise SystemExit(_cmd_periods(client, console))
    except ZutPlanError as e:
        console.print(f"Error: {e}")
        raise SystemExit(1)

    raise SystemExit(2)
