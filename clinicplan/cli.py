"""
clinicplan Command Line Interface (CLI)
=======================================

This file provides the interactive terminal program you run like:

    python -m clinicplan.cli --events "path/to/events.json"

It demonstrates:
- Argument parsing (argparse)
- A REPL loop (Read-Eval-Print Loop) for commands
- Mapping user commands to planner views (year, quarter, month, timeline)

The CLI DOES NOT modify your event file. It loads it once (or on `reload`)
and answers calendar questions about the in-memory events.
"""

from __future__ import annotations
from datetime import date
from typing import List, Optional
import argparse
import logging
import shlex
from .display import display_date, event_status
from .engine import Planner
from .models import Event, YearMonth, MONTH_NAMES
from .repository import FileEventRepository

HELP = """
clinicplan commands
-------------------

1) View
   year [Y]                          (example: year 2025)
   quarter [Q] [Y]                   (example: quarter 4 2025)
   month [M] [Y]                     (example: month 11 2025)
   timeline [M] [Y]                  (example: timeline 3 2025)
   range <M1> <Y1> <M2> <Y2>         (example: range 11 2025 2 2026)

2) Navigate (moves the current month)
   next | prev | today

3) Inspect
   stats
   event <id>
   prep <id>

4) Export / report
   export csv|json "<path>" [year]   (whole list, or events active in year)
   report "<out.docx>" [year]

5) Data
   reload

6) Exit
   quit
"""


def _parse_month_arg(value: str) -> date:
    """argparse type for --today YYYY-MM."""
    try:
        y, m = value.split("-")[:2]
        return date(int(y), int(m), 1)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM, got {value!r}") from e


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the clinicplan CLI.

    1) Load events through a file repository
    2) Build the planner (indices + cursor)
    3) Start an interactive REPL
    """
    ap = argparse.ArgumentParser(prog="clinicplan")
    ap.add_argument("--events", required=True, help="Path to an event export (.json, .csv or .xlsx)")
    ap.add_argument("--today", type=_parse_month_arg, default=None, help="Reference month YYYY-MM (default: now)")
    ap.add_argument("--strict", action="store_true", help="Fail on invalid event records instead of skipping them")
    ap.add_argument("-v", "--verbose", action="store_true", help="Show loader/planner log messages")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print("Loading events...")
    repo = FileEventRepository(args.events, strict=args.strict)
    planner = Planner.from_repository(repo)
    if args.today:
        planner.go_today(args.today)

    print(f"Loaded {len(planner.events)} events. Type 'help' for commands.")
    while True:
        try:
            line = input(f"clinicplan [{MONTH_NAMES[planner.state.month - 1][:3]} {planner.state.year}]> ")
            stripped = line.strip()
            if stripped:
                cmd0 = stripped.split()[0].lower()
                if cmd0 not in ("help", "stats", "quit", "exit"):
                    planner.command_log.append(stripped)
        except EOFError:
            break
        if not stripped:
            continue
        if stripped.lower() in ("quit", "exit"):
            break
        try:
            handle(planner, stripped)
        except Exception as e:
            print(f"Error: {e}")


def _ints(parts: List[str], n: int, defaults: List[int]) -> List[int]:
    """Read up to n positional ints, falling back to defaults."""
    out = []
    for i in range(n):
        out.append(int(parts[i]) if i < len(parts) else defaults[i])
    return out


def handle(planner: Planner, line: str) -> None:
    """Handle one CLI command line.

    This parses the command and calls the appropriate planner method.
    """
    parts = shlex.split(line)
    cmd, args = parts[0].lower(), parts[1:]
    state = planner.state

    if cmd == "help":
        print(HELP)
        return

    if cmd == "stats":
        recurring = sum(1 for e in planner.events if e.is_recurring)
        multi = sum(1 for e in planner.events if e.is_multi_month)
        unscheduled = sum(1 for e in planner.events if e.occurrence is None)
        print(f"Events: {len(planner.events)} | Recurring: {recurring} | Multi-month: {multi} | Unscheduled: {unscheduled}")
        print(f"Start years: {', '.join(str(y) for y in planner.idx.years_sorted) or '-'}")
        return

    if cmd == "reload":
        print(f"Reloaded {planner.reload()} events.")
        return

    if cmd == "next":
        s = planner.next_month(); print(f"Now viewing {MONTH_NAMES[s.month - 1]} {s.year}"); return
    if cmd == "prev":
        s = planner.previous_month(); print(f"Now viewing {MONTH_NAMES[s.month - 1]} {s.year}"); return
    if cmd == "today":
        planner.go_today(); s = planner.state
        print(f"Now viewing {MONTH_NAMES[s.month - 1]} {s.year}"); return

    if cmd == "year":
        (year,) = _ints(args, 1, [state.year])
        for m, evs in planner.year_view(year).items():
            print(f"{MONTH_NAMES[m - 1]:<10} ({len(evs)})")
            _print_rows(evs, viewing_year=year, indent="    ")
        return

    if cmd == "quarter":
        q, year = _ints(args, 2, [state.quarter, state.year])
        if q not in (1, 2, 3, 4):
            raise ValueError("quarter must be 1..4")
        print(f"Q{q} {year}")
        for slot in planner.quarter_view(q, year):
            print(f"{slot.name} {slot.year}: {len(slot.direct_events)} events, {len(slot.prep_events)} prep")
            _print_rows(slot.direct_events, viewing_year=year, indent="    ")
            for e in slot.prep_events:
                print(f"    prep: [{e.id}] {e.title} (event {display_date(e).start}, {e.prep_months_needed} months prep)")
        return

    if cmd == "month":
        m, year = _ints(args, 2, [state.month, state.year])
        planner.go_to(m, year)
        view = planner.month_view(m, year)
        print(f"{MONTH_NAMES[m - 1]} {year}: {len(view.direct_events)} events")
        _print_rows(view.direct_events, viewing_year=year, indent="    ")
        if view.prep_events:
            print("In preparation:")
            for e in view.prep_events:
                flag = " (prep starts this month)" if e.id in view.prep_starting_ids else ""
                print(f"    [{e.id}] {e.title} -> {display_date(e).start}{flag}")
        return

    if cmd == "timeline":
        m, year = _ints(args, 2, [state.month, state.year])
        planner.go_to(m, year)
        for period in planner.timeline(m, year):
            print(f"{period.title} - {period.description} ({len(period.events)})")
            for e in period.events:
                status = event_status(e, period.kind, m, year)
                print(f"    [{e.id}] {e.title} | {status.label}")
        return

    if cmd == "range":
        m1, y1, m2, y2 = _ints(args, 4, [state.month, state.year, state.month, state.year])
        evs = planner.in_range(YearMonth(y1, m1), YearMonth(y2, m2))
        print(f"{len(evs)} events between {YearMonth(y1, m1).label()} and {YearMonth(y2, m2).label()}")
        _print_rows(evs, indent="    ")
        return

    if cmd == "event":
        e = _require_event(planner, args)
        d = display_date(e)
        print(f"[{e.id}] {e.title}")
        if e.description:
            print(f"    {e.description}")
        print(f"    When: {d.start}" + (f" - {d.end}" if d.is_multi_month else "") + (" (yearly)" if e.is_recurring else ""))
        if e.outreach_angles:
            print("    Angles: " + ", ".join(a.angle for a in e.outreach_angles))
        return

    if cmd == "prep":
        e = _require_event(planner, args)
        w = planner.prep_for(e.id)
        print(f"[{e.id}] {e.title}: " + (f"start prep in {w.label()}" if w else "no preparation needed"))
        return

    if cmd == "export":
        # export <csv|json> "<path>" [year]
        if len(args) < 2:
            print('Usage: export csv "out.csv" [year]  OR  export json "out.json" [year]')
            return
        fmt, out_path = args[0].lower(), args[1]
        evs = None
        if len(args) >= 3:
            year = int(args[2])
            seen = {}
            for month_events in planner.year_view(year).values():
                for e in month_events:
                    seen.setdefault(e.id, e)
            evs = list(seen.values())
            if not evs:
                print(f"Nothing to export: no events in {year}.")
                return
        if fmt == "csv":
            planner.export_csv(out_path, evs); print(f"Exported CSV to {out_path}"); return
        if fmt == "json":
            planner.export_json(out_path, evs); print(f"Exported JSON to {out_path}"); return
        print("Unknown export format. Use: csv or json")
        return

    if cmd == "report":
        # report "<path.docx>" [year]
        from .report import generate_docx_report, ReportConfig
        if not args:
            raise ValueError('Usage: report "<path.docx>" [year]')
        path = args[0]
        year = int(args[1]) if len(args) >= 2 else state.year
        repo = planner.repository
        cfg = ReportConfig(
            source_file=getattr(repo, "path", None),
            command_log=planner.command_log,
        )
        generate_docx_report(planner.events, year, path, config=cfg)
        print(f"Report written to {path}")
        return

    print("Unknown command. Type 'help'.")


def _require_event(planner: Planner, args: List[str]) -> Event:
    if not args:
        raise ValueError("event id required")
    e = planner.get_event(args[0])
    if e is None:
        raise ValueError(f"No event with id {args[0]!r}")
    return e


def _print_rows(rows: List[Event], viewing_year: Optional[int] = None, indent: str = "") -> None:
    for e in rows:
        d = display_date(e, viewing_year=viewing_year)
        when = f"{d.start} - {d.end}" if d.is_multi_month else d.start
        tag = " (yearly)" if e.is_recurring else ""
        print(f"{indent}[{e.id}] {e.title} | {when}{tag}")


if __name__ == "__main__":
    main()
