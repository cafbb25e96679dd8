"""
Calendar aggregators (year / quarter / month)
=============================================

These functions take the full, already-loaded event list and slice it into
calendar views. They are pure: no I/O, no shared state, safe to call from
any number of renders at once.

- build_year:    12 month buckets of directly occurring events (no prep).
- build_quarter: 3 month slots, each with direct events and prep-only events.
- build_month:   one month with direct events and events in their prep period.
"""

from __future__ import annotations
from typing import Dict, List, Sequence
from .models import Event, MonthSlot, MonthView, YearMonth
from .prep import is_in_prep_period, is_prep_starting_in, prep_window
from .resolver import is_active_in


def quarter_of(month: int) -> int:
    return (month - 1) // 3 + 1


def quarter_months(quarter: int) -> List[int]:
    """Months of a quarter, e.g. 2 -> [4, 5, 6]."""
    first = (quarter - 1) * 3 + 1
    return [first, first + 1, first + 2]


def build_year(events: Sequence[Event], year: int) -> Dict[int, List[Event]]:
    """Map month (1..12) -> events active in that month of `year`."""
    return {m: [e for e in events if is_active_in(e, m, year)] for m in range(1, 13)}


def build_quarter(events: Sequence[Event], quarter: int, year: int) -> List[MonthSlot]:
    """Three month slots for `quarter` of `year`.

    `prep_events` holds events counted by month (`prep_months_needed > 0`)
    whose prep window falls in the slot, that do not start in the slot and
    are not already in `direct_events`. Quarters outside 1..4 give [].
    """
    if quarter not in (1, 2, 3, 4):
        return []

    slots: List[MonthSlot] = []
    for m in quarter_months(quarter):
        here = YearMonth(year, m)
        direct = [e for e in events if is_active_in(e, m, year)]
        prep: List[Event] = []
        for e in events:
            if (e.prep_months_needed or 0) <= 0:
                continue
            if e.effective_start() == here or e in direct:
                continue
            if prep_window(e) == here:
                prep.append(e)
        slots.append(MonthSlot(month=m, year=year, direct_events=direct, prep_events=prep))
    return slots


def build_month(events: Sequence[Event], month: int, year: int) -> MonthView:
    """Events happening in (month, year) and events being prepared then."""
    direct = [e for e in events if is_active_in(e, month, year)]
    prep = [e for e in events if e not in direct and is_in_prep_period(e, month, year)]
    starting = [e.id for e in prep if is_prep_starting_in(e, month, year)]
    return MonthView(month=month, year=year, direct_events=direct, prep_events=prep, prep_starting_ids=starting)


def events_in_range(events: Sequence[Event], start: YearMonth, end: YearMonth) -> List[Event]:
    """Events active in at least one month of the inclusive range [start, end]."""
    if end < start:
        return []
    months = [YearMonth.from_index(i) for i in range(start.index, end.index + 1)]
    return [e for e in events if any(is_active_in(e, ym.month, ym.year) for ym in months)]
