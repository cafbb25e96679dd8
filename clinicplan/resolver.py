"""
Occurrence resolver
===================

Answers one question: is this event active in (month, year)?

Every view (annual, quarter, month, timeline) calls `is_active_in` instead of
re-implementing the month/wrap logic inline. The rules, in priority order:

1) recurring events are never active before their start year;
2) recurring multi-month events compare months only (year-agnostic), with a
   December -> January wrap when the end month is before the start month;
3) recurring single-month events match on the month;
4) non-recurring spans match when (year, month) lies inside the inclusive range;
5) non-recurring single-month events match on year and month;
6) anything else (e.g. no usable start) is never active.

Recurrence is checked before span type because a recurring event's end year,
if populated, must be ignored.
"""

from __future__ import annotations
from typing import List, Optional
from .models import (
    Event, YearMonth,
    SingleMonth, MultiMonth, RecurringSingleMonth, RecurringMultiMonth,
)


def is_active_in(event: Event, target_month: int, target_year: int) -> bool:
    """Return True if `event` occurs in `target_month` of `target_year`."""
    occ = event.occurrence

    if isinstance(occ, (RecurringSingleMonth, RecurringMultiMonth)):
        if target_year < occ.since_year:
            return False
        if isinstance(occ, RecurringMultiMonth):
            if occ.wraps:
                return target_month >= occ.start_month or target_month <= occ.end_month
            return occ.start_month <= target_month <= occ.end_month
        return target_month == occ.month

    if isinstance(occ, MultiMonth):
        return occ.start <= YearMonth(target_year, target_month) <= occ.end

    if isinstance(occ, SingleMonth):
        return target_year == occ.year and target_month == occ.month

    return False


def active_months(event: Event, year: int) -> List[int]:
    """Months (1..12) of `year` in which the event is active."""
    return [m for m in range(1, 13) if is_active_in(event, m, year)]


def occurrence_start(event: Event, on_or_after: YearMonth) -> Optional[YearMonth]:
    """Nominal start of the event's occurrence relative to a reference month.

    Non-recurring events have exactly one start: the literal one.
    Recurring events start every year; this returns the first start at or
    after `on_or_after`, and never one before the event's first year.
    """
    occ = event.occurrence
    if occ is None:
        return None
    if isinstance(occ, SingleMonth):
        return YearMonth(occ.year, occ.month)
    if isinstance(occ, MultiMonth):
        return occ.start

    month = occ.month if isinstance(occ, RecurringSingleMonth) else occ.start_month
    candidate = YearMonth(max(occ.since_year, on_or_after.year), month)
    if candidate < on_or_after:
        candidate = YearMonth(candidate.year + 1, month)
    return candidate
