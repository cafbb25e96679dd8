"""
Preparation windows
===================

An event may need preparation before it starts. Two ways to say so:

- `prep_start_date`: an explicit date; its calendar month is the prep window.
- `prep_months_needed`: whole calendar months before the event's start.

The explicit date always wins. Zero, negative or missing month counts mean
"no preparation" and give None rather than a shifted date.
"""

from __future__ import annotations
from typing import Optional
from .models import Event, YearMonth


def prep_window(event: Event, *, occurrence_year: Optional[int] = None) -> Optional[YearMonth]:
    """Calendar month in which preparation for `event` should begin.

    By default the prep window is computed from the event's literal start.
    For recurring events a caller interested in a later cycle can pass
    `occurrence_year` to compute it relative to that year's start instead.
    """
    if event.prep_start_date is not None:
        return YearMonth.from_date(event.prep_start_date)

    months = event.prep_months_needed or 0
    if months <= 0:
        return None

    start = event.effective_start()
    if start is None:
        return None
    if occurrence_year is not None and event.is_recurring:
        start = YearMonth(occurrence_year, start.month)
    return start.shift(-months)


def needs_prep(event: Event) -> bool:
    return prep_window(event) is not None


def is_prep_starting_in(event: Event, month: int, year: int) -> bool:
    """True if preparation for the event begins in (month, year)."""
    return prep_window(event) == YearMonth(year, month)


def is_in_prep_period(event: Event, month: int, year: int) -> bool:
    """True if (month, year) lies between prep start and the event start.

    The event's own start month is excluded: by then the event is happening.
    """
    window = prep_window(event)
    start = event.effective_start()
    if window is None or start is None:
        return False
    return window <= YearMonth(year, month) < start
