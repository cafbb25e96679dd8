"""
Timeline periods
================

The timeline view groups events relative to a reference month:

- current:   events happening this month, plus events whose preparation
             starts this month;
- upcoming:  events that need preparation and start 1-3 months ahead;
- long_term: events that need preparation and start 4-12 months ahead.

Distances are whole calendar months between the reference month and the
event's nominal start (see `resolver.occurrence_start`), not days.
An event lands in at most one bucket; earlier buckets win.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set
from .models import Event, TimelinePeriod, TimelinePeriods, YearMonth, MONTH_ABBR
from .prep import prep_window
from .resolver import is_active_in, occurrence_start

CURRENT = "current"
UPCOMING = "upcoming"
LONG_TERM = "long_term"


@dataclass(frozen=True)
class TimelineConfig:
    """Lookahead horizons, in calendar months."""
    upcoming_months: int = 3
    long_term_months: int = 12


def build_periods(
    events: Sequence[Event],
    month: int,
    year: int,
    *,
    config: Optional[TimelineConfig] = None,
) -> TimelinePeriods:
    """Bucket `events` into current / upcoming / long-term periods."""
    config = config or TimelineConfig()
    ref = YearMonth(year, month)

    active = [e for e in events if is_active_in(e, month, year)]
    taken: Set[int] = {id(e) for e in active}
    prep_now = [e for e in events if id(e) not in taken and prep_window(e) == ref]
    taken.update(id(e) for e in prep_now)

    upcoming = _ahead(events, ref, 1, config.upcoming_months, taken)
    taken.update(id(e) for e in upcoming)
    long_term = _ahead(events, ref, config.upcoming_months + 1, config.long_term_months, taken)

    return TimelinePeriods(
        current=TimelinePeriod(
            kind=CURRENT,
            title="This Month",
            description=f"{MONTH_ABBR[month - 1]} {year} Activities",
            month=month, year=year,
            events=active + prep_now,
        ),
        upcoming=TimelinePeriod(
            kind=UPCOMING,
            title="Upcoming Events",
            description="Events in next 2-3 months",
            month=month, year=year,
            events=upcoming,
        ),
        long_term=TimelinePeriod(
            kind=LONG_TERM,
            title="Long-term Planning",
            description="Prep work needed for events 4+ months out",
            month=month, year=year,
            events=long_term,
        ),
    )


def _ahead(events: Sequence[Event], ref: YearMonth, lo: int, hi: int, taken: Set[int]) -> List[Event]:
    """Events needing prep whose start is lo..hi months after `ref`."""
    out: List[Event] = []
    for e in events:
        if id(e) in taken or prep_window(e) is None:
            continue
        start = occurrence_start(e, ref)
        if start is None:
            continue
        if lo <= ref.months_until(start) <= hi:
            out.append(e)
    return out
