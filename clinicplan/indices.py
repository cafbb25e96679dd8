"""
Indices (precomputed lookup tables)
===================================

The planner builds simple indices (maps from value -> list of positions in
the event list) so that a view only runs the resolver on events that could
possibly occur in the requested year.

Example:
- `by_id[42]` gives the position of the event with id 42.
- `start_year_to_ids[2024]` gives positions of events starting in 2024.
- `last_year[i]` is the last year event i can occur in (None = open-ended).

Why sorted lists?
- `years_sorted` lets `candidate_ids` find "start year <= Y" with one
  binary search instead of scanning every event.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Union
from bisect import bisect_right
from .models import Event, MultiMonth, RecurringMultiMonth, RecurringSingleMonth, SingleMonth


@dataclass
class Indices:
    """Container of precomputed indices for fast candidate selection."""
    by_id: Dict[Union[int, str], int]
    start_year_to_ids: Dict[int, List[int]]
    years_sorted: List[int]
    last_year: Dict[int, Optional[int]]


def build_indices(events: List[Event]) -> Indices:
    """Build indices from the loaded event list.

    Events without a usable start are left out of the year indices: they can
    never be active, so they are never candidates.
    """
    by_id: Dict[Union[int, str], int] = {}
    start_year_to_ids: Dict[int, List[int]] = {}
    last_year: Dict[int, Optional[int]] = {}

    for i, e in enumerate(events):
        by_id[e.id] = i
        occ = e.occurrence
        if occ is None:
            continue
        if isinstance(occ, SingleMonth):
            first, last = occ.year, occ.year
        elif isinstance(occ, MultiMonth):
            first, last = occ.start.year, occ.end.year
        elif isinstance(occ, (RecurringSingleMonth, RecurringMultiMonth)):
            first, last = occ.since_year, None
        start_year_to_ids.setdefault(first, []).append(i)
        last_year[i] = last

    years_sorted = sorted(start_year_to_ids.keys())
    return Indices(by_id=by_id, start_year_to_ids=start_year_to_ids,
                   years_sorted=years_sorted, last_year=last_year)


def candidate_ids(idx: Indices, year: int) -> List[int]:
    """Return sorted positions of events that may be active somewhere in `year`.

    Binary search on `years_sorted` gives every event starting on or before
    `year`; those that ended in an earlier year are dropped.
    """
    hi = bisect_right(idx.years_sorted, year)
    out: List[int] = []
    for y in idx.years_sorted[:hi]:
        for i in idx.start_year_to_ids[y]:
            last = idx.last_year[i]
            if last is None or last >= year:
                out.append(i)
    out.sort()
    return out
