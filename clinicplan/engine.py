"""
Planner engine
==============

The planner is the facade the CLI (or any other front end) talks to:

1) Load events through an `EventRepository` -> list of immutable Events
2) Build indices -> fast candidate lookup by year
3) Keep a navigation cursor (the month the user is looking at)
4) Answer view queries (year / quarter / month / timeline) through the pure
   functions in `aggregate`, `timeline`, `resolver` and `prep`
5) Export or report on the events of a view

Membership answers are memoized per (event id, month, year). The cache is
only valid for the event list it was built from, so `reload()` clears it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple, Union
import csv
import json
import logging
from .aggregate import build_month, build_quarter, events_in_range, quarter_of
from .indices import Indices, build_indices, candidate_ids
from .models import Event, MonthSlot, MonthView, TimelinePeriods, YearMonth
from .prep import prep_window
from .repository import EventRepository
from .resolver import is_active_in
from .timeline import TimelineConfig, build_periods

logger = logging.getLogger(__name__)

EventId = Union[int, str]


@dataclass
class ViewState:
    """The month currently shown (like a calendar page)."""
    month: int
    year: int

    @property
    def quarter(self) -> int:
        return quarter_of(self.month)


@dataclass
class Planner:
    """Event planner over an in-memory event list.

    The planner stores:
    - events: all Event records
    - idx: precomputed indices for candidate lookup
    - state: the month being viewed

    Views never modify events; navigation only moves `state`.
    """
    events: List[Event]
    idx: Indices
    repository: Optional[EventRepository] = None
    timeline_config: TimelineConfig = field(default_factory=TimelineConfig)
    # Stores CLI commands (for reproducibility in reports)
    command_log: List[str] = field(default_factory=list)
    state: ViewState = field(init=False)

    _active_cache: Dict[Tuple[EventId, int, int], bool] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.go_today()

    @classmethod
    def from_events(cls, events: List[Event], **kwargs) -> "Planner":
        return cls(events=list(events), idx=build_indices(events), **kwargs)

    @classmethod
    def from_repository(cls, repository: EventRepository, **kwargs) -> "Planner":
        events = repository.list_all()
        return cls(events=events, idx=build_indices(events), repository=repository, **kwargs)

    def reload(self) -> int:
        """Re-read events from the repository. Returns the new event count."""
        if self.repository is None:
            raise ValueError("Planner has no repository to reload from")
        self.events = self.repository.list_all()
        self.idx = build_indices(self.events)
        self._active_cache.clear()
        logger.debug("Reloaded %d events, membership cache cleared", len(self.events))
        return len(self.events)

    # ---------------- Navigation ----------------
    def go_to(self, month: int, year: int) -> None:
        if not 1 <= month <= 12:
            raise ValueError(f"month must be 1..12, got {month}")
        self.state = ViewState(month=month, year=year)

    def go_today(self, today: Optional[date] = None) -> None:
        today = today or date.today()
        self.state = ViewState(month=today.month, year=today.year)

    def next_month(self) -> ViewState:
        ym = YearMonth(self.state.year, self.state.month).shift(1)
        self.state = ViewState(month=ym.month, year=ym.year)
        return self.state

    def previous_month(self) -> ViewState:
        ym = YearMonth(self.state.year, self.state.month).shift(-1)
        self.state = ViewState(month=ym.month, year=ym.year)
        return self.state

    # ---------------- Lookups ----------------
    def get_event(self, event_id: EventId) -> Optional[Event]:
        i = self.idx.by_id.get(event_id)
        if i is None and isinstance(event_id, str) and event_id.isdigit():
            i = self.idx.by_id.get(int(event_id))
        return self.events[i] if i is not None else None

    def is_active(self, event: Event, month: int, year: int) -> bool:
        key = (event.id, month, year)
        hit = self._active_cache.get(key)
        if hit is None:
            hit = is_active_in(event, month, year)
            self._active_cache[key] = hit
        return hit

    def prep_for(self, event_id: EventId) -> Optional[YearMonth]:
        e = self.get_event(event_id)
        return prep_window(e) if e is not None else None

    # ---------------- Views ----------------
    def year_view(self, year: Optional[int] = None) -> Dict[int, List[Event]]:
        year = self.state.year if year is None else year
        candidates = [self.events[i] for i in candidate_ids(self.idx, year)]
        return {m: [e for e in candidates if self.is_active(e, m, year)] for m in range(1, 13)}

    def quarter_view(self, quarter: Optional[int] = None, year: Optional[int] = None) -> List[MonthSlot]:
        quarter = self.state.quarter if quarter is None else quarter
        year = self.state.year if year is None else year
        return build_quarter(self.events, quarter, year)

    def month_view(self, month: Optional[int] = None, year: Optional[int] = None) -> MonthView:
        month = self.state.month if month is None else month
        year = self.state.year if year is None else year
        return build_month(self.events, month, year)

    def timeline(self, month: Optional[int] = None, year: Optional[int] = None) -> TimelinePeriods:
        month = self.state.month if month is None else month
        year = self.state.year if year is None else year
        return build_periods(self.events, month, year, config=self.timeline_config)

    def in_range(self, start: YearMonth, end: YearMonth) -> List[Event]:
        if end < start:
            return []
        pool: Dict[int, Event] = {}
        for y in range(start.year, end.year + 1):
            for i in candidate_ids(self.idx, y):
                pool[i] = self.events[i]
        return events_in_range([pool[i] for i in sorted(pool)], start, end)

    # ---------------- Output operations ----------------
    def export_csv(self, path: str, events: Optional[List[Event]] = None) -> None:
        rows = self.events if events is None else events
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["id", "title", "start_month", "start_year", "end_month", "end_year",
                        "is_recurring", "prep_months_needed", "prep_start_date", "outreach_angles"])
            for e in rows:
                start = e.effective_start()
                w.writerow([e.id, e.title,
                            start.month if start else "", start.year if start else "",
                            e.end_month or "", e.end_year or "",
                            e.is_recurring, e.prep_months_needed,
                            e.prep_start_date.isoformat() if e.prep_start_date else "",
                            json.dumps([{"angle": a.angle, "notes": a.notes} for a in e.outreach_angles])])

    def export_json(self, path: str, events: Optional[List[Event]] = None) -> None:
        """Export events to a JSON file that `load_events_json` can read back."""
        rows = self.events if events is None else events
        payload = []
        for e in rows:
            start = e.effective_start()
            window = prep_window(e)
            payload.append({
                "id": e.id,
                "title": e.title,
                "description": e.description,
                "start_month": start.month if start else None,
                "start_year": start.year if start else None,
                "end_month": e.end_month,
                "end_year": e.end_year,
                "is_recurring": e.is_recurring,
                "prep_months_needed": e.prep_months_needed,
                "prep_start_date": e.prep_start_date.isoformat() if e.prep_start_date else None,
                "prep_window": {"month": window.month, "year": window.year} if window else None,
                "outreach_angles": [{"angle": a.angle, "notes": a.notes} for a in e.outreach_angles],
            })
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
