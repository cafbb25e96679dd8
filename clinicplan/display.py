"""
Display helpers: date labels, timeline status labels, angle colours.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional
from .models import Event, YearMonth, MONTH_ABBR
from .resolver import is_active_in, occurrence_start
from .timeline import CURRENT, UPCOMING

DEFAULT_ANGLE = "PC"

# Colours used before outreach angles carried their own.
LEGACY_ANGLE_COLORS: Dict[str, str] = {
    "UC": "#FF6B6B",
    "PC": "#4ECDC4",
    "WPH": "#45B7D1",
    "Research": "#96CEB4",
}


@dataclass(frozen=True)
class DisplayDate:
    start: str
    end: Optional[str] = None
    is_multi_month: bool = False


@dataclass(frozen=True)
class EventStatus:
    label: str
    kind: str  # event | prep | upcoming | future


def display_date(event: Event, viewing_year: Optional[int] = None) -> DisplayDate:
    """Human label such as "Nov 2024" - "Feb 2025".

    Recurring events are shown in `viewing_year` when given; a wrapping span
    then ends in the following year.
    """
    start = event.effective_start()
    if start is None:
        return DisplayDate(start="Unscheduled")

    recurring_view = event.is_recurring and viewing_year is not None
    start_year = viewing_year if recurring_view else start.year
    start_label = f"{MONTH_ABBR[start.month - 1]} {start_year}"

    if not event.is_multi_month:
        return DisplayDate(start=start_label)

    end_month = event.end_month
    if recurring_view:
        end_year = viewing_year + 1 if end_month < start.month else viewing_year
    else:
        end_year = event.end_year or (start.year + 1 if end_month < start.month else start.year)
    return DisplayDate(start=start_label, end=f"{MONTH_ABBR[end_month - 1]} {end_year}", is_multi_month=True)


def event_status(event: Event, period_kind: str, month: int, year: int) -> EventStatus:
    """Label for an event shown in a timeline bucket."""
    if is_active_in(event, month, year):
        if event.is_recurring:
            return EventStatus(label="Yearly Event", kind="event")
        return EventStatus(label="Happening Now", kind="event")

    # recurring events are labelled with their next cycle, not their first year
    start = occurrence_start(event, YearMonth(year, month))
    when = start.label() if start is not None else "unscheduled"
    if period_kind == CURRENT:
        return EventStatus(label=f"Prep for {when}", kind="prep")
    if period_kind == UPCOMING:
        return EventStatus(label=f"Upcoming - {when}", kind="upcoming")
    return EventStatus(label=f"Plan Ahead - {when}", kind="future")


def primary_angle_color(event: Event, palette: Optional[Dict[str, str]] = None) -> str:
    """Colour of the event's first outreach angle."""
    angle = event.outreach_angles[0].angle if event.outreach_angles else DEFAULT_ANGLE
    if palette and angle in palette:
        return palette[angle]
    return LEGACY_ANGLE_COLORS.get(angle, LEGACY_ANGLE_COLORS[DEFAULT_ANGLE])
