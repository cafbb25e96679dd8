"""
Data model (Event, occurrence variants, view containers)
========================================================

Each raw event record is converted into an immutable `Event` object.
We keep it immutable (`frozen=True`) so that:
- views never modify the events they are handed, and
- the occurrence variant can be resolved once, at construction time.

The occurrence variant is a small tagged union:

    SingleMonth           one month of one year
    MultiMonth            an inclusive (year, month) span
    RecurringSingleMonth  the same month every year since `since_year`
    RecurringMultiMonth   the same month span every year since `since_year`
                          (may wrap December -> January)

The resolver dispatches on these classes instead of re-reading the nullable
fields of the record on every query.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterator, List, Optional, Tuple, Union

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
MONTH_ABBR = [name[:3] for name in MONTH_NAMES]


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month, ordered by year then month."""
    year: int
    month: int

    @property
    def index(self) -> int:
        """Months elapsed since January of year 0 (handy for distances)."""
        return self.year * 12 + (self.month - 1)

    @classmethod
    def from_index(cls, index: int) -> "YearMonth":
        return cls(year=index // 12, month=index % 12 + 1)

    @classmethod
    def from_date(cls, d: date) -> "YearMonth":
        return cls(year=d.year, month=d.month)

    def shift(self, months: int) -> "YearMonth":
        """Move `months` calendar months forward (negative = backward)."""
        return YearMonth.from_index(self.index + months)

    def months_until(self, other: "YearMonth") -> int:
        """Whole calendar months from self to `other` (negative if other is earlier)."""
        return other.index - self.index

    def label(self) -> str:
        return f"{MONTH_ABBR[self.month - 1]} {self.year}"


@dataclass(frozen=True)
class OutreachAngle:
    """One outreach angle selection (display only)."""
    angle: str
    notes: str = ""


# ---------------- Occurrence variants ----------------

@dataclass(frozen=True)
class SingleMonth:
    year: int
    month: int


@dataclass(frozen=True)
class MultiMonth:
    start: YearMonth
    end: YearMonth


@dataclass(frozen=True)
class RecurringSingleMonth:
    since_year: int
    month: int


@dataclass(frozen=True)
class RecurringMultiMonth:
    since_year: int
    start_month: int
    end_month: int

    @property
    def wraps(self) -> bool:
        """True when the span crosses December -> January (e.g. Nov-Feb)."""
        return self.end_month < self.start_month


Occurrence = Union[SingleMonth, MultiMonth, RecurringSingleMonth, RecurringMultiMonth]


@dataclass(frozen=True)
class Event:
    """One planned clinic event.

    `start_month`/`start_year` are the current fields; `month`/`year` are the
    legacy ones and are only consulted when the current fields are missing.
    """
    id: Union[int, str]
    title: str = ""
    description: str = ""
    start_month: Optional[int] = None
    start_year: Optional[int] = None
    end_month: Optional[int] = None
    end_year: Optional[int] = None
    month: Optional[int] = None
    year: Optional[int] = None
    is_recurring: bool = False
    prep_months_needed: int = 0
    prep_start_date: Optional[date] = None
    outreach_angles: Tuple[OutreachAngle, ...] = ()
    occurrence: Optional[Occurrence] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "occurrence", _resolve_occurrence(self))

    def effective_start(self) -> Optional[YearMonth]:
        """Start month/year, preferring the new fields over the legacy ones."""
        m = self.start_month or self.month
        y = self.start_year or self.year
        if not m or not y:
            return None
        return YearMonth(year=y, month=m)

    @property
    def is_multi_month(self) -> bool:
        return isinstance(self.occurrence, (MultiMonth, RecurringMultiMonth))


def _resolve_occurrence(e: Event) -> Optional[Occurrence]:
    start = e.effective_start()
    if start is None:
        return None

    if e.is_recurring:
        # Only month-of-year matters for recurring spans; any end year is ignored.
        if e.end_month and e.end_month != start.month:
            return RecurringMultiMonth(since_year=start.year, start_month=start.month, end_month=e.end_month)
        return RecurringSingleMonth(since_year=start.year, month=start.month)

    if e.end_month:
        end_year = e.end_year
        if not end_year:
            end_year = start.year + 1 if e.end_month < start.month else start.year
        end = YearMonth(year=end_year, month=e.end_month)
        if end > start:
            return MultiMonth(start=start, end=end)
    return SingleMonth(year=start.year, month=start.month)


# ---------------- View containers ----------------

@dataclass
class MonthSlot:
    """One month of a quarter view."""
    month: int
    year: int
    direct_events: List[Event] = field(default_factory=list)
    prep_events: List[Event] = field(default_factory=list)

    @property
    def name(self) -> str:
        return MONTH_NAMES[self.month - 1]


@dataclass
class TimelinePeriod:
    """One bucket of the timeline view (`current`, `upcoming` or `long_term`)."""
    kind: str
    title: str
    description: str
    month: int
    year: int
    events: List[Event] = field(default_factory=list)


@dataclass
class TimelinePeriods:
    """The three timeline buckets. Always all three, possibly empty."""
    current: TimelinePeriod
    upcoming: TimelinePeriod
    long_term: TimelinePeriod

    def __iter__(self) -> Iterator[TimelinePeriod]:
        return iter((self.current, self.upcoming, self.long_term))

    def as_dict(self) -> Dict[str, List[Event]]:
        return {p.kind: p.events for p in self}


@dataclass
class MonthView:
    """Month page: what happens this month and what needs preparing."""
    month: int
    year: int
    direct_events: List[Event] = field(default_factory=list)
    prep_events: List[Event] = field(default_factory=list)
    # ids of prep events whose preparation starts exactly this month
    prep_starting_ids: List[Union[int, str]] = field(default_factory=list)
