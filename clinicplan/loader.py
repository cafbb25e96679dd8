"""
Event loader (raw records -> Event list)
========================================

Raw event records come from forms and exports, so they are loosely typed:
numbers may arrive as strings ("6", "6.0", ""), keys may be snake_case or
camelCase, and old records only carry `month`/`year` and a `category`.

Key ideas:
- Conversion helpers (_to_int/_to_str/_to_date) turn blanks into None.
- Column names in CSV/Excel files are matched case/punctuation-insensitively.
- Present but unparseable numbers/dates are rejected (InvalidEventError).
- Month values are range-checked here, so the occurrence core can trust them.
- The loader returns a list of immutable records; it never writes back.
"""

from __future__ import annotations
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import json
import logging
import re
import pandas as pd
from .exceptions import EventDataError, InvalidEventError
from .models import Event, OutreachAngle

logger = logging.getLogger(__name__)

# Old category names -> outreach angle codes
LEGACY_CATEGORY_ANGLES = {
    "urgent_care": "UC",
    "primary_care": "PC",
    "workplace": "WPH",
    "clinical_research": "Research",
}

# field -> accepted spellings (first match wins)
_FIELDS: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "event_id"),
    "title": ("title", "name"),
    "description": ("description",),
    "start_month": ("start_month", "startMonth"),
    "start_year": ("start_year", "startYear"),
    "end_month": ("end_month", "endMonth"),
    "end_year": ("end_year", "endYear"),
    "month": ("month",),
    "year": ("year",),
    "is_recurring": ("is_recurring", "isRecurring", "recurring"),
    "prep_months_needed": ("prep_months_needed", "prepMonthsNeeded"),
    "prep_start_date": ("prep_start_date", "prepStartDate"),
    "outreach_angles": ("outreach_angles", "outreachAngles"),
    "category": ("category", "category_name"),
}


def _missing(x) -> bool:
    if x is None:
        return True
    if isinstance(x, (list, tuple, dict)):
        return False
    if isinstance(x, str):
        return not x.strip()
    try:
        return bool(pd.isna(x))
    except (TypeError, ValueError):
        return False


def _to_int(x) -> Optional[int]:
    """Convert a cell/form value to int, returning None if missing/invalid."""
    if _missing(x): return None
    try: return int(float(x))
    except (TypeError, ValueError, OverflowError): return None


def _to_str(x) -> str:
    if _missing(x): return ""
    return str(x).strip()


def _to_bool(x) -> bool:
    if _missing(x): return False
    if isinstance(x, str):
        return x.strip().lower() in ("true", "t", "yes", "y", "1")
    return bool(x)


def _to_date(x) -> Optional[date]:
    if _missing(x): return None
    if isinstance(x, datetime): return x.date()
    if isinstance(x, date): return x
    try:
        return pd.Timestamp(str(x).strip()).date()
    except (TypeError, ValueError):
        return None


def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())


def _get(record: Mapping[str, Any], field: str) -> Any:
    names = _FIELDS[field]
    for n in names:
        if n in record:
            return record[n]
    norm_map = {_norm(k): k for k in record}
    for n in names:
        k = norm_map.get(_norm(n))
        if k is not None:
            return record[k]
    return None


def _field_int(record: Mapping[str, Any], field: str, record_id) -> Optional[int]:
    """Integer field; blank is None, anything else unparseable is an error."""
    raw = _get(record, field)
    value = _to_int(raw)
    if value is None and not _missing(raw):
        raise InvalidEventError(f"{field}={raw!r} is not a number (event {record_id!r})", record_id=record_id)
    return value


def _field_date(record: Mapping[str, Any], field: str, record_id) -> Optional[date]:
    raw = _get(record, field)
    value = _to_date(raw)
    if value is None and not _missing(raw):
        raise InvalidEventError(f"{field}={raw!r} is not a date (event {record_id!r})", record_id=record_id)
    return value


def _check_month(value: Optional[int], name: str, record_id) -> Optional[int]:
    if value is not None and not 1 <= value <= 12:
        raise InvalidEventError(f"{name}={value} is outside 1..12 (event {record_id!r})", record_id=record_id)
    return value


def _angles(raw, category) -> Tuple[OutreachAngle, ...]:
    if isinstance(raw, str) and raw.strip().startswith("["):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidEventError(f"Unreadable outreach_angles: {e}") from e
    if isinstance(raw, (list, tuple)) and raw:
        out = []
        for item in raw:
            if isinstance(item, Mapping):
                out.append(OutreachAngle(angle=_to_str(item.get("angle")), notes=_to_str(item.get("notes"))))
            else:
                out.append(OutreachAngle(angle=_to_str(item)))
        return tuple(out)

    if isinstance(category, Mapping):
        name = _to_str(category.get("name"))
        if name:
            return (OutreachAngle(angle=LEGACY_CATEGORY_ANGLES.get(name, name),
                                  notes=_to_str(category.get("description"))),)
    elif not _missing(category):
        name = _to_str(category)
        return (OutreachAngle(angle=LEGACY_CATEGORY_ANGLES.get(name, name)),)
    return ()


def event_from_record(record: Mapping[str, Any]) -> Event:
    """Build an `Event` from one raw record (dict / table row).

    Raises InvalidEventError when a month value is outside 1..12, or when a
    numeric or date field is present but cannot be parsed.
    """
    raw_id = _get(record, "id")
    event_id = _to_int(raw_id)
    if event_id is None:
        event_id = _to_str(raw_id)

    prep_months = _field_int(record, "prep_months_needed", event_id) or 0

    return Event(
        id=event_id,
        title=_to_str(_get(record, "title")),
        description=_to_str(_get(record, "description")),
        start_month=_check_month(_field_int(record, "start_month", event_id), "start_month", event_id),
        start_year=_field_int(record, "start_year", event_id),
        end_month=_check_month(_field_int(record, "end_month", event_id), "end_month", event_id),
        end_year=_field_int(record, "end_year", event_id),
        month=_check_month(_field_int(record, "month", event_id), "month", event_id),
        year=_field_int(record, "year", event_id),
        is_recurring=_to_bool(_get(record, "is_recurring")),
        prep_months_needed=prep_months,
        prep_start_date=_field_date(record, "prep_start_date", event_id),
        outreach_angles=_angles(_get(record, "outreach_angles"), _get(record, "category")),
    )


def load_events(records: Iterable[Mapping[str, Any]], *, strict: bool = False) -> List[Event]:
    """Convert raw records, skipping (or with `strict`, raising on) invalid ones."""
    events: List[Event] = []
    skipped = 0
    for rec in records:
        try:
            events.append(event_from_record(rec))
        except InvalidEventError as e:
            if strict:
                raise
            skipped += 1
            logger.warning("Skipping event record: %s", e)
    if skipped:
        logger.info("Loaded %d events (%d skipped)", len(events), skipped)
    else:
        logger.info("Loaded %d events", len(events))
    return events


def load_events_json(path: str, *, strict: bool = False) -> List[Event]:
    """Read a JSON array of event records (or {"events": [...]})."""
    p = Path(path)
    if not p.exists():
        raise EventDataError(f"Event file not found: {path}")
    try:
        with open(p, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise EventDataError(f"Invalid JSON in {path}: {e}") from e
    if isinstance(payload, Mapping):
        payload = payload.get("events", [])
    if not isinstance(payload, list):
        raise EventDataError(f"Expected a list of events in {path}")
    return load_events(payload, strict=strict)


def load_events_table(path: str, *, strict: bool = False) -> List[Event]:
    """Read events from a CSV or Excel (.xlsx) export."""
    p = Path(path)
    if not p.exists():
        raise EventDataError(f"Event file not found: {path}")
    if p.suffix.lower() in (".xlsx", ".xlsm", ".xls"):
        df = pd.read_excel(p, engine="openpyxl")
    else:
        df = pd.read_csv(p)
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)

    cols = {_norm(c) for c in df.columns}
    has_start = any(_norm(n) in cols for n in _FIELDS["start_month"] + _FIELDS["month"])
    if _norm("id") not in cols and _norm("event_id") not in cols:
        raise EventDataError(f"Missing required column 'id'. Available={list(df.columns)}")
    if not has_start:
        raise EventDataError(f"Missing a start month column (start_month or month). Available={list(df.columns)}")

    records = [row.to_dict() for _, row in df.iterrows()]
    return load_events(records, strict=strict)
