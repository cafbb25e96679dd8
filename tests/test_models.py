"""
Tests for the Event model and occurrence variant resolution.
"""
from datetime import date

import pytest

from clinicplan.models import (
    Event, YearMonth,
    SingleMonth, MultiMonth, RecurringSingleMonth, RecurringMultiMonth,
)


class TestYearMonth:
    """Calendar month arithmetic."""

    def test_shift_back_across_year(self):
        assert YearMonth(2025, 1).shift(-3) == YearMonth(2024, 10)

    def test_shift_forward_across_year(self):
        assert YearMonth(2024, 11).shift(14) == YearMonth(2026, 1)

    def test_ordering_is_year_then_month(self):
        assert YearMonth(2024, 12) < YearMonth(2025, 1)
        assert YearMonth(2025, 2) > YearMonth(2025, 1)

    def test_months_until(self):
        assert YearMonth(2025, 11).months_until(YearMonth(2026, 2)) == 3
        assert YearMonth(2026, 2).months_until(YearMonth(2025, 11)) == -3

    def test_from_date_and_label(self):
        ym = YearMonth.from_date(date(2025, 1, 10))
        assert ym == YearMonth(2025, 1)
        assert ym.label() == "Jan 2025"


class TestOccurrenceVariants:
    """Each record shape resolves to exactly one variant."""

    def test_single_month(self, make_event):
        e = make_event(start_month=6, start_year=2025)
        assert e.occurrence == SingleMonth(year=2025, month=6)

    def test_legacy_fields_are_used_when_new_ones_missing(self, make_event):
        e = make_event(month=3, year=2024)
        assert e.effective_start() == YearMonth(2024, 3)
        assert e.occurrence == SingleMonth(year=2024, month=3)

    def test_new_fields_win_over_legacy(self, make_event):
        e = make_event(start_month=7, start_year=2025, month=3, year=2024)
        assert e.effective_start() == YearMonth(2025, 7)

    def test_no_start_resolves_to_none(self, make_event):
        assert make_event().occurrence is None
        assert make_event(start_month=5).occurrence is None

    def test_multi_month_span(self, make_event):
        e = make_event(start_month=3, start_year=2024, end_month=6, end_year=2024)
        assert e.occurrence == MultiMonth(start=YearMonth(2024, 3), end=YearMonth(2024, 6))
        assert e.is_multi_month

    def test_span_missing_end_year_is_inferred(self, make_event):
        e = make_event(start_month=11, start_year=2024, end_month=2)
        assert e.occurrence == MultiMonth(start=YearMonth(2024, 11), end=YearMonth(2025, 2))

    def test_stray_end_year_without_end_month_is_single(self, make_event):
        e = make_event(start_month=4, start_year=2025, end_year=2026)
        assert e.occurrence == SingleMonth(year=2025, month=4)

    def test_same_start_and_end_is_single(self, make_event):
        e = make_event(start_month=4, start_year=2025, end_month=4, end_year=2025)
        assert isinstance(e.occurrence, SingleMonth)
        assert not e.is_multi_month

    def test_recurring_single(self, make_event):
        e = make_event(start_month=6, start_year=2024, is_recurring=True)
        assert e.occurrence == RecurringSingleMonth(since_year=2024, month=6)

    def test_recurring_span_ignores_end_year(self, make_event):
        e = make_event(start_month=11, start_year=2023, end_month=2, end_year=2030, is_recurring=True)
        assert e.occurrence == RecurringMultiMonth(since_year=2023, start_month=11, end_month=2)
        assert e.occurrence.wraps

    def test_events_are_immutable_and_hashable(self, make_event):
        e = make_event(start_month=6, start_year=2025)
        assert hash(e) == hash(Event(id=1, title="Event 1", start_month=6, start_year=2025))
        with pytest.raises(AttributeError):
            e.title = "changed"
