"""
Tests for preparation windows.
"""
from datetime import date

import pytest

from clinicplan.models import YearMonth
from clinicplan.prep import is_in_prep_period, is_prep_starting_in, needs_prep, prep_window


class TestPrepWindow:
    """Month-count and explicit-date strategies."""

    def test_month_count_same_year(self, make_event):
        e = make_event(start_month=6, start_year=2025, prep_months_needed=3)
        assert prep_window(e) == YearMonth(2025, 3)

    def test_month_count_rolls_back_years(self, make_event):
        e = make_event(start_month=6, start_year=2025, prep_months_needed=15)
        assert prep_window(e) == YearMonth(2024, 3)

    def test_january_minus_three(self, make_event):
        e = make_event(start_month=1, start_year=2025, prep_months_needed=3)
        assert prep_window(e) == YearMonth(2024, 10)

    def test_explicit_date_wins(self, make_event):
        e = make_event(start_month=6, start_year=2025, prep_months_needed=6,
                       prep_start_date=date(2025, 1, 10))
        assert prep_window(e) == YearMonth(2025, 1)

    @pytest.mark.parametrize("months", [0, -2])
    def test_zero_or_negative_means_no_prep(self, make_event, months):
        e = make_event(start_month=6, start_year=2025, prep_months_needed=months)
        assert prep_window(e) is None
        assert not needs_prep(e)

    def test_missing_start_gives_none(self, make_event):
        assert prep_window(make_event(prep_months_needed=2)) is None

    def test_legacy_start_fields(self, make_event):
        e = make_event(month=2, year=2025, prep_months_needed=2)
        assert prep_window(e) == YearMonth(2024, 12)

    def test_recurring_uses_literal_start_by_default(self, make_event):
        e = make_event(start_month=3, start_year=2024, is_recurring=True, prep_months_needed=2)
        assert prep_window(e) == YearMonth(2024, 1)

    def test_recurring_occurrence_year(self, make_event):
        e = make_event(start_month=3, start_year=2024, is_recurring=True, prep_months_needed=2)
        assert prep_window(e, occurrence_year=2026) == YearMonth(2026, 1)

    def test_occurrence_year_ignored_for_one_off_events(self, make_event):
        e = make_event(start_month=3, start_year=2024, prep_months_needed=2)
        assert prep_window(e, occurrence_year=2026) == YearMonth(2024, 1)

    def test_idempotent(self, make_event):
        e = make_event(start_month=6, start_year=2025, prep_months_needed=4)
        assert prep_window(e) == prep_window(e)


class TestPrepPeriod:
    """Month-page helpers."""

    def test_starting_month(self, make_event):
        e = make_event(start_month=10, start_year=2025, prep_months_needed=2)
        assert is_prep_starting_in(e, 8, 2025)
        assert not is_prep_starting_in(e, 9, 2025)

    def test_period_runs_until_event_month(self, make_event):
        e = make_event(start_month=10, start_year=2025, prep_months_needed=2)
        assert not is_in_prep_period(e, 7, 2025)
        assert is_in_prep_period(e, 8, 2025)
        assert is_in_prep_period(e, 9, 2025)
        assert not is_in_prep_period(e, 10, 2025)

    def test_no_prep_no_period(self, make_event):
        e = make_event(start_month=10, start_year=2025)
        assert not is_in_prep_period(e, 9, 2025)
