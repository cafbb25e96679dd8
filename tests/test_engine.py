"""
Tests for the planner facade, indices and repositories.
"""
import json
from datetime import date

import pytest

from clinicplan.aggregate import build_year, events_in_range
from clinicplan.engine import Planner
from clinicplan.exceptions import EventDataError
from clinicplan.indices import build_indices, candidate_ids
from clinicplan.loader import load_events_json, load_events_table
from clinicplan.models import YearMonth
from clinicplan.repository import FileEventRepository, InMemoryEventRepository


def _ids(events):
    return [e.id for e in events]


@pytest.fixture
def planner(sample_events):
    p = Planner.from_repository(InMemoryEventRepository(sample_events))
    p.go_today(date(2025, 9, 1))
    return p


class TestIndices:

    def test_candidates_by_year(self, sample_events):
        idx = build_indices(sample_events)
        assert candidate_ids(idx, 2025) == [0, 1, 2, 3, 5]
        assert candidate_ids(idx, 2023) == [3]
        assert candidate_ids(idx, 2026) == [2, 3, 4]

    def test_spans_stay_candidates_until_their_end(self, make_event):
        idx = build_indices([make_event(start_month=11, start_year=2024, end_month=2, end_year=2025)])
        assert candidate_ids(idx, 2025) == [0]
        assert candidate_ids(idx, 2026) == []

    def test_unscheduled_events_are_never_candidates(self, make_event):
        idx = build_indices([make_event()])
        assert idx.by_id == {1: 0}
        assert candidate_ids(idx, 2025) == []


class TestPlannerViews:

    def test_year_view_matches_build_year(self, planner, sample_events):
        expected = build_year(sample_events, 2025)
        got = planner.year_view(2025)
        assert {m: _ids(v) for m, v in got.items()} == {m: _ids(v) for m, v in expected.items()}

    def test_defaults_follow_cursor(self, planner):
        assert _ids(planner.timeline().current.events) == [5]
        assert [s.month for s in planner.quarter_view()] == [7, 8, 9]
        assert planner.month_view().prep_starting_ids == [5]

    def test_membership_is_memoized(self, planner, sample_events):
        assert planner.is_active(sample_events[3], 1, 2025)
        assert planner._active_cache[(4, 1, 2025)] is True

    def test_in_range(self, planner, sample_events):
        start, end = YearMonth(2025, 11), YearMonth(2026, 2)
        assert _ids(planner.in_range(start, end)) == _ids(events_in_range(sample_events, start, end))
        assert planner.in_range(end, start) == []

    def test_lookup(self, planner):
        assert planner.get_event("3").title == "Heart month"
        assert planner.get_event(99) is None
        assert planner.prep_for(1) == YearMonth(2025, 8)
        assert planner.prep_for(3) is None


class TestNavigation:

    def test_next_and_previous_cross_years(self, planner):
        planner.go_to(12, 2025)
        assert (planner.next_month().month, planner.state.year) == (1, 2026)
        assert (planner.previous_month().month, planner.state.year) == (12, 2025)

    def test_quarter_follows_month(self, planner):
        planner.go_to(11, 2025)
        assert planner.state.quarter == 4

    def test_invalid_month(self, planner):
        with pytest.raises(ValueError):
            planner.go_to(13, 2025)


class TestRepositoriesAndExport:

    def test_reload_from_file(self, tmp_dir):
        path = tmp_dir / "events.json"
        path.write_text(json.dumps([{"id": 1, "start_month": 5, "start_year": 2025}]), encoding="utf-8")
        planner = Planner.from_repository(FileEventRepository(str(path)))
        planner.is_active(planner.events[0], 5, 2025)

        path.write_text(json.dumps([{"id": 1, "start_month": 6, "start_year": 2025},
                                    {"id": 2, "start_month": 7, "start_year": 2025}]), encoding="utf-8")
        assert planner.reload() == 2
        assert planner._active_cache == {}
        assert _ids(planner.year_view(2025)[6]) == [1]

    def test_reload_without_repository(self, sample_events):
        with pytest.raises(ValueError):
            Planner.from_events(sample_events).reload()

    def test_unsupported_file_type(self, tmp_dir):
        with pytest.raises(EventDataError):
            FileEventRepository(str(tmp_dir / "events.txt"))

    def test_json_export_reads_back(self, planner, tmp_dir):
        out = tmp_dir / "out.json"
        planner.export_json(str(out))
        events = load_events_json(str(out))
        assert [(e.id, e.occurrence, e.prep_start_date) for e in events] == \
            [(e.id, e.occurrence, e.prep_start_date) for e in planner.events]

    def test_csv_export_reads_back(self, planner, tmp_dir):
        out = tmp_dir / "out.csv"
        planner.export_csv(str(out), planner.events[:2])
        events = load_events_table(str(out))
        assert _ids(events) == [1, 2]
        assert events[1].occurrence == planner.events[1].occurrence
