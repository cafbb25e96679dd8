"""
conftest.py
-----------
Shared pytest fixtures for clinicplan tests.

Provides fixtures for:
- An event factory with sensible defaults
- A small mixed event list (single, span, recurring, wrapping, prep)
- Temporary directories for export/report files
"""
import pytest
from datetime import date
from pathlib import Path
from tempfile import TemporaryDirectory

from clinicplan.models import Event, OutreachAngle


@pytest.fixture
def make_event():
    """Factory: make_event(id=1, start_month=6, start_year=2025, ...)."""
    def _make(id=1, **fields):
        fields.setdefault("title", f"Event {id}")
        return Event(id=id, **fields)
    return _make


@pytest.fixture
def sample_events(make_event):
    """A small planner dataset covering every occurrence variant."""
    return [
        make_event(1, title="Flu shot drive", start_month=10, start_year=2025, prep_months_needed=2),
        make_event(2, title="Summer camp physicals", start_month=6, start_year=2025,
                   end_month=8, end_year=2025, prep_months_needed=3),
        make_event(3, title="Heart month", start_month=2, start_year=2024, is_recurring=True),
        make_event(4, title="Winter wellness", start_month=11, start_year=2023,
                   end_month=2, end_year=2024, is_recurring=True),
        make_event(5, title="Open house", start_month=1, start_year=2026,
                   prep_start_date=date(2025, 9, 15),
                   outreach_angles=(OutreachAngle("UC", "walk-ins"),)),
        make_event(6, title="Legacy screening", month=3, year=2025),
    ]


@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
