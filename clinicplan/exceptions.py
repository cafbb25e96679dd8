"""
Errors raised at the ingestion boundary.

The occurrence core never raises for well-formed events; everything that can
go wrong happens while turning raw records into `Event` objects.
"""


class EventDataError(ValueError):
    """The event source could not be read (missing file, missing column, bad JSON)."""


class InvalidEventError(ValueError):
    """A single record carries values the planner cannot use (e.g. month 13)."""

    def __init__(self, message: str, record_id=None):
        super().__init__(message)
        self.record_id = record_id
