"""
clinicplan package
==================

Event-occurrence planning core for the clinic marketing planner.

- The CLI entry point is in `clinicplan/cli.py`.
- Occurrence rules (is an event active in a month?) are in `clinicplan/resolver.py`.
- Preparation lead time is in `clinicplan/prep.py`.
- Calendar views (year / quarter / month / timeline) are in
  `clinicplan/aggregate.py` and `clinicplan/timeline.py`.
- Event loading is in `clinicplan/loader.py` and `clinicplan/repository.py`.
"""

__version__ = '0.1.0'
