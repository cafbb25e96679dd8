from __future__ import annotations

"""
Annual plan report generator
----------------------------
This module generates a DOCX annual plan from a list of Event objects.

Design goals:
- Keep the planner usable even if report dependencies are missing (lazy imports).
- Reuse the same occurrence rules as every other view (build_year, prep_window),
  so the report never disagrees with the calendar.
- One chart (events per month), then tables a planner can act on.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import os
import tempfile

from .aggregate import build_year, quarter_of
from .display import display_date
from .models import Event, MONTH_ABBR, MONTH_NAMES
from .prep import prep_window


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Clinic Marketing Plan"
    subtitle: str = "Annual event and preparation overview"
    source_name: str = "Event export"
    source_file: Optional[str] = None

    # How many titles to list per month before summarizing
    max_titles_per_month: int = 8

    # Optional: list of CLI commands used before the report was written
    command_log: Optional[List[str]] = None

    # Chart image width (inches)
    chart_width: float = 6.5
    extra_notes: List[str] = field(default_factory=list)


def prep_schedule(events: Sequence[Event], year: int) -> List[Tuple[int, Event]]:
    """(month, event) pairs for every prep window that starts in `year`, by month."""
    out: List[Tuple[int, Event]] = []
    for e in events:
        w = prep_window(e)
        if w is not None and w.year == year:
            out.append((w.month, e))
    out.sort(key=lambda pair: pair[0])
    return out


def generate_docx_report(
    events: Sequence[Event],
    year: int,
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """
    Generate a DOCX annual plan + chart for `year`.

    IMPORTANT:
    - This does NOT modify the event source.
    - The report is built from the in-memory events handed to it.
    """
    config = config or ReportConfig()

    # Lazy imports: only required when "report" is used.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        import numpy as np
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib (and numpy).\n"
            "Install with: python -m pip install matplotlib numpy"
        ) from e

    if not events:
        raise ValueError("No events to report on (event list is empty).")

    # -----------------------------
    # 1) Compute the plan
    # -----------------------------
    by_month = build_year(events, year)
    counts = [len(by_month[m]) for m in range(1, 13)]
    schedule = prep_schedule(events, year)
    recurring = [e for e in events if e.is_recurring]

    # -----------------------------
    # 2) Build DOCX report
    # -----------------------------
    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(f"{config.title} {year}", 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Source", config.source_name + (f" ({config.source_file})" if config.source_file else ""))
    _kv("Events in source", str(len(events)))
    _kv("Event-months in year", str(sum(counts)))
    _kv("Recurring events", str(len(recurring)))
    _kv("Prep windows starting this year", str(len(schedule)))

    # Chart: active events per month, coloured by quarter.
    # add_picture embeds the image bytes.
    doc.add_heading("Events per month", level=1)
    with tempfile.TemporaryDirectory(prefix="clinicplan_report_") as tmpdir:
        chart_path = os.path.join(tmpdir, "events_per_month.png")
        x = np.arange(1, 13)
        plt.figure()
        bars = plt.bar(x, counts, edgecolor="black", linewidth=0.8)
        for m, bar in zip(range(1, 13), bars):
            bar.set_facecolor(f"C{quarter_of(m) - 1}")
        plt.xticks(x, MONTH_ABBR)
        plt.title(f"Active events per month ({year})")
        plt.ylabel("Events")
        plt.tight_layout()
        plt.savefig(chart_path, dpi=200)
        plt.close()
        doc.add_picture(chart_path, width=Inches(config.chart_width))

    # Month-by-month table
    doc.add_heading("Monthly plan", level=1)
    t = doc.add_table(rows=1, cols=3)
    h = t.rows[0].cells
    h[0].text = "Month"
    h[1].text = "Events"
    h[2].text = "Titles"
    for m in range(1, 13):
        evs = by_month[m]
        titles = [e.title or f"#{e.id}" for e in evs[:config.max_titles_per_month]]
        if len(evs) > config.max_titles_per_month:
            titles.append(f"... (+{len(evs) - config.max_titles_per_month} more)")
        r = t.add_row().cells
        r[0].text = MONTH_NAMES[m - 1]
        r[1].text = str(len(evs))
        r[2].text = ", ".join(titles)

    # Prep schedule
    doc.add_paragraph("")
    doc.add_heading("Preparation schedule", level=1)
    if not schedule:
        doc.add_paragraph(f"No preparation windows start in {year}.")
    else:
        t2 = doc.add_table(rows=1, cols=3)
        h = t2.rows[0].cells
        h[0].text = "Start prep"
        h[1].text = "Event"
        h[2].text = "Event date"
        for m, e in schedule:
            r = t2.add_row().cells
            r[0].text = f"{MONTH_ABBR[m - 1]} {year}"
            r[1].text = e.title or f"#{e.id}"
            d = display_date(e)
            r[2].text = f"{d.start} - {d.end}" if d.is_multi_month else d.start

    if recurring:
        doc.add_paragraph("")
        doc.add_heading("Yearly events", level=1)
        for e in recurring:
            d = display_date(e, viewing_year=year)
            when = f"{d.start} - {d.end}" if d.is_multi_month else d.start
            doc.add_paragraph(f"{e.title or '#' + str(e.id)}: {when}", style="List Bullet")

    for note in config.extra_notes:
        doc.add_paragraph(note)

    # -----------------------------
    # Reproducibility footer
    # -----------------------------
    doc.add_paragraph("")
    doc.add_heading("Reproducibility footer", level=1)

    from . import __version__ as planner_version
    from datetime import datetime as _dt
    generated_at = _dt.now().isoformat(timespec="seconds")

    doc.add_paragraph(f"clinicplan version: {planner_version}")
    doc.add_paragraph(f"Report generated at: {generated_at}")
    if config.command_log:
        doc.add_paragraph("Commands used (log):")
        for line in config.command_log:
            doc.add_paragraph(line, style="List Bullet")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path
