"""
Printable schedule export.

Renders the productions in a date range, with their accepted crew, to a
self-contained HTML document the browser can print or save as PDF.
"""

import logging
from datetime import date

from django.template.loader import render_to_string
from django.utils import timezone

from apps.productions.selectors import schedule_between

logger = logging.getLogger(__name__)


def schedule_title(start_date: date, end_date: date) -> str:
    if start_date == end_date:
        return f"Schedule for {start_date:%A, %B %d, %Y}"
    return f"Schedule {start_date:%B %d, %Y} to {end_date:%B %d, %Y}"


def build_schedule_html(start_date: date, end_date: date) -> str:
    """
    Render the printable schedule for [start_date, end_date].

    Raises:
        ValueError: If start_date is after end_date (raised by the range query).
    """
    entries = schedule_between(start_date, end_date)
    logger.info("Exporting schedule %s..%s (%d productions)", start_date, end_date, len(entries))
    return render_to_string("productions/print_schedule.html", {
        "title": schedule_title(start_date, end_date),
        "entries": entries,
        "start_date": start_date,
        "end_date": end_date,
        "generated_at": timezone.now(),
    })
