"""
Consolidation windowing.

Selects the reports that feed a multi-day synthesis. Reporting days are the
distinct day-labels in the order they first appear when records are walked
by creation time. The label text is never parsed as a calendar date, so
"the first N days" means the first N labels anyone filed, not the N
earliest dates.
"""

import logging
from typing import List, Sequence

from .classifier import normalize_markup
from .exceptions import EmptyWindowError, NoContentError
from .models import ConsolidationWindow, ReportRecord

logger = logging.getLogger(__name__)


def distinct_day_labels(records: Sequence[ReportRecord]) -> List[str]:
    """Day-labels in first-seen order, walking records by creation time."""
    labels: List[str] = []
    seen = set()
    for record in sorted(records, key=lambda r: r.created_at):
        label = record.report_date
        if label and label not in seen:
            seen.add(label)
            labels.append(label)
    return labels


def build_window(records: Sequence[ReportRecord], days: int) -> ConsolidationWindow:
    """
    Select the records belonging to the first `days` reporting days.

    Fewer available days than requested is not an error; the window holds
    whatever exists.

    Args:
        records: All stored reports, in any order
        days: Number of reporting days to include

    Returns:
        The window, records in creation order

    Raises:
        EmptyWindowError: If no reporting day falls in the window
    """
    target_labels = distinct_day_labels(records)[:max(days, 0)]

    if not target_labels:
        raise EmptyWindowError(
            "Could not identify any reporting days in the registry",
            requested_days=days,
        )

    selected = set(target_labels)
    window_records = [
        r for r in sorted(records, key=lambda r: r.created_at) if r.report_date in selected
    ]

    logger.info(
        f"Window: {len(target_labels)} day(s) of {days} requested, {len(window_records)} report(s)"
    )
    return ConsolidationWindow(day_labels=target_labels, records=window_records)


def window_reports(records: Sequence[ReportRecord], days: int) -> List[ReportRecord]:
    """Records belonging to the first `days` reporting days."""
    return build_window(records, days).records


def collect_transcripts(window: ConsolidationWindow) -> List[str]:
    """
    Non-empty report bodies in the window, with editor HTML flattened.

    Raises:
        NoContentError: If every report in the window is empty
    """
    transcripts = [
        text
        for text in (normalize_markup(r.markup_text).strip() for r in window.records)
        if text
    ]

    if not transcripts:
        raise NoContentError(
            f"No report content found for the first {len(window.day_labels)} reporting days",
            day_labels=window.day_labels,
        )
    return transcripts
