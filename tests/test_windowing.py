"""Tests for windowing.py consolidation window selection."""

from datetime import datetime, timedelta, timezone

import pytest

from sitrep import (
    EmptyWindowError,
    NoContentError,
    ReportRecord,
    build_window,
    collect_transcripts,
    distinct_day_labels,
    window_reports,
)

START = datetime(2026, 2, 16, 18, 0, tzinfo=timezone.utc)


def _records(*labels, markup="report body"):
    """One record per label, created an hour apart in the given order."""
    return [
        ReportRecord(
            id=f"r{i}",
            report_date=label,
            markup_text=markup,
            created_at=START + timedelta(hours=i),
        )
        for i, label in enumerate(labels)
    ]


class TestDistinctDayLabels:

    def test_first_seen_order(self):
        records = _records("16 FEB 26", "17 FEB 26", "16 FEB 26", "18 FEB 26")
        assert distinct_day_labels(records) == ["16 FEB 26", "17 FEB 26", "18 FEB 26"]

    def test_creation_order_not_input_order(self):
        records = _records("16 FEB 26", "17 FEB 26")
        assert distinct_day_labels(list(reversed(records))) == ["16 FEB 26", "17 FEB 26"]

    def test_labels_not_parsed_as_dates(self):
        # A later-filed, earlier-dated label still counts as a later day
        records = _records("20 FEB 26", "01 FEB 26")
        assert distinct_day_labels(records) == ["20 FEB 26", "01 FEB 26"]

    def test_empty_labels_skipped(self):
        assert distinct_day_labels(_records("", "16 FEB 26")) == ["16 FEB 26"]


class TestBuildWindow:
    """Tests for build_window() / window_reports()."""

    def test_two_days_from_interleaved_registry(self):
        records = _records("D1", "D2", "D1", "D3")
        window = build_window(records, 2)

        assert window.day_labels == ["D1", "D2"]
        assert [r.id for r in window.records] == ["r0", "r1", "r2"]

    def test_fewer_days_than_requested(self):
        assert len(window_reports(_records("D1", "D1"), 5)) == 2

    def test_zero_days_raises(self):
        with pytest.raises(EmptyWindowError) as exc_info:
            build_window(_records("D1"), 0)
        assert exc_info.value.requested_days == 0

    def test_negative_days_raises(self):
        with pytest.raises(EmptyWindowError):
            build_window(_records("D1"), -3)

    def test_empty_registry_raises(self):
        with pytest.raises(EmptyWindowError):
            build_window([], 3)


class TestCollectTranscripts:

    def test_editor_html_flattened(self):
        window = build_window(_records("D1", markup="<p>Patrol done</p><ul><li>Guard</li></ul>"), 1)
        assert collect_transcripts(window) == ["Patrol done\n• Guard"]

    def test_empty_reports_skipped(self):
        records = _records("D1", "D1") + [
            ReportRecord(id="x", report_date="D1", markup_text="Real text", created_at=START)
        ]
        records[0].markup_text = "   "
        records[1].markup_text = "<p></p>"
        assert collect_transcripts(build_window(records, 1)) == ["Real text"]

    def test_all_empty_raises(self):
        window = build_window(_records("D1", "D2", markup="  "), 2)
        with pytest.raises(NoContentError) as exc_info:
            collect_transcripts(window)
        assert exc_info.value.day_labels == ["D1", "D2"]
