"""Tests for .ics calendar export."""

from datetime import datetime

import pytest

from openmotion.core.ics import (
    escape_text,
    fold_line,
    format_datetime,
    to_calendar_document,
)
from openmotion.core.tasks import Priority, Task


@pytest.fixture
def start():
    return datetime(2025, 1, 15, 9, 15)


@pytest.fixture
def scheduled_task(start):
    return Task(
        id="abc123",
        title="Lunch, then gym",
        duration=45,
        priority=Priority.HIGH,
        scheduled_start=start,
    )


def unfold(document: str) -> list[str]:
    return document.replace("\r\n ", "").split("\r\n")


class TestEscapeText:
    def test_comma_and_semicolon(self):
        assert escape_text("a,b;c") == "a\\,b\\;c"

    def test_backslash_escaped_first(self):
        assert escape_text("C:\\temp, now") == "C:\\\\temp\\, now"

    def test_newlines(self):
        assert escape_text("one\ntwo\r\nthree\rfour") == "one\\ntwo\\nthree\\nfour"

    def test_plain_text_unchanged(self):
        assert escape_text("Write blog post") == "Write blog post"


class TestFormatDatetime:
    def test_compact_local_form(self):
        assert format_datetime(datetime(2025, 3, 7, 14, 5, 9)) == "20250307T140509"


class TestFoldLine:
    def test_short_line_unchanged(self):
        assert fold_line("SUMMARY:short") == "SUMMARY:short"

    def test_long_line_folded(self):
        line = "SUMMARY:" + "x" * 200
        folded = fold_line(line)
        physical = folded.split("\r\n")
        assert len(physical) > 1
        assert all(len(p.encode("utf-8")) <= 75 for p in physical)
        assert all(p.startswith(" ") for p in physical[1:])
        assert folded.replace("\r\n ", "") == line

    def test_multibyte_not_split(self):
        line = "SUMMARY:" + "é" * 100
        folded = fold_line(line)
        for physical in folded.split("\r\n"):
            assert len(physical.encode("utf-8")) <= 75
        assert folded.replace("\r\n ", "") == line


class TestToCalendarDocument:
    def test_single_event(self, scheduled_task):
        doc = to_calendar_document([scheduled_task])
        lines = unfold(doc)

        assert doc.count("BEGIN:VEVENT") == 1
        assert doc.count("END:VEVENT") == 1
        assert "UID:abc123@openmotion" in lines
        assert "DTSTAMP:20250115T091500" in lines
        assert "DTSTART:20250115T091500" in lines
        assert "DTEND:20250115T100000" in lines
        assert "SUMMARY:Lunch\\, then gym" in lines
        assert "DESCRIPTION:Priority: High" in lines

    def test_framing(self, scheduled_task):
        lines = unfold(to_calendar_document([scheduled_task]))
        assert lines[0] == "BEGIN:VCALENDAR"
        assert lines[1] == "VERSION:2.0"
        assert lines[2].startswith("PRODID:")
        assert lines[-2] == "END:VCALENDAR"
        assert lines[-1] == ""

    def test_crlf_only(self, scheduled_task):
        doc = to_calendar_document([scheduled_task])
        assert doc.endswith("\r\n")
        assert "\n" not in doc.replace("\r\n", "")

    def test_empty_document(self):
        assert to_calendar_document([]) == (
            "BEGIN:VCALENDAR\r\n"
            "VERSION:2.0\r\n"
            "PRODID:-//OpenMotion//Task Planner//EN\r\n"
            "END:VCALENDAR\r\n"
        )

    def test_custom_prodid(self):
        doc = to_calendar_document([], prodid="-//Me//Tasks//EN")
        assert "PRODID:-//Me//Tasks//EN\r\n" in doc

    def test_completed_task_excluded(self, scheduled_task):
        done = Task(
            id="done1",
            title="Finished",
            duration=30,
            completed=True,
            scheduled_start=datetime(2025, 1, 15, 8, 0),
        )
        doc = to_calendar_document([done])
        assert "VEVENT" not in doc
        assert "Finished" not in doc

    def test_unscheduled_task_excluded(self):
        task = Task(id="new", title="Not yet placed", duration=30)
        assert "VEVENT" not in to_calendar_document([task])

    def test_events_ordered_by_start(self, start):
        later = Task(id="later", title="Later", duration=30, scheduled_start=datetime(2025, 1, 15, 11, 0))
        sooner = Task(id="sooner", title="Sooner", duration=30, scheduled_start=start)
        doc = to_calendar_document([later, sooner])
        assert doc.index("UID:sooner@openmotion") < doc.index("UID:later@openmotion")

    def test_asap_label(self, start):
        task = Task(id="x", title="Now", duration=10, priority=Priority.ASAP, scheduled_start=start)
        assert "DESCRIPTION:Priority: ASAP" in unfold(to_calendar_document([task]))

    def test_long_title_is_folded(self, start):
        title = "A very long task title " * 6
        task = Task(id="long", title=title.strip(), duration=30, scheduled_start=start)
        doc = to_calendar_document([task])
        assert all(len(line.encode("utf-8")) <= 75 for line in doc.split("\r\n"))
        assert f"SUMMARY:{title.strip()}" in unfold(doc)
