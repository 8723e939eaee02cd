"""iCalendar (RFC 5545) export of scheduled tasks - no I/O dependencies."""

from datetime import datetime

from .tasks import Task

CRLF = "\r\n"
DEFAULT_PRODID = "-//OpenMotion//Task Planner//EN"
UID_DOMAIN = "openmotion"
MAX_LINE_OCTETS = 75


def escape_text(value: str) -> str:
    """Escape a TEXT property value."""
    value = value.replace("\\", "\\\\")
    value = value.replace(";", "\\;").replace(",", "\\,")
    value = value.replace("\r\n", "\n").replace("\r", "\n")
    return value.replace("\n", "\\n")


def format_datetime(dt: datetime) -> str:
    """Floating local time, e.g. 20250115T091500."""
    return dt.strftime("%Y%m%dT%H%M%S")


def fold_line(line: str) -> str:
    """
    Fold a content line to at most 75 octets per physical line.

    Continuation lines start with a single space, which counts toward
    their 75 octets. Multi-byte UTF-8 characters are never split.
    """
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line

    parts = []
    current = ""
    size = 0
    for ch in line:
        width = len(ch.encode("utf-8"))
        if size + width > MAX_LINE_OCTETS:
            parts.append(current)
            current = " "
            size = 1
        current += ch
        size += width
    parts.append(current)
    return CRLF.join(parts)


def is_exportable(task: Task) -> bool:
    """Only incomplete, scheduled tasks become events."""
    return not task.completed and task.scheduled_start is not None


def event_lines(task: Task) -> list[str]:
    """Content lines for one VEVENT."""
    start = format_datetime(task.scheduled_start)
    return [
        "BEGIN:VEVENT",
        f"UID:{task.id}@{UID_DOMAIN}",
        f"DTSTAMP:{start}",
        f"DTSTART:{start}",
        f"DTEND:{format_datetime(task.scheduled_end)}",
        f"SUMMARY:{escape_text(task.title)}",
        f"DESCRIPTION:{escape_text(f'Priority: {task.priority.label}')}",
        "END:VEVENT",
    ]


def to_calendar_document(tasks: list[Task], prodid: str = DEFAULT_PRODID) -> str:
    """
    Render scheduled, incomplete tasks as a VCALENDAR document.

    Pure function - no I/O. Events are ordered by start time. An empty
    eligible set still yields a valid calendar with no events.
    """
    events = sorted((t for t in tasks if is_exportable(t)), key=lambda t: t.scheduled_start)

    lines = ["BEGIN:VCALENDAR", "VERSION:2.0", f"PRODID:{prodid}"]
    for task in events:
        lines.extend(event_lines(task))
    lines.append("END:VCALENDAR")

    return CRLF.join(fold_line(line) for line in lines) + CRLF
