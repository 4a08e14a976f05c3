"""Day labels and the today-only edit gate - no I/O dependencies.

A day is identified by a label like "Tue 14-Jan", formatted from the host's
local calendar. Labels are compared as opaque strings, so the same
weekday/day/month in two different years produce the same label.
"""

from datetime import datetime

# English abbreviations regardless of the process locale (strftime's %a/%b
# would follow LC_TIME).
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_day_label(moment: datetime) -> str:
    """Format a datetime as a day label, e.g. "Tue 14-Jan"."""
    return f"{WEEKDAYS[moment.weekday()]} {moment.day:02d}-{MONTHS[moment.month - 1]}"


def today_label(now: datetime | None = None) -> str:
    """
    Label for the current local day.

    Recomputed on every call: a clock change mid-session must move the
    mutable day with it.
    """
    return format_day_label(now or datetime.now())


def is_mutable(label: str, now: datetime | None = None) -> bool:
    """Only today's label is open to edits."""
    return label == today_label(now)
