"""
Duration string parsing for attendance records.

Upstream records carry worked time as free text such as ``"9h 18m"``,
``"45m"`` or ``"-"``. Parsing is best-effort: anything unreadable counts
as zero so a few dirty rows never break a report.
"""

import re

_HOURS_RE = re.compile(r"(\d+)h")
_MINUTES_RE = re.compile(r"(\d+)m")


def parse_duration(value: str | None) -> int:
    """Return the total minutes in a duration string like ``"9h 18m"``."""
    if not value or value == "-":
        return 0

    minutes = 0
    hours_match = _HOURS_RE.search(value)
    if hours_match:
        minutes += int(hours_match.group(1)) * 60
    minutes_match = _MINUTES_RE.search(value)
    if minutes_match:
        minutes += int(minutes_match.group(1))
    return minutes

