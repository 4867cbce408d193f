"""Conversions between "HH:MM" clock strings and minutes since midnight."""

from __future__ import annotations

import re

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def parse_clock(value: str) -> int:
    match = _CLOCK_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid time '{value}', expected HH:MM.")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid time '{value}', out of range.")
    return hours * 60 + minutes


def format_clock(total_minutes: int) -> str:
    hours, minutes = divmod(int(total_minutes), 60)
    return f"{hours:02d}:{minutes:02d}"
