"""Interval arithmetic on a 24-hour wraparound clock.

All values are fractional hours. A range whose end is numerically
smaller than its start runs past midnight; its effective end is pushed
into the next day (end + 24). Nothing here normalizes modulo 24 beyond
that single adjustment, so callers must pass raw end times.
"""

import math

HOURS_PER_DAY = 24.0


def effective_end(start: float, end: float) -> float:
    """End time adjusted for midnight wraparound."""
    return end + HOURS_PER_DAY if end < start else end


def duration(start: float, end: float) -> float:
    """Length of a range in hours. Zero when start == end."""
    return effective_end(start, end) - start


def overlaps(a_start: float, a_end: float, b_start: float, b_end: float) -> bool:
    """Half-open overlap test; touching endpoints do not overlap."""
    return a_start < effective_end(b_start, b_end) and effective_end(a_start, a_end) > b_start


def gap(a_end_effective: float, b_start: float) -> float:
    """Absolute distance between an already-resolved end and a start."""
    return abs(b_start - a_end_effective)


def is_valid_time(value: float) -> bool:
    """True for a finite hour value in [0, 24)."""
    return math.isfinite(value) and 0 <= value < HOURS_PER_DAY


def round_to_quarter(value: float) -> float:
    """Round to the nearest quarter-hour, halves rounding up."""
    return math.floor(value * 4 + 0.5) / 4


def ceil_to_quarter(value: float) -> float:
    """Round up to the next quarter-hour."""
    return math.ceil(value * 4) / 4


def format_time(value: float) -> str:
    """Render an hour value as HH:MM."""
    total_minutes = int(round(value * 60)) % (24 * 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"
