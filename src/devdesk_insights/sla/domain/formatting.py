"""Human-readable durations for SLA and team dashboards."""

import math

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR
MS_PER_WEEK = 7 * MS_PER_DAY


def format_duration(milliseconds: float) -> str:
    """
    Format the magnitude of a duration.

    >=24h -> "2d" or "2d 5h"; >=1h -> "3h 20m"; otherwise "45m".
    """
    abs_ms = abs(milliseconds)
    hours = int(abs_ms // MS_PER_HOUR)
    minutes = int((abs_ms % MS_PER_HOUR) // MS_PER_MINUTE)

    if hours >= 24:
        days, remaining_hours = divmod(hours, 24)
        return f"{days}d {remaining_hours}h" if remaining_hours > 0 else f"{days}d"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_time_remaining(milliseconds: float) -> str:
    """Signed variant: "2h 5m remaining" or "1d 3h overdue"."""
    suffix = "overdue" if milliseconds < 0 else "remaining"
    return f"{format_duration(milliseconds)} {suffix}"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_average(milliseconds: float) -> str:
    """
    Whole-unit rendering of an average latency.

    Weeks from 7 days, days from 1 day, hours from 1 hour, else "< 1h".
    """
    if milliseconds >= MS_PER_WEEK:
        return f"{_round_half_up(milliseconds / MS_PER_WEEK)}w"
    if milliseconds >= MS_PER_DAY:
        return f"{_round_half_up(milliseconds / MS_PER_DAY)}d"
    if milliseconds >= MS_PER_HOUR:
        return f"{_round_half_up(milliseconds / MS_PER_HOUR)}h"
    return "< 1h"
