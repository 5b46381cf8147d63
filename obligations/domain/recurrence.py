"""Expansion of template recurrence rules into concrete due dates.

Only a small subset of the iCalendar RRULE syntax is understood:

    FREQ=MONTHLY;BYMONTHDAY=<1..31>
    FREQ=YEARLY;BYMONTH=<1..12>;BYMONTHDAY=<1..31>

Keys may appear in any order. A day that does not exist in a given month
is clamped to that month's last day, so every month (or year) in the
window gets exactly one occurrence.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from functools import lru_cache

from .enums import Frequency
from .errors import InvalidDateRange, UnsupportedRecurrenceRule

_KNOWN_KEYS = {"FREQ", "BYMONTH", "BYMONTHDAY"}


@dataclass(frozen=True)
class RecurrenceRule:
    freq: Frequency
    by_month_day: int
    by_month: int | None = None

    def occurrence(self, year: int, month: int) -> date:
        day = min(self.by_month_day, _days_in_month(year, month))
        return date(year, month, day)


@lru_cache(maxsize=256)
def parse_rule(rule: str) -> RecurrenceRule:
    parts = _split_rule(rule)

    freq_value = parts.get("FREQ")
    if freq_value is None:
        raise UnsupportedRecurrenceRule(rule, "FREQ is required")
    try:
        freq = Frequency(freq_value.upper())
    except ValueError:
        raise UnsupportedRecurrenceRule(rule, f"FREQ={freq_value} is not supported") from None

    if "BYMONTHDAY" not in parts:
        raise UnsupportedRecurrenceRule(rule, "BYMONTHDAY is required")
    by_month_day = _parse_int(rule, parts, "BYMONTHDAY", 1, 31)

    by_month = None
    if freq == Frequency.YEARLY:
        if "BYMONTH" not in parts:
            raise UnsupportedRecurrenceRule(rule, "BYMONTH is required for FREQ=YEARLY")
        by_month = _parse_int(rule, parts, "BYMONTH", 1, 12)
    elif "BYMONTH" in parts:
        raise UnsupportedRecurrenceRule(rule, "BYMONTH is only supported with FREQ=YEARLY")

    return RecurrenceRule(freq=freq, by_month_day=by_month_day, by_month=by_month)


def expand(rule: str | RecurrenceRule, window_start: date, window_end: date) -> list[date]:
    """Return the sorted occurrences of ``rule`` inside ``[window_start, window_end]``."""
    if window_start > window_end:
        raise InvalidDateRange(window_start, window_end)
    parsed = parse_rule(rule) if isinstance(rule, str) else rule

    if parsed.freq == Frequency.MONTHLY:
        candidates = (
            parsed.occurrence(year, month) for year, month in _months_between(window_start, window_end)
        )
    else:
        candidates = (
            parsed.occurrence(year, parsed.by_month)
            for year in range(window_start.year, window_end.year + 1)
        )

    return sorted({day for day in candidates if window_start <= day <= window_end})


def _split_rule(rule: str) -> dict[str, str]:
    parts: dict[str, str] = {}
    for chunk in rule.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        key, sep, value = chunk.partition("=")
        key = key.strip().upper()
        if not sep or not value.strip():
            raise UnsupportedRecurrenceRule(rule, f"malformed component {chunk!r}")
        if key not in _KNOWN_KEYS:
            raise UnsupportedRecurrenceRule(rule, f"{key} is not supported")
        if key in parts:
            raise UnsupportedRecurrenceRule(rule, f"{key} given more than once")
        parts[key] = value.strip()
    return parts


def _parse_int(rule: str, parts: dict[str, str], key: str, low: int, high: int) -> int:
    raw = parts[key]
    try:
        value = int(raw)
    except ValueError:
        raise UnsupportedRecurrenceRule(rule, f"{key}={raw} is not a number") from None
    if not low <= value <= high:
        raise UnsupportedRecurrenceRule(rule, f"{key}={value} is outside {low}..{high}")
    return value


def _months_between(start: date, end: date):
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield year, month
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)


def _days_in_month(year: int, month: int) -> int:
    if month == 12:
        next_month = date(year + 1, 1, 1)
    else:
        next_month = date(year, month + 1, 1)
    return (next_month - timedelta(days=1)).day
