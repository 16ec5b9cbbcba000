"""Helpers for ``YYYY-MM`` month strings."""
import calendar
import re
from datetime import date

from django.utils import timezone

MONTH_RE = re.compile(r'^\d{4}-\d{2}$')

# Length of the trailing spending-trend series on the dashboard
TREND_MONTHS = 6


def parse_month(value: str) -> date:
    """First day of ``value``; ``ValueError`` if it is not a real YYYY-MM month."""
    if not isinstance(value, str) or not MONTH_RE.fullmatch(value):
        raise ValueError("Month must be in YYYY-MM format")
    year, month = map(int, value.split('-'))
    if not 1 <= month <= 12 or year < 1:
        raise ValueError("Month must be in YYYY-MM format")
    return date(year, month, 1)


def month_of(day: date) -> str:
    return day.strftime('%Y-%m')


def month_bounds(month: str) -> tuple[date, date]:
    start = parse_month(month)
    last_day = calendar.monthrange(start.year, start.month)[1]
    return start, start.replace(day=last_day)


def shift_month(month: str, offset: int) -> str:
    start = parse_month(month)
    index = start.year * 12 + (start.month - 1) + offset
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def trailing_months(month: str, count: int = TREND_MONTHS) -> list[str]:
    """``count`` months ending at ``month``, oldest first."""
    return [shift_month(month, -offset) for offset in range(count - 1, -1, -1)]


def short_label(month: str) -> str:
    return parse_month(month).strftime('%b %Y')


def long_label(month: str) -> str:
    return parse_month(month).strftime('%B %Y')


def current_month(today: date | None = None) -> str:
    return month_of(today or timezone.localdate())
