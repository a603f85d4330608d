# shared/utils/dates.py
"""
Month and period helpers used by payslips, bank transfer filters and orders.
"""
import calendar
from datetime import date, datetime, timedelta

from django.utils import timezone


def parse_month(month: str) -> date:
    """
    Parse a 'YYYY-MM' string into the first day of that month.

    Raises:
        ValueError: If the string is not a valid month
    """
    return datetime.strptime(month, '%Y-%m').date().replace(day=1)


def month_bounds(month: str):
    """Return (first_day, last_day) for a 'YYYY-MM' month."""
    start = parse_month(month)
    last_day = calendar.monthrange(start.year, start.month)[1]
    return start, start.replace(day=last_day)


def current_month() -> str:
    return timezone.localdate().strftime('%Y-%m')


def format_month(month: str) -> str:
    """'2025-03' -> 'March 2025'."""
    return parse_month(month).strftime('%B %Y')


def add_months(value: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def date_range_filter(value: str):
    """
    Translate a date range filter into (start, end) dates, inclusive.

    A 7 character value ('YYYY-MM') covers the whole month, a full date
    ('YYYY-MM-DD') covers that single day. Returns None for bad input.
    """
    if not value:
        return None
    try:
        if len(value) == 7:
            return month_bounds(value)
        day = datetime.strptime(value, '%Y-%m-%d').date()
        return day, day
    except ValueError:
        return None


def period_start(period: str, now=None):
    """Start datetime for dashboard periods: 24h, 7d, 30d, 90d (default 7d)."""
    now = now or timezone.now()
    deltas = {
        '24h': timedelta(hours=24),
        '7d': timedelta(days=7),
        '30d': timedelta(days=30),
        '90d': timedelta(days=90),
    }
    return now - deltas.get(period, deltas['7d'])
