# shared/utils/__init__.py
from .dates import (
    parse_month,
    month_bounds,
    current_month,
    format_month,
    add_months,
    date_range_filter,
    period_start,
)
from .formatting import format_money, normalize_phone, digits_only

__all__ = [
    'parse_month',
    'month_bounds',
    'current_month',
    'format_month',
    'add_months',
    'date_range_filter',
    'period_start',
    'format_money',
    'normalize_phone',
    'digits_only',
]
