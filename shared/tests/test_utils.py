# shared/tests/test_utils.py
from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from shared.utils import (
    add_months,
    date_range_filter,
    format_money,
    format_month,
    month_bounds,
    normalize_phone,
)


class DateHelpersTest(SimpleTestCase):

    def test_month_bounds_leap_year(self):
        self.assertEqual(month_bounds('2024-02'), (date(2024, 2, 1), date(2024, 2, 29)))

    def test_format_month(self):
        self.assertEqual(format_month('2025-03'), 'March 2025')

    def test_add_months_clamps_day(self):
        self.assertEqual(add_months(date(2024, 1, 31), 1), date(2024, 2, 29))
        self.assertEqual(add_months(date(2024, 11, 15), 3), date(2025, 2, 15))

    def test_date_range_filter(self):
        self.assertEqual(date_range_filter('2024-05'), (date(2024, 5, 1), date(2024, 5, 31)))
        self.assertEqual(date_range_filter('2024-05-06'), (date(2024, 5, 6), date(2024, 5, 6)))
        self.assertIsNone(date_range_filter('May'))
        self.assertIsNone(date_range_filter(''))


class FormattingTest(SimpleTestCase):

    def test_format_money(self):
        self.assertEqual(format_money(Decimal('1234.5')), 'RM 1,234.50')
        self.assertEqual(format_money(None), 'RM 0.00')

    def test_normalize_phone(self):
        self.assertEqual(normalize_phone('+60', '012-345 6789'), '600123456789')
