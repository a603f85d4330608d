# core/tests/test_filters.py
from decimal import Decimal

from django.template import Context, Template
from django.test import SimpleTestCase

from core.templatetags.backoffice_filters import badge_color, get_item, money, percentage


class BackofficeFiltersTest(SimpleTestCase):

    def test_money(self):
        self.assertEqual(money(Decimal('2500')), 'RM 2,500.00')

    def test_badge_color(self):
        self.assertEqual(badge_color('succeeded'), 'emerald')
        self.assertEqual(badge_color('no_show'), 'red')
        self.assertEqual(badge_color('mystery'), 'gray')

    def test_get_item(self):
        self.assertEqual(get_item({'Monday': [1]}, 'Monday'), [1])
        self.assertIsNone(get_item(None, 'Monday'))

    def test_percentage(self):
        self.assertEqual(percentage(12.5), '12.50%')
        self.assertEqual(percentage(None), '0%')

    def test_in_template(self):
        rendered = Template('{% load backoffice_filters %}{{ amount|money }}').render(Context({'amount': 10}))
        self.assertEqual(rendered, 'RM 10.00')
