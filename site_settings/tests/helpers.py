# site_settings/tests/helpers.py
from django.core.cache import cache


class SettingsCacheMixin:
    """The settings cache outlives the test transaction; start and end every test empty."""

    def setUp(self):
        super().setUp()
        cache.clear()
        self.addCleanup(cache.clear)
