# site_settings/apps.py
import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class SiteSettingsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'site_settings'
    verbose_name = 'Site Settings'

    def ready(self):
        """Connect cache invalidation signals."""
        from . import signals  # noqa: F401
        logger.debug("Site settings signals registered")
