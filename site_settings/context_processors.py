# site_settings/context_processors.py
"""
Expose site identity and appearance settings to every template.
"""
import logging

from django.db import DatabaseError

from .services import DEFAULT_APPEARANCE, SettingsService

logger = logging.getLogger(__name__)


def site_config(request):
    try:
        return {
            'site': SettingsService.get_site_config(),
            'appearance': SettingsService.get_appearance_config(),
        }
    except DatabaseError as e:
        # Settings table may not exist yet (fresh checkout before migrate)
        logger.warning(f"Site settings unavailable: {e}")
        return {
            'site': {'name': 'Mudeer Bedaie'},
            'appearance': dict(DEFAULT_APPEARANCE, logo=None, favicon=None),
        }
