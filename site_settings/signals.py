# site_settings/signals.py
"""
Keep the settings cache in step with edits made outside SettingsService
(Django admin, fixtures, shell).
"""
import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Setting

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Setting)
@receiver(post_delete, sender=Setting)
def invalidate_setting_cache(sender, instance, **kwargs):
    from .services import SettingsService

    SettingsService.forget(instance.key, groups={instance.group})
    logger.debug(f"Cache invalidated for setting {instance.key}")
