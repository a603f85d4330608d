# billing/apps.py
import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class BillingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'billing'
    verbose_name = 'Orders & Payments'

    def ready(self):
        from . import signals  # noqa: F401
        logger.debug("Billing signals registered")
