# billing/signals.py
import logging

from django.db.models.signals import pre_save
from django.dispatch import receiver

from shared.constants import OrderStatus

from .models import Order, Payment

logger = logging.getLogger(__name__)


# ============================================================
# ORDER STATUS CHANGE (pre_save sees the stored status)
# ============================================================

@receiver(pre_save, sender=Order)
def handle_order_status_change(sender, instance, **kwargs):
    if not instance.pk:
        return

    old_status = sender.objects.filter(pk=instance.pk).values_list('status', flat=True).first()
    if old_status is None or old_status == instance.status:
        return

    logger.info(f"Order {instance.order_number} status changed: {old_status} -> {instance.status}")

    if instance.status == OrderStatus.PAID and instance.enrollment_id:
        enrollment = instance.enrollment
        if enrollment.manual_payment_required:
            enrollment.manual_payment_required = False
            enrollment.save(update_fields=['manual_payment_required'])
            logger.info(f"Enrollment {enrollment.pk} no longer awaits manual payment")


# ============================================================
# PAYMENT STATUS CHANGE
# ============================================================

@receiver(pre_save, sender=Payment)
def handle_payment_status_change(sender, instance, **kwargs):
    if not instance.pk:
        return

    old_status = sender.objects.filter(pk=instance.pk).values_list('status', flat=True).first()
    if old_status is None or old_status == instance.status:
        return

    logger.info(
        f"Payment {instance.pk} ({instance.get_payment_type_display()}) status changed: "
        f"{old_status} -> {instance.status}"
    )
