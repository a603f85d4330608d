# enrollments/services.py
import logging

from django.db import transaction

from billing.services import OrderService

from .models import Enrollment

logger = logging.getLogger(__name__)


class EnrollmentService:

    @staticmethod
    def default_fee(course):
        return course.fee_amount

    @staticmethod
    def needs_manual_order(enrollment):
        fee_settings = enrollment.course.fee_settings_or_none
        return bool(enrollment.manual_payment_required and fee_settings and fee_settings.is_recurring)

    @staticmethod
    def enroll(data, enrolled_by=None):
        """
        Create an enrollment from cleaned form data.

        Manual enrollments in a recurring course also get their first
        pending order. A failure there is logged and the enrollment is kept.
        """
        course = data['course']
        fee = data.get('enrollment_fee')
        is_manual = data.get('payment_method_type') == Enrollment.PAYMENT_MANUAL

        with transaction.atomic():
            enrollment = Enrollment.objects.create(
                student=data['student'],
                course=course,
                enrolled_by=enrolled_by,
                status=data['status'],
                enrollment_date=data['enrollment_date'],
                start_date=data.get('start_date'),
                end_date=data.get('end_date'),
                enrollment_fee=fee if fee is not None else EnrollmentService.default_fee(course),
                notes=data.get('notes') or '',
                payment_method_type=data['payment_method_type'],
                manual_payment_required=is_manual,
            )

        logger.info(
            f"Student {enrollment.student_id} enrolled in course {course.pk} "
            f"({enrollment.payment_method_type} payment)"
        )

        if EnrollmentService.needs_manual_order(enrollment):
            try:
                OrderService.create_manual_order(enrollment)
            except Exception as e:
                logger.error(
                    f"Manual payment order setup failed for enrollment {enrollment.pk}: {e}",
                    exc_info=True
                )

        return enrollment

    @staticmethod
    def update(enrollment, data):
        previous_status = Enrollment.objects.filter(pk=enrollment.pk).values_list('status', flat=True).first()
        for field, value in data.items():
            setattr(enrollment, field, value)
        enrollment.save()

        if previous_status != enrollment.status:
            logger.info(f"Enrollment {enrollment.pk} status changed: {previous_status} -> {enrollment.status}")
        return enrollment

    @staticmethod
    def delete(enrollment):
        enrollment_id = enrollment.pk
        enrollment.delete()
        logger.info(f"Enrollment {enrollment_id} deleted")
