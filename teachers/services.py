# teachers/services.py
"""
Teacher onboarding and payslip generation.
"""
import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from core.exceptions import PayslipError
from courses.models import ClassSession
from shared.constants import PayoutStatus, PayslipStatus, UserRoles
from shared.utils import format_month, parse_month

from .models import Payslip, Teacher

logger = logging.getLogger(__name__)

User = get_user_model()


class TeacherService:

    @staticmethod
    @transaction.atomic
    def create_teacher(data, user=None):
        """
        Create a teacher profile.

        Uses ``user`` when given, otherwise creates a user account from
        name/email/password in ``data``.
        """
        if user is None:
            user = User.objects.create_user(
                email=data['email'],
                password=data['password'],
                name=data['name'],
                phone=data.get('phone') or None,
                role=UserRoles.TEACHER,
            )
        elif user.role != UserRoles.TEACHER and not user.is_admin:
            user.role = UserRoles.TEACHER
            user.save(update_fields=['role'])

        teacher = Teacher.objects.create(
            user=user,
            ic_number=data.get('ic_number') or None,
            phone=data.get('phone') or '',
            status=data.get('status') or 'active',
            joined_at=data.get('joined_at') or timezone.localdate(),
            bank_account_holder=data.get('bank_account_holder') or '',
            bank_account_number=data.get('bank_account_number') or '',
            bank_name=data.get('bank_name') or '',
        )
        logger.info(f"Teacher {teacher.teacher_id} created for {user.email}")
        return teacher

    @staticmethod
    @transaction.atomic
    def update_teacher(teacher, data):
        user = teacher.user
        user.name = data['name']
        user.email = data['email']
        user.save(update_fields=['name', 'email'])

        for field in ('ic_number', 'phone', 'status', 'joined_at',
                      'bank_account_holder', 'bank_account_number', 'bank_name'):
            if field in data:
                setattr(teacher, field, data[field] if data[field] is not None else '')
        teacher.ic_number = teacher.ic_number or None
        teacher.save()
        return teacher


class PayslipGenerationService:
    """Build monthly payslips from completed, verified, unpaid sessions."""

    @staticmethod
    def _validate_month(month):
        try:
            parse_month(month)
        except (TypeError, ValueError):
            raise PayslipError(f"Invalid month '{month}'. Use YYYY-MM.", user_friendly=True)

    @classmethod
    def eligible_sessions(cls, teacher, month):
        cls._validate_month(month)
        return (
            ClassSession.objects
            .for_teacher(teacher)
            .in_month(month)
            .eligible_for_payslip()
            .select_related('course_class__course')
            .order_by('session_date', 'session_time')
        )

    @classmethod
    def available_sessions(cls, payslip):
        """Sessions an admin may tick on a draft payslip: eligible ones plus those already on it."""
        eligible = ClassSession.objects.for_teacher(payslip.teacher).in_month(payslip.month).filter(
            status='completed',
            verified_at__isnull=False,
            allowance_amount__isnull=False,
        )
        unpaid = eligible.filter(payout_status=PayoutStatus.UNPAID)
        on_payslip = eligible.filter(
            payout_status=PayoutStatus.INCLUDED_IN_PAYSLIP,
            payslip_sessions__payslip=payslip,
        )
        return (unpaid | on_payslip).distinct().select_related(
            'course_class__course'
        ).order_by('session_date', 'session_time')

    @classmethod
    def can_generate(cls, teacher, month):
        """Return (ok, reasons) for generating a payslip."""
        reasons = []

        existing = Payslip.objects.filter(teacher=teacher, month=month).first()
        if existing:
            reasons.append('Payslip already exists for this teacher and month')
        if not cls.eligible_sessions(teacher, month).exists():
            reasons.append('No eligible sessions found for this teacher and month')

        return not reasons, reasons

    @classmethod
    @transaction.atomic
    def generate_for_teacher(cls, teacher, month, generated_by):
        cls._validate_month(month)

        if Payslip.objects.filter(teacher=teacher, month=month).exists():
            raise PayslipError(
                f"Payslip already exists for {teacher.display_name} for {month}",
                user_friendly=True,
            )

        payslip = Payslip.objects.create(
            teacher=teacher,
            month=month,
            year=int(month[:4]),
            status=PayslipStatus.DRAFT,
            generated_at=timezone.now(),
            generated_by=generated_by,
        )

        for session in cls.eligible_sessions(teacher, month):
            payslip.add_session(session, recalculate=False)
        payslip.recalculate_totals()

        logger.info(
            f"Generated payslip {payslip.pk} for {teacher.teacher_id} {month}: "
            f"{payslip.total_sessions} sessions, {payslip.total_amount}"
        )
        return payslip

    @classmethod
    def generate_for_all(cls, month, generated_by):
        """Generate payslips for every teacher with eligible sessions in the month."""
        cls._validate_month(month)

        teacher_ids = (
            ClassSession.objects.in_month(month)
            .eligible_for_payslip()
            .values_list('course_class__teacher_id', flat=True)
            .distinct()
        )

        generated = []
        errors = []
        teachers = Teacher.objects.filter(pk__in=list(teacher_ids)).select_related('user')
        for teacher in teachers:
            try:
                generated.append(cls.generate_for_teacher(teacher, month, generated_by))
            except PayslipError as e:
                errors.append({'teacher': teacher.display_name, 'error': e.message})

        return {
            'generated': generated,
            'errors': errors,
            'total_teachers': len(teachers),
            'successful': len(generated),
            'failed': len(errors),
        }

    @classmethod
    def preview(cls, teacher, month):
        sessions = list(cls.eligible_sessions(teacher, month))
        return {
            'teacher': teacher,
            'month': month,
            'formatted_month': format_month(month),
            'sessions': sessions,
            'total_sessions': len(sessions),
            'total_amount': sum((s.teacher_allowance_amount for s in sessions), Decimal('0')),
        }

    @classmethod
    def month_statistics(cls, month):
        cls._validate_month(month)
        sessions = ClassSession.objects.in_month(month)

        eligible = sessions.eligible_for_payslip()
        included = sessions.filter(payout_status=PayoutStatus.INCLUDED_IN_PAYSLIP)
        paid = sessions.filter(payout_status=PayoutStatus.PAID)

        def total(queryset):
            return queryset.aggregate(total=Sum('allowance_amount'))['total'] or Decimal('0')

        payslips = Payslip.objects.filter(month=month)

        return {
            'eligible_sessions': eligible.count(),
            'sessions_in_payslips': included.count(),
            'paid_sessions': paid.count(),
            'eligible_amount': total(eligible),
            'amount_in_payslips': total(included),
            'paid_amount': total(paid),
            'payslips_count': payslips.count(),
            'draft_payslips': payslips.filter(status=PayslipStatus.DRAFT).count(),
            'finalized_payslips': payslips.filter(status=PayslipStatus.FINALIZED).count(),
            'paid_payslips': payslips.filter(status=PayslipStatus.PAID).count(),
        }
