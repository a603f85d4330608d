# teachers/tests/test_services.py
from datetime import date, time
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from core.exceptions import PayslipError
from courses.models import ClassSession
from teachers.models import Payslip
from teachers.services import PayslipGenerationService, TeacherService
from users.models import User

from .helpers import make_class, make_teacher, make_verified_session


class TeacherServiceTest(TestCase):
    def test_create_teacher_with_new_account(self):
        teacher = TeacherService.create_teacher({
            'name': 'Ustazah Mariam',
            'email': 'mariam@example.com',
            'password': 'secret123',
            'phone': '60123456789',
            'bank_name': 'Maybank',
        })

        self.assertEqual(teacher.user.role, 'teacher')
        self.assertEqual(teacher.teacher_id, 'TID001')
        self.assertEqual(teacher.bank_name, 'Maybank')
        self.assertIsNone(teacher.ic_number)

    def test_create_teacher_for_existing_user_promotes_role(self):
        user = User.objects.create_user(email='student@example.com', role='student')

        teacher = TeacherService.create_teacher({}, user=user)

        user.refresh_from_db()
        self.assertEqual(teacher.user, user)
        self.assertEqual(user.role, 'teacher')


class PayslipGenerationServiceTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', role='admin')
        self.teacher = make_teacher()
        self.course_class = make_class(self.teacher)

    def test_generate_for_teacher_uses_only_eligible_sessions(self):
        make_verified_session(self.course_class, self.admin)
        make_verified_session(self.course_class, self.admin, day=date(2024, 5, 20))
        unverified = ClassSession.objects.create(
            course_class=self.course_class, session_date=date(2024, 5, 22), session_time=time(9, 0),
        )
        unverified.mark_completed()
        make_verified_session(self.course_class, self.admin, day=date(2024, 6, 3))

        payslip = PayslipGenerationService.generate_for_teacher(self.teacher, '2024-05', self.admin)

        self.assertEqual(payslip.total_sessions, 2)
        self.assertEqual(payslip.total_amount, Decimal('100.00'))
        self.assertEqual(payslip.generated_by, self.admin)
        self.assertTrue(payslip.is_draft)

    def test_duplicate_payslip_refused(self):
        make_verified_session(self.course_class, self.admin)
        PayslipGenerationService.generate_for_teacher(self.teacher, '2024-05', self.admin)

        with self.assertRaises(PayslipError) as ctx:
            PayslipGenerationService.generate_for_teacher(self.teacher, '2024-05', self.admin)
        self.assertIn('already exists', ctx.exception.message)

    def test_invalid_month(self):
        with self.assertRaises(PayslipError):
            PayslipGenerationService.generate_for_teacher(self.teacher, '2024-13', self.admin)

    def test_can_generate_reasons(self):
        ok, reasons = PayslipGenerationService.can_generate(self.teacher, '2024-05')

        self.assertFalse(ok)
        self.assertEqual(reasons, ['No eligible sessions found for this teacher and month'])

    def test_generate_for_all(self):
        other = make_teacher('b@example.com', 'Ustazah Hawa')
        make_verified_session(self.course_class, self.admin)
        make_verified_session(make_class(other, rate=Decimal('70.00')), self.admin)
        make_teacher('idle@example.com', 'No Sessions')

        result = PayslipGenerationService.generate_for_all('2024-05', self.admin)

        self.assertEqual(result['total_teachers'], 2)
        self.assertEqual(result['successful'], 2)
        self.assertEqual(result['errors'], [])
        self.assertEqual(Payslip.objects.filter(month='2024-05').count(), 2)

    def test_preview_and_month_statistics(self):
        make_verified_session(self.course_class, self.admin)

        preview = PayslipGenerationService.preview(self.teacher, '2024-05')
        self.assertEqual(preview['total_sessions'], 1)
        self.assertEqual(preview['total_amount'], Decimal('50.00'))
        self.assertEqual(preview['formatted_month'], 'May 2024')

        stats = PayslipGenerationService.month_statistics('2024-05')
        self.assertEqual(stats['eligible_sessions'], 1)
        self.assertEqual(stats['eligible_amount'], Decimal('50.00'))
        self.assertEqual(stats['payslips_count'], 0)

    def test_available_sessions_include_those_on_the_payslip(self):
        on_payslip = make_verified_session(self.course_class, self.admin)
        payslip = PayslipGenerationService.generate_for_teacher(self.teacher, '2024-05', self.admin)
        later = make_verified_session(self.course_class, self.admin, day=date(2024, 5, 25))

        available = PayslipGenerationService.available_sessions(payslip)

        self.assertEqual(list(available), [on_payslip, later])


class GeneratePayslipsCommandTest(TestCase):
    def test_command_generates_and_reports(self):
        admin = User.objects.create_user(email='admin@example.com', role='admin')
        make_verified_session(make_class(make_teacher()), admin)

        out = StringIO()
        call_command('generate_payslips', month='2024-05', generated_by='admin@example.com', stdout=out)

        self.assertIn('Generated 1 of 1 payslips for 2024-05', out.getvalue())
        self.assertEqual(Payslip.objects.get().generated_by, admin)
