# teachers/tests/test_models.py
from datetime import date
from decimal import Decimal

from django.test import TestCase

from core.exceptions import PayslipError
from shared.constants import PayoutStatus, PayslipStatus
from teachers.models import Payslip
from users.models import User

from .helpers import make_class, make_teacher, make_verified_session


class TeacherModelTest(TestCase):
    def test_teacher_ids_are_sequential(self):
        first = make_teacher('a@example.com')
        second = make_teacher('b@example.com')

        self.assertEqual(first.teacher_id, 'TID001')
        self.assertEqual(second.teacher_id, 'TID002')

    def test_toggle_status(self):
        teacher = make_teacher()
        self.assertEqual(teacher.toggle_status(), 'inactive')
        self.assertFalse(teacher.is_active)
        self.assertEqual(teacher.toggle_status(), 'active')


class PayslipStateTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', role='admin')
        self.teacher = make_teacher()
        self.course_class = make_class(self.teacher)
        self.session = make_verified_session(self.course_class, self.admin)
        self.payslip = Payslip.objects.create(teacher=self.teacher, month='2024-05')

    def test_year_filled_from_month(self):
        self.assertEqual(self.payslip.year, 2024)
        self.assertEqual(self.payslip.formatted_month, 'May 2024')

    def test_add_session_updates_totals_and_payout_status(self):
        self.payslip.add_session(self.session)

        self.session.refresh_from_db()
        self.assertEqual(self.session.payout_status, PayoutStatus.INCLUDED_IN_PAYSLIP)
        self.assertEqual(self.payslip.total_sessions, 1)
        self.assertEqual(self.payslip.total_amount, Decimal('50.00'))

    def test_session_cannot_join_two_payslips(self):
        self.payslip.add_session(self.session)
        other_teacher_payslip = Payslip.objects.create(
            teacher=make_teacher('b@example.com'), month='2024-05'
        )

        with self.assertRaises(PayslipError):
            other_teacher_payslip.add_session(self.session)

    def test_finalize_requires_sessions(self):
        with self.assertRaises(PayslipError):
            self.payslip.finalize()

        self.payslip.add_session(self.session)
        self.payslip.finalize()
        self.assertEqual(self.payslip.status, PayslipStatus.FINALIZED)
        self.assertIsNotNone(self.payslip.finalized_at)

    def test_mark_as_paid_pays_sessions(self):
        self.payslip.add_session(self.session)

        with self.assertRaises(PayslipError):
            self.payslip.mark_as_paid()

        self.payslip.finalize()
        self.payslip.mark_as_paid()

        self.session.refresh_from_db()
        self.assertEqual(self.payslip.status, PayslipStatus.PAID)
        self.assertEqual(self.session.payout_status, PayoutStatus.PAID)

    def test_revert_to_draft(self):
        self.payslip.add_session(self.session)
        self.payslip.finalize()
        self.payslip.revert_to_draft()

        self.assertTrue(self.payslip.is_draft)
        self.assertIsNone(self.payslip.finalized_at)

        with self.assertRaises(PayslipError):
            self.payslip.revert_to_draft()

    def test_finalized_payslip_cannot_be_edited(self):
        self.payslip.add_session(self.session)
        self.payslip.finalize()

        with self.assertRaises(PayslipError):
            self.payslip.remove_session(self.session)

    def test_sync_sessions(self):
        second = make_verified_session(self.course_class, self.admin, day=date(2024, 5, 17))
        self.payslip.add_session(self.session)

        self.payslip.sync_sessions([second.pk])

        self.session.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(list(self.payslip.sessions.all()), [second])
        self.assertEqual(self.session.payout_status, PayoutStatus.UNPAID)
        self.assertEqual(second.payout_status, PayoutStatus.INCLUDED_IN_PAYSLIP)
        self.assertEqual(self.payslip.total_sessions, 1)
