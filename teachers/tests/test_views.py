# teachers/tests/test_views.py
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse

from shared.constants import PayoutStatus, PayslipStatus
from teachers.models import Payslip, Teacher
from teachers.services import PayslipGenerationService
from users.models import User

from .helpers import make_class, make_teacher, make_verified_session


class TeacherViewTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', password='testpass123', role='admin')
        self.client.force_login(self.admin)

    def test_create_teacher_new_account(self):
        response = self.client.post(reverse('teachers:teacher_create'), {
            'mode': 'new',
            'name': 'Ustazah Mariam',
            'email': 'mariam@example.com',
            'password': 'secret123',
            'password_confirmation': 'secret123',
            'status': 'active',
            'joined_at': '2024-01-15',
        })

        teacher = Teacher.objects.get(user__email='mariam@example.com')
        self.assertRedirects(
            response,
            reverse('teachers:teacher_detail', args=[teacher.pk]),
            fetch_redirect_response=False,
        )

    def test_list_filters_by_status(self):
        make_teacher('a@example.com', 'Active One')
        inactive = make_teacher('b@example.com', 'Inactive One')
        inactive.toggle_status()

        response = self.client.get(reverse('teachers:teacher_list'), {'status': 'inactive'})

        self.assertEqual(list(response.context['teachers']), [inactive])

    def test_toggle_status(self):
        teacher = make_teacher()

        self.client.post(reverse('teachers:teacher_toggle_status', args=[teacher.pk]))

        teacher.refresh_from_db()
        self.assertEqual(teacher.status, 'inactive')


class PayslipViewTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', password='testpass123', role='admin')
        self.client.force_login(self.admin)
        self.teacher = make_teacher()
        self.course_class = make_class(self.teacher)
        self.session = make_verified_session(self.course_class, self.admin)

    def test_generate_preview_on_get(self):
        response = self.client.get(reverse('teachers:payslip_generate'), {
            'teacher': self.teacher.pk, 'month': '2024-05',
        })

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['preview']['total_amount'], Decimal('50.00'))
        self.assertFalse(Payslip.objects.exists())

    def test_generate_for_teacher_on_post(self):
        response = self.client.post(reverse('teachers:payslip_generate'), {
            'teacher': self.teacher.pk, 'month': '2024-05',
        })

        payslip = Payslip.objects.get()
        self.assertRedirects(
            response,
            reverse('teachers:payslip_detail', args=[payslip.pk]),
            fetch_redirect_response=False,
        )

    def test_finalize_and_pay(self):
        payslip = PayslipGenerationService.generate_for_teacher(self.teacher, '2024-05', self.admin)

        self.client.post(reverse('teachers:payslip_finalize', args=[payslip.pk]))
        self.client.post(reverse('teachers:payslip_mark_paid', args=[payslip.pk]))

        payslip.refresh_from_db()
        self.session.refresh_from_db()
        self.assertEqual(payslip.status, PayslipStatus.PAID)
        self.assertEqual(self.session.payout_status, PayoutStatus.PAID)

    def test_edit_removes_sessions(self):
        payslip = PayslipGenerationService.generate_for_teacher(self.teacher, '2024-05', self.admin)

        response = self.client.post(reverse('teachers:payslip_edit', args=[payslip.pk]), {'notes': 'Checked'})

        self.assertRedirects(
            response,
            reverse('teachers:payslip_detail', args=[payslip.pk]),
            fetch_redirect_response=False,
        )
        payslip.refresh_from_db()
        self.assertEqual(payslip.total_sessions, 0)
        self.assertEqual(payslip.notes, 'Checked')

    def test_delete_draft_releases_sessions(self):
        payslip = PayslipGenerationService.generate_for_teacher(self.teacher, '2024-05', self.admin)

        response = self.client.post(reverse('teachers:payslip_delete', args=[payslip.pk]))

        self.assertRedirects(response, reverse('teachers:payslip_list'), fetch_redirect_response=False)
        self.session.refresh_from_db()
        self.assertEqual(self.session.payout_status, PayoutStatus.UNPAID)
        self.assertFalse(Payslip.objects.exists())
