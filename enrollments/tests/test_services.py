# enrollments/tests/test_services.py
from datetime import date
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import TestCase

from billing.models import Order
from courses.models import Course, CourseFeeSettings
from enrollments.models import Enrollment
from enrollments.services import EnrollmentService
from shared.constants import BillingReasons, OrderStatus, PaymentTypes
from students.models import Student
from users.models import User


class EnrollmentServiceTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', role='admin')
        self.student = Student.objects.create(
            user=User.objects.create_user(email='aisyah@example.com', name='Nur Aisyah'),
            phone='60123456789',
        )
        self.course = Course.objects.create(name='Tajwid Asas', status='active')
        CourseFeeSettings.objects.create(
            course=self.course,
            fee_amount=Decimal('150.00'),
            billing_cycle='monthly',
            is_recurring=True,
        )

    def enrollment_data(self, **overrides):
        data = {
            'student': self.student,
            'course': self.course,
            'status': 'enrolled',
            'enrollment_date': date(2024, 1, 10),
            'start_date': date(2024, 1, 15),
            'end_date': None,
            'enrollment_fee': None,
            'notes': '',
            'payment_method_type': Enrollment.PAYMENT_AUTOMATIC,
        }
        data.update(overrides)
        return data

    def test_automatic_enrollment_uses_course_fee_and_has_no_order(self):
        enrollment = EnrollmentService.enroll(self.enrollment_data(), enrolled_by=self.admin)

        self.assertEqual(enrollment.enrollment_fee, Decimal('150.00'))
        self.assertFalse(enrollment.manual_payment_required)
        self.assertEqual(enrollment.enrolled_by, self.admin)
        self.assertFalse(Order.objects.exists())

    def test_manual_enrollment_creates_first_order(self):
        enrollment = EnrollmentService.enroll(
            self.enrollment_data(payment_method_type=Enrollment.PAYMENT_MANUAL),
            enrolled_by=self.admin,
        )

        self.assertTrue(enrollment.manual_payment_required)
        order = enrollment.orders.get()
        self.assertEqual(order.status, OrderStatus.PENDING)
        self.assertEqual(order.billing_reason, BillingReasons.MANUAL)
        self.assertEqual(order.payment_method, PaymentTypes.MANUAL)
        self.assertEqual(order.student, self.student.user)
        self.assertEqual(order.amount, Decimal('150.00'))
        self.assertEqual(order.period_start, date(2024, 1, 15))
        self.assertEqual(order.period_end, date(2024, 2, 15))
        self.assertEqual(order.items.get().description, 'Course Fee - Tajwid Asas')

    def test_custom_fee_overrides_course_fee(self):
        enrollment = EnrollmentService.enroll(
            self.enrollment_data(enrollment_fee=Decimal('99.00'), payment_method_type=Enrollment.PAYMENT_MANUAL),
        )

        self.assertEqual(enrollment.enrollment_fee, Decimal('99.00'))
        self.assertEqual(enrollment.orders.get().amount, Decimal('99.00'))

    def test_waived_fee_order_is_zero(self):
        enrollment = EnrollmentService.enroll(
            self.enrollment_data(enrollment_fee=Decimal('0'), payment_method_type=Enrollment.PAYMENT_MANUAL),
        )

        enrollment.refresh_from_db()
        order = enrollment.orders.get()
        self.assertEqual(enrollment.enrollment_fee, Decimal('0'))
        self.assertEqual(order.amount, Decimal('0'))
        self.assertEqual(order.items.get().total_price, Decimal('0'))

    def test_non_recurring_course_gets_no_order(self):
        self.course.fee_settings.is_recurring = False
        self.course.fee_settings.save()

        enrollment = EnrollmentService.enroll(
            self.enrollment_data(payment_method_type=Enrollment.PAYMENT_MANUAL),
        )

        self.assertTrue(enrollment.manual_payment_required)
        self.assertFalse(Order.objects.exists())

    def test_order_failure_keeps_enrollment(self):
        with mock.patch(
            'enrollments.services.OrderService.create_manual_order',
            side_effect=RuntimeError('numbering failed'),
        ):
            enrollment = EnrollmentService.enroll(
                self.enrollment_data(payment_method_type=Enrollment.PAYMENT_MANUAL),
            )

        self.assertTrue(Enrollment.objects.filter(pk=enrollment.pk).exists())
        self.assertFalse(Order.objects.exists())

    def test_paid_order_clears_manual_payment_flag(self):
        enrollment = EnrollmentService.enroll(
            self.enrollment_data(payment_method_type=Enrollment.PAYMENT_MANUAL),
        )

        enrollment.orders.get().mark_as_paid()

        enrollment.refresh_from_db()
        self.assertFalse(enrollment.manual_payment_required)

    def test_update_status(self):
        enrollment = EnrollmentService.enroll(self.enrollment_data())

        EnrollmentService.update(enrollment, {'status': 'completed', 'notes': 'Finished'})

        enrollment.refresh_from_db()
        self.assertEqual(enrollment.status, 'completed')
        self.assertEqual(enrollment.notes, 'Finished')


class EnrollmentModelTest(TestCase):
    def setUp(self):
        self.student = Student.objects.create(user=User.objects.create_user(email='s@example.com'), phone='6011')
        self.course = Course.objects.create(name='Tajwid Asas')

    def test_end_date_before_start_date_rejected(self):
        with self.assertRaises(ValidationError):
            Enrollment.objects.create(
                student=self.student,
                course=self.course,
                start_date=date(2024, 2, 1),
                end_date=date(2024, 1, 1),
            )

    def test_manual_flag_only_for_manual_payments(self):
        enrollment = Enrollment.objects.create(
            student=self.student,
            course=self.course,
            payment_method_type=Enrollment.PAYMENT_AUTOMATIC,
            manual_payment_required=True,
        )
        self.assertFalse(enrollment.manual_payment_required)
