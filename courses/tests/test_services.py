# courses/tests/test_services.py
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from courses.models import Course
from courses.services import CourseService, CourseWizard
from users.models import User


class CourseWizardTest(TestCase):
    def setUp(self):
        self.session = self.client.session

    def test_starts_on_first_step(self):
        wizard = CourseWizard(self.session)
        self.assertEqual(wizard.step, 1)
        self.assertEqual(wizard.step_title(), 'Basic Information')

    def test_store_and_move_between_steps(self):
        wizard = CourseWizard(self.session)
        wizard.store({'name': 'Tajwid Asas', 'description': 'Basics', 'unknown': 'x'})
        wizard.next()

        reloaded = CourseWizard(self.session)
        self.assertEqual(reloaded.step, 2)
        self.assertEqual(reloaded.stored_data(1), {'name': 'Tajwid Asas', 'description': 'Basics'})

        reloaded.previous()
        reloaded.previous()
        self.assertEqual(reloaded.step, 1)
        self.assertEqual(reloaded.get_form().initial['name'], 'Tajwid Asas')

    def test_validated_steps_none_when_a_step_is_missing(self):
        wizard = CourseWizard(self.session)
        wizard.store({'name': 'Tajwid Asas'})
        self.assertIsNone(wizard.validated_steps())

    def test_reset(self):
        wizard = CourseWizard(self.session)
        wizard.store({'name': 'Tajwid Asas'})
        wizard.next()
        wizard.reset()

        self.assertEqual(CourseWizard(self.session).step, 1)


class CourseServiceTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(email='admin@example.com', role='admin')

    def class_settings(self, **overrides):
        data = {
            'teaching_mode': 'online',
            'billing_type': 'per_month',
            'session_duration_minutes': 60,
            'sessions_per_month': 4,
            'price_per_session': None,
            'price_per_month': Decimal('200.00'),
            'price_per_minute': None,
            'class_description': '',
            'class_instructions': '',
        }
        data.update(overrides)
        return data

    def test_create_course_with_settings(self):
        course = CourseService.create_course(
            {'name': 'Tajwid Asas', 'description': 'Basics', 'teacher': None},
            {'fee_amount': Decimal('150.00'), 'billing_cycle': 'monthly', 'is_recurring': True},
            self.class_settings(),
            created_by=self.admin,
        )

        self.assertEqual(course.status, Course.STATUS_ACTIVE)
        self.assertEqual(course.fee_amount, Decimal('150.00'))
        self.assertEqual(course.formatted_fee, 'RM 150.00')
        self.assertEqual(course.class_settings.price_per_month, Decimal('200.00'))
        self.assertEqual(course.created_by, self.admin)

    def test_invalid_class_settings_roll_back(self):
        with self.assertRaises(ValidationError):
            CourseService.create_course(
                {'name': 'Tajwid Asas', 'description': '', 'teacher': None},
                {'fee_amount': Decimal('150.00'), 'billing_cycle': 'monthly', 'is_recurring': True},
                self.class_settings(billing_type='per_session', sessions_per_month=None),
                created_by=self.admin,
            )

        self.assertFalse(Course.objects.exists())
