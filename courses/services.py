# courses/services.py
"""
Course creation and class session services.
"""
import logging

from django.db import transaction

from .forms import WIZARD_STEPS
from .models import ClassAttendance, Course, CourseClassSettings, CourseFeeSettings

logger = logging.getLogger(__name__)


class CourseWizard:
    """
    Three step course creation state kept in the user's session.

    Each step keeps the raw submitted values so that moving back and
    forth between steps shows what was entered.
    """

    SESSION_KEY = 'course_wizard'
    FIRST_STEP = 1
    LAST_STEP = len(WIZARD_STEPS)

    def __init__(self, session):
        self.session = session
        self.state = session.get(self.SESSION_KEY) or {'step': self.FIRST_STEP, 'data': {}}

    @property
    def step(self):
        return self.state['step']

    @property
    def steps(self):
        return [(number, title) for number, title, _ in WIZARD_STEPS]

    def form_class(self, step=None):
        return WIZARD_STEPS[(step or self.step) - 1][2]

    def step_title(self):
        return WIZARD_STEPS[self.step - 1][1]

    def stored_data(self, step=None):
        return self.state['data'].get(str(step or self.step))

    def get_form(self, data=None):
        """Bound form for submitted data, otherwise prefilled from stored values."""
        form_class = self.form_class()
        if data is not None:
            return form_class(data)
        stored = self.stored_data()
        return form_class(initial=stored) if stored is not None else form_class()

    def store(self, data):
        # Unchecked checkboxes are absent from POST; the widget reads them as False
        form_class = self.form_class()
        self.state['data'][str(self.step)] = {
            name: field.widget.value_from_datadict(data, {}, name)
            for name, field in form_class.base_fields.items()
        }
        self._save()

    def next(self):
        self.state['step'] = min(self.step + 1, self.LAST_STEP)
        self._save()

    def previous(self):
        self.state['step'] = max(self.step - 1, self.FIRST_STEP)
        self._save()

    def validated_steps(self):
        """Re-validate every stored step; returns cleaned data per step or None."""
        cleaned = []
        for number, _, form_class in WIZARD_STEPS:
            form = form_class(self.stored_data(number) or {})
            if not form.is_valid():
                return None
            cleaned.append(form.cleaned_data)
        return cleaned

    def reset(self):
        self.session.pop(self.SESSION_KEY, None)

    def _save(self):
        self.session[self.SESSION_KEY] = self.state
        self.session.modified = True


class CourseService:

    @staticmethod
    @transaction.atomic
    def create_course(basic, fee, class_settings, created_by=None):
        """Create a course with its fee and class settings in one transaction."""
        course = Course.objects.create(
            name=basic['name'],
            description=basic.get('description') or '',
            teacher=basic.get('teacher'),
            status=Course.STATUS_ACTIVE,
            created_by=created_by,
        )

        fee_settings = CourseFeeSettings(
            course=course,
            fee_amount=fee['fee_amount'],
            billing_cycle=fee['billing_cycle'],
            is_recurring=fee.get('is_recurring', False),
        )
        fee_settings.full_clean()
        fee_settings.save()

        settings_row = CourseClassSettings(course=course, **class_settings)
        settings_row.full_clean()
        settings_row.save()

        logger.info(f"Course '{course.name}' ({course.pk}) created by {created_by.email if created_by else 'system'}")
        return course

    @staticmethod
    @transaction.atomic
    def update_course(course, course_form, fee, class_settings):
        course = course_form.save()

        CourseFeeSettings.objects.update_or_create(course=course, defaults=fee)

        settings_row = course.class_settings_or_none or CourseClassSettings(course=course)
        for field, value in class_settings.items():
            setattr(settings_row, field, value)
        settings_row.full_clean()
        settings_row.save()

        logger.info(f"Course {course.pk} updated")
        return course


class SessionService:

    @staticmethod
    @transaction.atomic
    def record_attendance(session, statuses):
        """Save attendance statuses keyed by student pk."""
        for student_id, status in statuses.items():
            ClassAttendance.objects.update_or_create(
                session=session,
                student_id=student_id,
                defaults={'status': status},
            )
        logger.info(f"Attendance recorded for session {session.pk}: {len(statuses)} students")
