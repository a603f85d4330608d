# teachers/tests/helpers.py
from datetime import date, time
from decimal import Decimal

from courses.models import ClassSession, Course, CourseClass
from teachers.models import Teacher
from users.models import User


def make_teacher(email='ustaz@example.com', name='Ustaz Ali'):
    user = User.objects.create_user(email=email, name=name, role='teacher')
    return Teacher.objects.create(user=user)


def make_class(teacher, rate=Decimal('50.00')):
    course = Course.objects.create(name=f'Course for {teacher.teacher_id}', teacher=teacher, status='active')
    return CourseClass.objects.create(
        course=course,
        teacher=teacher,
        title='Kelas Pagi',
        rate_type=CourseClass.RATE_PER_CLASS,
        teacher_rate=rate,
    )


def make_verified_session(course_class, verifier, day=date(2024, 5, 10)):
    session = ClassSession.objects.create(
        course_class=course_class,
        session_date=day,
        session_time=time(9, 0),
    )
    session.mark_completed()
    session.verify(verifier)
    return session
