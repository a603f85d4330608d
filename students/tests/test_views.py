# students/tests/test_views.py
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.urls import reverse

from students.models import Student
from users.models import User


class StudentViewTest(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email='admin@example.com', password='testpass123', role='admin'
        )
        self.client.force_login(self.admin)

    def test_list_requires_admin(self):
        teacher = User.objects.create_user(email='t@example.com', password='x', role='teacher')
        self.client.force_login(teacher)

        response = self.client.get(reverse('students:student_list'))
        self.assertRedirects(response, reverse('home'), fetch_redirect_response=False)

    def test_list_search(self):
        for name, phone in [('Ahmad', '6011'), ('Zainab', '6022')]:
            user = User.objects.create_user(email=f'{name.lower()}@example.com', name=name)
            Student.objects.create(user=user, phone=phone)

        response = self.client.get(reverse('students:student_list'), {'search': 'zain'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.context['students']), 1)

    def test_create_student(self):
        response = self.client.post(reverse('students:student_create'), {
            'name': 'Nur Aisyah',
            'email': 'aisyah@example.com',
            'password': 'secret123',
            'password_confirmation': 'secret123',
            'ic_number': '990101015555',
            'country_code': '+60',
            'phone': '123456789',
            'status': 'active',
        })

        student = Student.objects.get(user__email='aisyah@example.com')
        self.assertRedirects(
            response,
            reverse('students:student_detail', args=[student.pk]),
            fetch_redirect_response=False,
        )
        self.assertEqual(student.phone, '60123456789')

    def test_create_rejects_short_ic_and_mismatched_password(self):
        response = self.client.post(reverse('students:student_create'), {
            'name': 'Nur Aisyah',
            'password': 'secret123',
            'password_confirmation': 'different',
            'ic_number': '1234',
            'phone': '123456789',
            'status': 'active',
        })

        self.assertEqual(response.status_code, 200)
        form = response.context['form']
        self.assertIn('ic_number', form.errors)
        self.assertIn('password_confirmation', form.errors)

    def test_import_preview_and_confirm(self):
        upload = SimpleUploadedFile(
            'students.csv',
            b'name,phone\nAli,60111\n,60122\n',
            content_type='text/csv',
        )
        response = self.client.post(reverse('students:student_import'), {'csv_file': upload})
        self.assertRedirects(response, reverse('students:student_import_preview'), fetch_redirect_response=False)

        preview = self.client.get(reverse('students:student_import_preview'))
        self.assertEqual(preview.context['stats']['valid'], 1)
        self.assertEqual(preview.context['stats']['invalid'], 1)

        self.client.post(reverse('students:student_import_preview'))
        self.assertTrue(Student.objects.filter(phone='60111').exists())

    def test_import_missing_columns_shows_error(self):
        upload = SimpleUploadedFile('students.csv', b'name\nAli\n', content_type='text/csv')
        response = self.client.post(reverse('students:student_import'), {'csv_file': upload})

        self.assertEqual(response.status_code, 200)
        self.assertIn('Missing required columns: phone', response.context['form'].errors['csv_file'])

    def test_import_header_only_shows_error(self):
        upload = SimpleUploadedFile('students.csv', b'name,phone\n', content_type='text/csv')
        response = self.client.post(reverse('students:student_import'), {'csv_file': upload})

        self.assertEqual(response.status_code, 200)
        self.assertIn('No data rows found in CSV file', response.context['form'].errors['csv_file'])

    def test_sample_csv_download(self):
        response = self.client.get(reverse('students:student_sample_csv'))
        self.assertEqual(response['Content-Type'], 'text/csv')
        self.assertIn(b'John Doe', response.content)
