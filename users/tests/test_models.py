# users/tests/test_models.py
from django.test import TestCase, RequestFactory

from users.adapters import BackOfficeAccountAdapter
from users.models import User


class UserModelTest(TestCase):
    def test_create_user_with_email(self):
        """Test creating user with email works."""
        user = User.objects.create_user(
            email='Test@Example.com',
            password='testpass123',
            name='Test User',
        )
        self.assertEqual(user.email, 'test@example.com')
        self.assertTrue(user.check_password('testpass123'))
        self.assertFalse(user.is_staff)
        self.assertEqual(user.role, 'student')
        self.assertTrue(user.is_student)

    def test_create_user_without_password(self):
        user = User.objects.create_user(email='nopass@example.com')
        self.assertFalse(user.has_usable_password())

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='x')

    def test_create_superuser(self):
        """Test creating superuser works."""
        admin_user = User.objects.create_superuser(
            email='admin@example.com',
            password='adminpass123'
        )
        self.assertTrue(admin_user.is_staff)
        self.assertTrue(admin_user.is_superuser)
        self.assertEqual(admin_user.role, 'admin')
        self.assertTrue(admin_user.is_admin)

    def test_create_superuser_rejects_bad_flags(self):
        with self.assertRaises(ValueError):
            User.objects.create_superuser(
                email='admin@example.com', password='x', is_staff=False
            )

    def test_display_name_falls_back_to_email(self):
        user = User.objects.create_user(email='anon@example.com')
        self.assertEqual(user.display_name, 'anon@example.com')

        user.name = 'Aminah'
        self.assertEqual(user.display_name, 'Aminah')
        self.assertEqual(str(user), 'Aminah')

    def test_role_properties(self):
        teacher = User.objects.create_user(email='t@example.com', role='teacher')
        host = User.objects.create_user(email='h@example.com', role='live_host')
        self.assertTrue(teacher.is_teacher)
        self.assertFalse(teacher.is_admin)
        self.assertTrue(host.is_live_host)

    def test_search_users(self):
        User.objects.create_user(email='ali@example.com', name='Ali Hassan', phone='60123456789')
        User.objects.create_user(email='siti@example.com', name='Siti')
        self.assertEqual(User.objects.search_users('hassan').count(), 1)
        self.assertEqual(User.objects.search_users('6012345').count(), 1)


class AccountAdapterTest(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.adapter = BackOfficeAccountAdapter()

    def test_signup_closed(self):
        request = self.factory.get('/accounts/signup/')
        self.assertFalse(self.adapter.is_open_for_signup(request))

    def test_login_redirects_to_dashboard(self):
        request = self.factory.get('/accounts/login/')
        self.assertEqual(self.adapter.get_login_redirect_url(request), '/')
