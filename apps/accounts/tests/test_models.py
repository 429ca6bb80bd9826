from django.test import TestCase

from apps.accounts.models import Specialization, User


class UserModelTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            email="Test@Example.com",
            password="pass123",
            first_name="Test",
            last_name="User",
            role=User.Role.OPERATOR,
            specialization=Specialization.SOUND,
        )

    def test_user_str(self):
        self.assertIn("Test User", str(self.user))
        self.assertIn("Operator", str(self.user))

    def test_email_domain_is_normalized(self):
        self.assertEqual(self.user.email, "Test@example.com")

    def test_role_properties(self):
        self.assertTrue(self.user.is_operator)
        self.assertFalse(self.user.is_producer)
        self.assertFalse(self.user.is_booking_officer)

    def test_get_full_and_short_name(self):
        self.assertEqual(self.user.get_full_name(), "Test User")
        self.assertEqual(self.user.get_short_name(), "Test")

    def test_email_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email="", password="pass123")

    def test_superuser_acts_as_booking_officer(self):
        admin = User.objects.create_superuser(email="admin@example.com", password="pass123")
        self.assertTrue(admin.is_booking_officer)
        self.assertTrue(admin.is_staff)


class OperatorDirectoryTests(TestCase):
    def setUp(self):
        def make(email, role, specialization="", **kwargs):
            return User.objects.create_user(
                email=email, password="pass123", first_name="F", last_name=email,
                role=role, specialization=specialization, **kwargs,
            )

        self.camera = make("cam@example.com", User.Role.OPERATOR, Specialization.CAMERA)
        self.sound = make("sound@example.com", User.Role.OPERATOR, Specialization.SOUND)
        self.inactive = make("gone@example.com", User.Role.OPERATOR, Specialization.CAMERA, is_active=False)
        self.producer = make("prod@example.com", User.Role.PRODUCER)
        self.officer = make("bo@example.com", User.Role.BOOKING_OFFICER)

    def test_operators_excludes_other_roles_and_inactive(self):
        self.assertEqual(set(User.objects.operators()), {self.camera, self.sound})

    def test_with_specialization(self):
        self.assertEqual(list(User.objects.with_specialization(Specialization.CAMERA)), [self.camera])

    def test_booking_officers(self):
        self.assertEqual(list(User.objects.booking_officers()), [self.officer])
