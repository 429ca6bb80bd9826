from django.test import TestCase
from django.urls import reverse

from apps.accounts.models import User
from apps.notifications.models import Notification
from apps.notifications.services import notify


class NotificationCenterTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="center@example.com", password="pass123", first_name="C")
        self.first = notify(self.user, Notification.Type.ASSIGNMENT, title="First", body="older")
        self.second = notify(self.user, Notification.Type.CONFIRMATION, title="Second", body="newer")
        self.client.force_login(self.user)

    def test_lists_newest_first(self):
        response = self.client.get(reverse("notifications:center"))
        self.assertEqual(list(response.context["notifications"]), [self.second, self.first])
        self.assertEqual(response.context["unread_count"], 2)

    def test_only_own_notifications(self):
        other = User.objects.create_user(email="other@example.com", password="pass123")
        notify(other, Notification.Type.ASSIGNMENT, title="Not yours", body="x")
        response = self.client.get(reverse("notifications:center"))
        self.assertNotContains(response, "Not yours")

    def test_mark_one_read(self):
        self.client.post(reverse("notifications:mark_read"), {"notification_id": self.first.pk})
        self.first.refresh_from_db()
        self.second.refresh_from_db()
        self.assertTrue(self.first.is_read)
        self.assertFalse(self.second.is_read)

    def test_mark_all_read(self):
        response = self.client.post(reverse("notifications:mark_read"), {"notification_id": "all"})
        self.assertRedirects(response, reverse("notifications:center"))
        self.assertFalse(Notification.objects.filter(recipient=self.user, is_read=False).exists())

    def test_mark_read_is_post_only(self):
        self.assertEqual(self.client.get(reverse("notifications:mark_read")).status_code, 405)
