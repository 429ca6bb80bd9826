import datetime
from unittest import mock

from django.test import TestCase

from apps.accounts.models import User
from apps.notifications.models import Notification
from apps.notifications.services import notify, notify_many, unread_count


class TestNotificationModel(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            email="notify@example.com",
            password="pass123",
            first_name="Notify",
            last_name="Tester",
        )

    def test_notification_creation(self):
        notif = notify(
            self.user,
            Notification.Type.ASSIGNMENT,
            title="New Crew Assignment",
            body="You have been assigned as Camera Operator.",
            data={"assignment_id": 1},
        )
        self.assertFalse(notif.is_read)
        self.assertEqual(notif.data, {"assignment_id": 1})
        self.assertIn("Notify", str(notif))  # __str__ includes recipient short name

    def test_mark_read(self):
        notif = notify(self.user, Notification.Type.REMINDER, title="Reminder", body="Call time in 1 hour.")
        notif.mark_read()
        self.assertTrue(notif.is_read)
        self.assertIsNotNone(notif.read_at)
        self.assertLessEqual(notif.read_at, datetime.datetime.now(datetime.timezone.utc))

    def test_unread_count(self):
        other = User.objects.create_user(email="other@example.com", password="pass123")
        notify_many([self.user, other], Notification.Type.CHANGE, title="Update", body="Venue changed.")
        notify(self.user, Notification.Type.CHANGE, title="Update", body="Time changed.").mark_read()
        self.assertEqual(unread_count(self.user), 1)
        self.assertEqual(unread_count(other), 1)


class TestNotificationBroadcast(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="ws@example.com", password="pass123")

    def test_broadcast_after_commit(self):
        with mock.patch("apps.notifications.signals.notify_user") as push:
            with self.captureOnCommitCallbacks(execute=True):
                notif = notify(self.user, Notification.Type.MESSAGE, title="New Message", body="Hi")
                push.assert_not_called()
        push.assert_called_once_with(
            user_id=self.user.pk,
            notification_type=Notification.Type.MESSAGE,
            title="New Message",
            body="Hi",
            notification_id=notif.pk,
        )

    def test_broadcast_to_personal_group(self):
        with mock.patch("core.broadcast.ws_broadcast") as broadcast:
            with self.captureOnCommitCallbacks(execute=True):
                notify(self.user, Notification.Type.MESSAGE, title="New Message", body="Hi")
        group, payload = broadcast.call_args.args
        self.assertEqual(group, f"user_{self.user.pk}")
        self.assertEqual(payload["type"], "notification")
