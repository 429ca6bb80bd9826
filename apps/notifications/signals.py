from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.notifications.models import Notification
from core.broadcast import notify_user


@receiver(post_save, sender=Notification)
def push_notification(sender, instance, created, **kwargs):
    """Stream a newly persisted notification to the recipient's open sessions once committed."""
    if created:
        transaction.on_commit(
            lambda: notify_user(
                user_id=instance.recipient_id,
                notification_type=instance.notification_type,
                title=instance.title,
                body=instance.body,
                notification_id=instance.pk,
            )
        )
