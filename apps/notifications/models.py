"""
Notifications models for CrewBook.

All user-facing notifications are persisted here. Real-time delivery to open
sessions happens via WebSocket (Django Channels); device push delivery is out
of scope.

Notification types map to workflow events; the type determines the icon
rendered in the notification center.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Notification(models.Model):
    """
    A persisted notification for a specific user.

    Notifications are created by service functions (not directly by views)
    as fire-and-forget side effects of production and assignment changes.

    The `data` JSON field stores context for linking to the relevant object
    (e.g., assignment ID).
    """

    class Type(models.TextChoices):
        ASSIGNMENT = "assignment", _("Crew Assignment")
        REMINDER = "reminder", _("Reminder")
        CONFIRMATION = "confirmation", _("Production Confirmed")
        CANCELLATION = "cancellation", _("Production Cancelled")
        MESSAGE = "message", _("New Message")
        OVERTIME = "overtime", _("Overtime Report")
        CHANGE = "change", _("Production Updated")

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    notification_type = models.CharField(max_length=20, choices=Type.choices)

    title = models.CharField(max_length=200)
    body = models.TextField()

    production = models.ForeignKey(
        "productions.Production",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )
    data = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Notification"
        verbose_name_plural = "Notifications"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "is_read"], name="notif_recipient_read_idx"),
            models.Index(fields=["recipient", "-created_at"], name="notif_recipient_created_idx"),
        ]

    def __str__(self) -> str:
        """Return a brief description of the notification."""
        return f"[{self.get_notification_type_display()}] → {self.recipient.get_short_name()}"

    def mark_read(self) -> None:
        """Mark this notification as read and record the timestamp."""
        from django.utils import timezone

        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=["is_read", "read_at"])
