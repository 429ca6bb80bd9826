"""
Notification writers for CrewBook.

Every workflow side effect goes through `notify` so recipients, types and
linking data are recorded the same way everywhere.
"""

import logging
from typing import Iterable, Optional

from apps.notifications.models import Notification

logger = logging.getLogger(__name__)


def notify(
    recipient,
    notification_type: str,
    title: str,
    body: str,
    production=None,
    data: Optional[dict] = None,
) -> Notification:
    """
    Persist one notification for one user.

    Args:
        recipient: The user to notify.
        notification_type: One of Notification.Type.
        title: Short heading.
        body: Full text shown in the notification center.
        production: Optional production the notification refers to.
        data: Optional extra context (e.g. {"assignment_id": 3}).

    Returns:
        The created Notification.
    """
    return Notification.objects.create(
        recipient=recipient,
        notification_type=notification_type,
        title=title,
        body=body,
        production=production,
        data=data or {},
    )


def notify_many(recipients: Iterable, notification_type: str, title: str, body: str,
                production=None) -> list[Notification]:
    """Send the same notification to several users, one row each."""
    return [notify(r, notification_type, title, body, production=production) for r in recipients]


def unread_count(user) -> int:
    return Notification.objects.filter(recipient=user, is_read=False).count()
