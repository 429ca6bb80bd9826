"""Template context processors for CrewBook."""

import logging
from datetime import datetime

from django.db import DatabaseError

logger = logging.getLogger(__name__)


def unread_notification_count(request) -> dict:
    """
    Inject the unread notification count for the nav badge.

    Available as `{{ unread_notification_count }}` in all templates.
    """
    if not request.user.is_authenticated:
        return {"unread_notification_count": 0}

    from apps.notifications.services import unread_count

    try:
        count = unread_count(request.user)
    except DatabaseError as exc:
        logger.warning("Unread count unavailable for user %d: %s", request.user.pk, exc)
        count = 0

    return {"unread_notification_count": count}


def global_context(request):
    """
    Provides global context variables for templates.
    """
    return {
        "year": datetime.now().year,
        "user_role": getattr(request.user, "role", None) if request.user.is_authenticated else None,
    }
