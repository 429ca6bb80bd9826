"""
Celery tasks for CrewBook accounts.

Tasks:
  register_push_token: stores a device push token against the user record.

Push-token registration is fire-and-forget: failures are logged and swallowed,
the caller never waits for or inspects the result.
"""

import logging

from celery import shared_task
from django.db import DatabaseError

logger = logging.getLogger(__name__)


@shared_task(name="accounts.register_push_token", queue="notifications", ignore_result=True)
def register_push_token(user_id: int, token: str) -> bool:
    """
    Persist a push token on the user with the given id.

    Args:
        user_id: Primary key of the user who just logged in or registered.
        token: Device token issued by the platform push service.

    Returns:
        True if a user row was updated, False otherwise (missing user, blank
        token, or a database error).
    """
    from apps.accounts.models import User

    token = (token or "").strip()
    if not token:
        return False

    try:
        updated = User.objects.filter(pk=user_id).update(push_token=token)
    except DatabaseError as exc:
        logger.warning("Saving push token for user %s failed: %s", user_id, exc)
        return False

    if not updated:
        logger.warning("Push token received for unknown user %s", user_id)
    return bool(updated)


def queue_push_token(user_id: int, token: str) -> None:
    """
    Dispatch register_push_token without letting broker errors reach the caller.

    Only physical devices submit a token; an empty token is a no-op.
    """
    if not token:
        return
    try:
        register_push_token.delay(user_id, token)
    except Exception as exc:  # pragma: no cover - broker may be down
        logger.warning("Could not queue push token for user %s: %s", user_id, exc)
