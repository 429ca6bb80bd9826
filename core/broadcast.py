"""
WebSocket broadcast helpers for CrewBook.

Synchronous code (views, services, signal handlers) pushes events to
Channels groups through these helpers. Group naming convention:
  - user_{user_id}: personal notification stream
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)


def ws_broadcast(group: str, payload: dict) -> None:
    """
    Fire-and-forget channel layer group_send from synchronous Django code.

    Failures are caught and logged; a WS glitch must never break the HTTP response.

    Args:
        group:   Channel group name (e.g. "user_7").
        payload: Dict passed to group_send; must include a "type" key whose
                 value maps to a handler method on the consumer.
    """
    try:
        channel_layer = get_channel_layer()
        if channel_layer is not None:
            async_to_sync(channel_layer.group_send)(group, payload)
    except Exception as exc:  # pragma: no cover - WS infra may not be running
        logger.warning("WebSocket broadcast to group '%s' failed: %s", group, exc)


def notify_user(user_id: int, notification_type: str, title: str, body: str,
                notification_id: int = 0) -> None:
    """
    Push a real-time notification to a specific user's WebSocket channel.

    Args:
        user_id:           The recipient's primary key.
        notification_type: One of the Notification.Type values.
        title:             Short notification title.
        body:              Full notification body text.
        notification_id:   PK of the persisted Notification record.
    """
    ws_broadcast(f"user_{user_id}", {
        "type": "notification",
        "notification_id": notification_id,
        "notification_type": notification_type,
        "title": title,
        "body": body,
    })
