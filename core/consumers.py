"""
WebSocket consumers for CrewBook's real-time features.

UserConsumer delivers personal notifications (assignments, confirmations,
cancellations, messages) to every open session of a user.

Channel group naming convention:
  - user_{user_id}: personal notification stream

Security: anonymous connections are immediately closed.
"""

import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.utils import timezone

logger = logging.getLogger(__name__)


class UserConsumer(AsyncWebsocketConsumer):
    """
    Personal WebSocket channel for a specific authenticated user.

    URL: /ws/user/
    Group: user_{user_id}
    """

    group_name = None

    async def connect(self) -> None:
        """Accept connection after verifying authentication."""
        self.user = self.scope["user"]

        if not self.user.is_authenticated:
            await self.close(code=4001)
            return

        self.group_name = f"user_{self.user.pk}"
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code: int) -> None:
        """Leave the personal notification group on disconnect."""
        if self.group_name:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def receive(self, text_data: str) -> None:
        """
        Handle client-to-server messages.

        Currently supports:
          - mark_read: mark a notification as read
        """
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            return

        if data.get("type") == "mark_read":
            notification_id = data.get("notification_id")
            if notification_id:
                await self._mark_notification_read(notification_id)

    async def notification(self, event: dict) -> None:
        """Forward a notification event to the connected client."""
        await self.send(text_data=json.dumps({
            "type": "notification",
            "notification_id": event["notification_id"],
            "notification_type": event["notification_type"],
            "title": event["title"],
            "body": event["body"],
        }))

    @database_sync_to_async
    def _mark_notification_read(self, notification_id: int) -> None:
        """Mark a notification as read if it belongs to this user."""
        from apps.notifications.models import Notification

        Notification.objects.filter(
            pk=notification_id, recipient=self.user
        ).update(is_read=True, read_at=timezone.now())
