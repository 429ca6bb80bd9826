"""
Notifications views for CrewBook.

View inventory:
  NotificationCenterView → newest-first list of the current user's notifications
  mark_read              → POST: mark one or all notifications read, then redirect back
"""

import logging

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.utils import timezone
from django.utils.decorators import method_decorator
from django.views import View

from apps.notifications.models import Notification

logger = logging.getLogger(__name__)


@method_decorator(login_required(login_url="/accounts/login/"), name="dispatch")
class NotificationCenterView(View):
    """Notification inbox for the current user, newest first."""

    def get(self, request: HttpRequest) -> HttpResponse:
        qs = (
            Notification.objects.filter(recipient=request.user)
            .select_related("production")
            .order_by("-created_at", "-pk")
        )

        # Count must happen on the full queryset BEFORE slicing.
        unread_count = qs.filter(is_read=False).count()

        notifications = qs[: settings.CREWBOOK["NOTIFICATION_CENTER_LIMIT"]]

        return render(request, "notifications/center.html", {
            "notifications": notifications,
            "unread_count": unread_count,
        })


@login_required(login_url="/accounts/login/")
def mark_read(request: HttpRequest) -> HttpResponse:
    """
    Mark one or all notifications as read, then redirect back to center.

    POST body:
      notification_id: int  → mark a single notification
                       'all' → mark every unread notification
    """
    if request.method != "POST":
        return HttpResponse(status=405)

    notification_id = request.POST.get("notification_id", "")

    if notification_id == "all":
        Notification.objects.filter(
            recipient=request.user, is_read=False
        ).update(is_read=True, read_at=timezone.now())
        logger.info("User %d marked all notifications read", request.user.pk)
    elif notification_id.isdigit():
        Notification.objects.filter(
            pk=notification_id, recipient=request.user
        ).update(is_read=True, read_at=timezone.now())

    return redirect("notifications:center")
