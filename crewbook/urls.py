"""
CrewBook root URL configuration.

URL namespaces follow the pattern: app_name:view_name
  - accounts:      login, logout, register, profile, password reset
  - productions:   dashboard, requests, crew assignment, schedule export
  - notifications: center, mark-read
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path
from django.utils import timezone


def health_check(request):
    """
    Lightweight health check endpoint.

    Returns 200 OK with a JSON body confirming the app and DB are reachable,
    503 if the database connection cannot be established.
    """
    try:
        from django.db import connection
        connection.ensure_connection()
        db_ok = True
    except Exception:
        db_ok = False

    status = 200 if db_ok else 503
    return JsonResponse(
        {
            "status": "ok" if db_ok else "degraded",
            "db": db_ok,
            "timestamp": timezone.now().isoformat(),
        },
        status=status,
    )


urlpatterns = [
    path("health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("accounts/", include("apps.accounts.urls", namespace="accounts")),
    path("", include("apps.productions.urls", namespace="productions")),
    path("notifications/", include("apps.notifications.urls", namespace="notifications")),
]
