"""WebSocket URL routing for CrewBook Channels consumers."""

from django.urls import re_path

from core.consumers import UserConsumer

websocket_urlpatterns = [
    # Personal notification stream for each user
    re_path(r"ws/user/$", UserConsumer.as_asgi()),
]
