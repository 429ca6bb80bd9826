"""Local development settings for CrewBook."""

from .base import *  # noqa: F401, F403

DEBUG = True
ALLOWED_HOSTS = ["*"]

# Use console email backend so notifications are visible in logs without SMTP
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

# No Redis needed for a single local process
CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}
