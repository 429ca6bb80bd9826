"""
Accounts views for CrewBook.

View inventory:
  LoginView     → email/password login; stores the device push token if sent
  LogoutView    → POST-only logout
  RegisterView  → self-service registration for all three roles
  ProfileView   → view/edit own name
"""

import logging

from django.contrib import messages as msg
from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.utils.decorators import method_decorator
from django.views import View

from apps.accounts.forms import ProfileForm, RegistrationForm
from apps.accounts.tasks import queue_push_token

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Auth views
# ---------------------------------------------------------------------------

class LoginView(View):
    """
    Email/password login view.

    GET  → renders the login page.
    POST → authenticates; re-renders with an error on failure, redirects to
           the dashboard on success. A `push_token` field, sent only by
           physical devices, is stored in the background.
    """

    def get(self, request: HttpRequest) -> HttpResponse:
        """Render the login page. Redirect authenticated users to dashboard."""
        if request.user.is_authenticated:
            return redirect("productions:dashboard")
        return render(request, "accounts/login.html")

    def post(self, request: HttpRequest) -> HttpResponse:
        email = request.POST.get("email", "").strip()
        password = request.POST.get("password", "")

        if not email or not password:
            msg.error(request, "Please enter your email and password.")
            return render(request, "accounts/login.html", {"email": email}, status=400)

        user = authenticate(request, username=email, password=password)
        if user is None:
            return render(
                request,
                "accounts/login.html",
                {"email": email, "login_error": "Invalid email or password. Please try again."},
                status=200,
            )

        login(request, user)
        queue_push_token(user.pk, request.POST.get("push_token", "").strip())
        logger.info("User %d logged in", user.pk)
        return redirect("productions:dashboard")


class LogoutView(View):
    """POST-only logout to prevent CSRF-based logout via GET links."""

    def post(self, request: HttpRequest) -> HttpResponse:
        """Log the user out and redirect to login."""
        logout(request)
        return redirect("accounts:login")


class RegisterView(View):
    """Create an account, log it in and register its push token."""

    def get(self, request: HttpRequest) -> HttpResponse:
        if request.user.is_authenticated:
            return redirect("productions:dashboard")
        return render(request, "accounts/register.html", {"form": RegistrationForm()})

    def post(self, request: HttpRequest) -> HttpResponse:
        form = RegistrationForm(request.POST)
        if not form.is_valid():
            return render(request, "accounts/register.html", {"form": form}, status=400)

        user = form.save()
        login(request, user, backend="django.contrib.auth.backends.ModelBackend")
        queue_push_token(user.pk, form.cleaned_data.get("push_token", ""))
        logger.info("Registered user %d as %s", user.pk, user.role)
        msg.success(request, "Welcome to CrewBook.")
        return redirect("productions:dashboard")


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@method_decorator(login_required(login_url="/accounts/login/"), name="dispatch")
class ProfileView(View):
    """
    View and update the logged-in user's profile.

    GET  → renders profile form pre-filled with current data.
    POST → saves valid changes; re-renders form with errors on failure.
    """

    def get(self, request: HttpRequest) -> HttpResponse:
        return render(request, "accounts/profile.html", {"form": ProfileForm(instance=request.user)})

    def post(self, request: HttpRequest) -> HttpResponse:
        form = ProfileForm(request.POST, instance=request.user)
        if not form.is_valid():
            return render(request, "accounts/profile.html", {"form": form}, status=400)
        form.save()
        msg.success(request, "Profile updated successfully.")
        return redirect("accounts:profile")
