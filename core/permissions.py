"""
Role-based permission mixins for CrewBook views.

Every view that handles workflow actions should use one of these mixins.
They build on Django's LoginRequiredMixin and add role checks.

Usage:
    class AssignCrewView(BookingOfficerRequiredMixin, View):
        ...
"""

import logging

from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied
from django.http import HttpRequest

logger = logging.getLogger(__name__)


class RoleRequiredMixin(LoginRequiredMixin):
    """
    Base mixin that enforces a specific user role.

    Subclasses set `required_roles` to the role string(s) to allow.
    """

    required_roles: list[str] = []

    def dispatch(self, request: HttpRequest, *args, **kwargs):
        """
        Check authentication and role before dispatching.

        Raises:
            PermissionDenied: If the user doesn't have the required role.
        """
        if not request.user.is_authenticated:
            return self.handle_no_permission()

        if self.required_roles and request.user.role not in self.required_roles:
            logger.warning(
                "User %d (role=%s) attempted to access %s which requires role in %s.",
                request.user.pk,
                request.user.role,
                request.path,
                self.required_roles,
            )
            raise PermissionDenied("You don't have permission to access this page.")

        return super().dispatch(request, *args, **kwargs)


class ProducerRequiredMixin(RoleRequiredMixin):
    """Restrict access to producers."""

    required_roles = ["producer"]


class BookingOfficerRequiredMixin(RoleRequiredMixin):
    """Restrict access to booking officers."""

    required_roles = ["booking_officer"]


class OperatorRequiredMixin(RoleRequiredMixin):
    """Restrict access to operators."""

    required_roles = ["operator"]


class ParticipantRequiredMixin(RoleRequiredMixin):
    """Any signed-in role: producers, booking officers and operators."""

    required_roles = ["producer", "booking_officer", "operator"]
