"""
Accounts models for CrewBook.

Defines the custom User model and the fixed set of crew specializations.
The User model uses email as the unique identifier (no username).

Key design decisions:
  - AbstractBaseUser gives us full control over the user model
  - Role is a simple enum field; permissions derived from role in views/mixins
  - Specialization is only meaningful for operators; it doubles as the crew
    role vocabulary used by production requirements and assignments
  - The operator directory is a queryset method, so callers never filter on
    raw role strings
"""

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Specialization(models.TextChoices):
    """Crew roles an operator can specialize in and a production can require."""

    CAMERA = "camera", _("Camera Operator")
    SOUND = "sound", _("Sound Operator")
    LIGHTING = "lighting", _("Lighting Operator")
    EVS = "evs", _("EVS Operator")
    DIRECTOR = "director", _("Director")
    STREAM = "stream", _("Stream Operator")
    TECHNICIAN = "technician", _("Technician")
    ELECTRICIAN = "electrician", _("Electrician")
    TRANSPORT = "transport", _("Transport")


class UserQuerySet(models.QuerySet):
    """Directory lookups over users."""

    def operators(self) -> "UserQuerySet":
        """Return active users with the operator role, in directory order."""
        return self.filter(role=User.Role.OPERATOR, is_active=True)

    def with_specialization(self, specialization: str) -> "UserQuerySet":
        """Return operators whose specialization equals the given crew role."""
        return self.operators().filter(specialization=specialization)

    def booking_officers(self) -> "UserQuerySet":
        """Return active booking officers."""
        return self.filter(role=User.Role.BOOKING_OFFICER, is_active=True)


class UserManager(BaseUserManager.from_queryset(UserQuerySet)):
    """Custom manager for the CrewBook User model (email-based auth)."""

    def create_user(self, email: str, password: str, **extra_fields) -> "User":
        """
        Create and save a regular user with the given email and password.

        Args:
            email: The user's email address (used as login identifier).
            password: The raw password (will be hashed).
            **extra_fields: Additional fields to set on the User model.

        Returns:
            The newly created User instance.

        Raises:
            ValueError: If email is not provided.
        """
        if not email:
            raise ValueError(_("The Email field must be set"))
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email: str, password: str, **extra_fields) -> "User":
        """
        Create and save a superuser with the given email and password.

        Superusers act as booking officers inside the workflow.
        """
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.Role.BOOKING_OFFICER)
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom user model for CrewBook.

    Uses email as the unique identifier. Role determines what the user
    can see and do throughout the platform:
      - PRODUCER: requests productions and follows their status
      - BOOKING_OFFICER: approves, staffs and runs productions
      - OPERATOR: accepts or declines crew assignments
    """

    class Role(models.TextChoices):
        PRODUCER = "producer", _("Producer")
        BOOKING_OFFICER = "booking_officer", _("Booking Officer")
        OPERATOR = "operator", _("Operator")

    # Core identity
    email = models.EmailField(_("email address"), unique=True)
    first_name = models.CharField(_("first name"), max_length=150)
    last_name = models.CharField(_("last name"), max_length=150)

    # Role & status
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.OPERATOR)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)  # Django admin access

    # Operator-specific
    specialization = models.CharField(
        max_length=20,
        choices=Specialization.choices,
        blank=True,
        help_text="Crew role for operators. Ignored for other roles.",
    )

    # Device token for push delivery (written fire-and-forget on login)
    push_token = models.CharField(max_length=255, blank=True)

    date_joined = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["first_name", "last_name"]

    class Meta:
        verbose_name = _("user")
        verbose_name_plural = _("users")
        ordering = ["last_name", "first_name"]
        indexes = [
            models.Index(fields=["role", "specialization"], name="user_role_spec_idx"),
        ]

    def __str__(self) -> str:
        """Return the user's full name and role for display."""
        return f"{self.get_full_name()} ({self.get_role_display()})"

    def get_full_name(self) -> str:
        """Return the first_name plus the last_name, with a space in between."""
        return f"{self.first_name} {self.last_name}".strip()

    def get_short_name(self) -> str:
        """Return the first name for the user."""
        return self.first_name

    @property
    def is_producer(self) -> bool:
        return self.role == self.Role.PRODUCER

    @property
    def is_booking_officer(self) -> bool:
        return self.role == self.Role.BOOKING_OFFICER

    @property
    def is_operator(self) -> bool:
        return self.role == self.Role.OPERATOR
