"""
Display metadata for CrewBook enums.

One lookup table per enum maps a stored value to its label, colour and icon,
so templates and exports never switch on raw status strings.
"""

from typing import NamedTuple

from apps.accounts.models import Specialization
from apps.notifications.models import Notification
from apps.productions.models import Assignment, Production


class DisplayInfo(NamedTuple):
    label: str
    color: str
    icon: str


UNKNOWN = DisplayInfo(label="", color="#9E9E9E", icon="help-circle-outline")

PRODUCTION_STATUS_DISPLAY = {
    Production.Status.REQUESTED.value: DisplayInfo("Pending", "#FFC107", "time-outline"),
    Production.Status.CONFIRMED.value: DisplayInfo("Confirmed", "#4CAF50", "checkmark-circle-outline"),
    Production.Status.IN_PROGRESS.value: DisplayInfo("In Progress", "#2196F3", "play-circle-outline"),
    Production.Status.COMPLETED.value: DisplayInfo("Completed", "#9E9E9E", "flag-outline"),
    Production.Status.CANCELLED.value: DisplayInfo("Cancelled", "#F44336", "close-circle-outline"),
}

ASSIGNMENT_STATUS_DISPLAY = {
    Assignment.Status.PENDING.value: DisplayInfo("Pending", "#FFC107", "hourglass-outline"),
    Assignment.Status.ACCEPTED.value: DisplayInfo("Accepted", "#4CAF50", "checkmark-outline"),
    Assignment.Status.DECLINED.value: DisplayInfo("Declined", "#F44336", "close-outline"),
}

ROLE_DISPLAY = {
    Specialization.CAMERA.value: DisplayInfo("Camera Operator", "#607D8B", "camera-outline"),
    Specialization.SOUND.value: DisplayInfo("Sound Operator", "#607D8B", "mic-outline"),
    Specialization.LIGHTING.value: DisplayInfo("Lighting Operator", "#607D8B", "flashlight-outline"),
    Specialization.EVS.value: DisplayInfo("EVS Operator", "#607D8B", "tv-outline"),
    Specialization.DIRECTOR.value: DisplayInfo("Director", "#607D8B", "film-outline"),
    Specialization.STREAM.value: DisplayInfo("Stream Operator", "#607D8B", "wifi-outline"),
    Specialization.TECHNICIAN.value: DisplayInfo("Technician", "#607D8B", "construct-outline"),
    Specialization.ELECTRICIAN.value: DisplayInfo("Electrician", "#607D8B", "flash-outline"),
    Specialization.TRANSPORT.value: DisplayInfo("Transport", "#607D8B", "car-outline"),
}

NOTIFICATION_DISPLAY = {
    Notification.Type.ASSIGNMENT.value: DisplayInfo("Assignment", "#2196F3", "calendar-check-outline"),
    Notification.Type.REMINDER.value: DisplayInfo("Reminder", "#FF9800", "alarm-outline"),
    Notification.Type.CONFIRMATION.value: DisplayInfo("Confirmed", "#4CAF50", "checkmark-circle-outline"),
    Notification.Type.CANCELLATION.value: DisplayInfo("Cancelled", "#F44336", "close-circle-outline"),
    Notification.Type.MESSAGE.value: DisplayInfo("Message", "#3F51B5", "mail-outline"),
    Notification.Type.OVERTIME.value: DisplayInfo("Overtime", "#FF5722", "time-outline"),
    Notification.Type.CHANGE.value: DisplayInfo("Update", "#009688", "refresh-outline"),
}

TABLES = {
    "production": PRODUCTION_STATUS_DISPLAY,
    "assignment": ASSIGNMENT_STATUS_DISPLAY,
    "role": ROLE_DISPLAY,
    "notification": NOTIFICATION_DISPLAY,
}


def lookup(kind: str, value: str) -> DisplayInfo:
    """
    Return display metadata for a stored enum value.

    Unknown values fall back to a grey badge labelled with the raw value.

    Args:
        kind: One of "production", "assignment", "role", "notification".
        value: The stored value (e.g. "in_progress").
    """
    info = TABLES[kind].get(str(value))
    if info is None:
        return UNKNOWN._replace(label=str(value))
    return info


def role_label(role: str) -> str:
    return lookup("role", role).label
