"""Forms for CrewBook productions."""

import datetime as dt

from django import forms
from django.utils import timezone

from apps.accounts.models import Specialization, User
from apps.productions.matching import over_capacity_roles
from apps.productions.reconciler import PendingCreate, PendingDelete, Persisted

REQUIREMENT_PREFIX = "req_"
MAX_CREW_PER_ROLE = 20


class ProductionRequestForm(forms.Form):
    """
    A producer's request for a new production.

    Times are entered as wall-clock times on the production date and stored
    as aware datetimes in the current timezone. One count field is rendered
    per crew role; zero means "not needed".
    """

    name = forms.CharField(max_length=200)
    date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}))
    call_time = forms.TimeField(widget=forms.TimeInput(attrs={"type": "time"}))
    start_time = forms.TimeField(widget=forms.TimeInput(attrs={"type": "time"}))
    end_time = forms.TimeField(widget=forms.TimeInput(attrs={"type": "time"}))
    venue = forms.CharField(max_length=200)
    location_details = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 2}))
    notes = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for value, label in Specialization.choices:
            self.fields[f"{REQUIREMENT_PREFIX}{value}"] = forms.IntegerField(
                label=label,
                min_value=0,
                max_value=MAX_CREW_PER_ROLE,
                initial=0,
                required=False,
            )

    def requirement_fields(self):
        return [self[f"{REQUIREMENT_PREFIX}{value}"] for value in Specialization.values]

    def clean_name(self):
        return self.cleaned_data["name"].strip()

    def clean_venue(self):
        return self.cleaned_data["venue"].strip()

    def clean(self):
        cleaned = super().clean()
        call, start, end = cleaned.get("call_time"), cleaned.get("start_time"), cleaned.get("end_time")
        if start and end and end <= start:
            self.add_error("end_time", "End time must be after start time.")
        if call and start and start < call:
            self.add_error("start_time", "Start time cannot be before call time.")
        if not self.requirements():
            raise forms.ValidationError("Please specify at least one crew requirement.")
        return cleaned

    def requirements(self) -> dict[str, int]:
        """role → count for every role with a positive count."""
        counts = {}
        for value in Specialization.values:
            count = self.cleaned_data.get(f"{REQUIREMENT_PREFIX}{value}") or 0
            if count > 0:
                counts[value] = count
        return counts

    def production_data(self) -> dict:
        """Model field values for Production.objects.create."""
        day = self.cleaned_data["date"]
        tz = timezone.get_current_timezone()

        def at(t: dt.time) -> dt.datetime:
            return timezone.make_aware(dt.datetime.combine(day, t), tz)

        return {
            "name": self.cleaned_data["name"],
            "date": day,
            "call_time": at(self.cleaned_data["call_time"]),
            "start_time": at(self.cleaned_data["start_time"]),
            "end_time": at(self.cleaned_data["end_time"]),
            "venue": self.cleaned_data["venue"],
            "location_details": self.cleaned_data.get("location_details", "").strip(),
            "notes": self.cleaned_data.get("notes", "").strip(),
        }


class NotesForm(forms.Form):
    notes = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}))


class MessageForm(forms.Form):
    """A free-text message or an overtime report about a production."""

    class Kind:
        MESSAGE = "message"
        OVERTIME = "overtime"

    KIND_CHOICES = [(Kind.MESSAGE, "Message"), (Kind.OVERTIME, "Overtime report")]

    OVERTIME_REASONS = [
        ("technical-issues", "Technical Issues"),
        ("script-changes", "Script Changes"),
        ("talent-delays", "Talent Delays"),
        ("equipment-failure", "Equipment Failure"),
        ("weather-conditions", "Weather Conditions"),
        ("other", "Other"),
    ]

    kind = forms.ChoiceField(choices=KIND_CHOICES, initial=Kind.MESSAGE, widget=forms.RadioSelect)
    overtime_reason = forms.ChoiceField(choices=OVERTIME_REASONS, required=False)
    text = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 4}))

    def clean(self):
        cleaned = super().clean()
        text = (cleaned.get("text") or "").strip()
        cleaned["text"] = text
        if cleaned.get("kind") == self.Kind.MESSAGE and not text:
            self.add_error("text", "Please enter a message.")
        return cleaned

    def overtime_text(self) -> str:
        """The typed explanation if any, else the label of the chosen reason."""
        if self.cleaned_data["text"]:
            return self.cleaned_data["text"]
        return dict(self.OVERTIME_REASONS).get(self.cleaned_data.get("overtime_reason"), "Other")


class CrewSelectionForm(forms.Form):
    """
    Parses the crew screen into a tagged desired set.

    The page posts every stored assignment as an `existing` value
    ("<assignment_id>:<user_id>:<role>") and every ticked operator as a
    `crew` value ("<user_id>:<role>"). Stored assignments that are still
    ticked stay Persisted, unticked ones become PendingDelete, and ticked
    operators without a stored assignment become PendingCreate.
    """

    existing = forms.Field(required=False, widget=forms.MultipleHiddenInput)
    crew = forms.Field(required=False, widget=forms.MultipleHiddenInput)

    def __init__(self, *args, requirements: dict[str, int], **kwargs):
        super().__init__(*args, **kwargs)
        self.requirements = requirements

    def _parse(self, values, parts: int) -> list[tuple]:
        if isinstance(values, str):
            values = [values]
        parsed = []
        for raw in values:
            bits = raw.split(":")
            if len(bits) != parts or not all(b.isdigit() for b in bits[:-1]):
                raise forms.ValidationError("Invalid crew selection.")
            if bits[-1] not in self.requirements:
                raise forms.ValidationError(f"This production does not need a {bits[-1]} role.")
            parsed.append(tuple(int(b) for b in bits[:-1]) + (bits[-1],))
        return parsed

    def clean_existing(self):
        return self._parse(self.cleaned_data["existing"] or [], 3)

    def clean_crew(self):
        return self._parse(self.cleaned_data["crew"] or [], 2)

    def clean(self):
        cleaned = super().clean()
        if self.errors:
            return cleaned
        cleaned["desired"] = desired = self.desired_entries(cleaned["existing"], cleaned["crew"])
        surplus = over_capacity_roles(desired, self.requirements)
        if surplus:
            role, extra = next(iter(surplus.items()))
            required = self.requirements.get(role, 0)
            label = Specialization(role).label
            raise forms.ValidationError(
                f"Maximum {required} {label}{'s' if required != 1 else ''} allowed "
                f"({extra} too many selected)."
            )
        self._check_new_crew(desired)
        return cleaned

    def _check_new_crew(self, desired) -> None:
        """Every operator being added must be an active operator of that specialization."""
        wanted = {}
        for entry in desired:
            if isinstance(entry, PendingCreate):
                wanted.setdefault(entry.role, set()).add(entry.user_id)
        for role, user_ids in wanted.items():
            found = set(
                User.objects.with_specialization(role).filter(pk__in=user_ids).values_list("pk", flat=True)
            )
            if user_ids - found:
                raise forms.ValidationError(
                    f"Operator not available for the {Specialization(role).label} role."
                )

    @staticmethod
    def desired_entries(existing, crew) -> list:
        ticked = set(crew)
        desired = []
        stored_keys = set()
        for assignment_id, user_id, role in existing:
            stored_keys.add((user_id, role))
            if (user_id, role) in ticked:
                desired.append(Persisted(assignment_id, user_id, role))
            else:
                desired.append(PendingDelete(assignment_id, user_id, role))
        for user_id, role in crew:
            if (user_id, role) not in stored_keys:
                desired.append(PendingCreate(user_id, role))
        return desired


class ScheduleRangeForm(forms.Form):
    start_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}))
    end_date = forms.DateField(widget=forms.DateInput(attrs={"type": "date"}))

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("start_date"), cleaned.get("end_date")
        if start and end and start > end:
            raise forms.ValidationError("Invalid date range. Please check the dates.")
        return cleaned
