"""Forms for CrewBook accounts."""

from django import forms
from django.contrib.auth import password_validation

from apps.accounts.models import User


class RegistrationForm(forms.ModelForm):
    """
    Self-service registration for all three roles.

    Operators must pick a specialization; for other roles it is cleared.
    """

    password1 = forms.CharField(label="Password", widget=forms.PasswordInput)
    password2 = forms.CharField(label="Confirm password", widget=forms.PasswordInput)
    push_token = forms.CharField(required=False, widget=forms.HiddenInput)

    class Meta:
        model = User
        fields = ["email", "first_name", "last_name", "role", "specialization"]

    def clean(self):
        cleaned = super().clean()
        password1 = cleaned.get("password1")
        password2 = cleaned.get("password2")
        if password1 and password2 and password1 != password2:
            self.add_error("password2", "Passwords do not match.")

        role = cleaned.get("role")
        if role == User.Role.OPERATOR and not cleaned.get("specialization"):
            self.add_error("specialization", "Operators must choose a specialization.")
        elif role and role != User.Role.OPERATOR:
            cleaned["specialization"] = ""
        return cleaned

    def _post_clean(self):
        super()._post_clean()
        password = self.cleaned_data.get("password2")
        if password and not self.has_error("password2"):
            try:
                password_validation.validate_password(password, self.instance)
            except forms.ValidationError as error:
                self.add_error("password2", error)

    def save(self, commit: bool = True) -> User:
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password1"])
        if commit:
            user.save()
        return user


class ProfileForm(forms.ModelForm):
    class Meta:
        model = User
        fields = ["first_name", "last_name"]
