from django import forms
from django.core.validators import RegexValidator

from .store import ALLOWED_TYPES, MARKDOWN_TYPES, SLUG_RE

POPUP_ACTION_TYPES = ("redirect", "show-text", "run-code")

slug_validator = RegexValidator(
    SLUG_RE,
    "Use letters, numbers, dots, hyphens or underscores.",
)


def form_error_message(form):
    parts = []
    for field, errors in form.errors.items():
        for error in errors:
            parts.append(error if field == "__all__" else f"{field}: {error}")
    return "; ".join(parts)


def popup_errors(data):
    """Problems with a popup document, as a list of messages."""
    if not isinstance(data, dict):
        return ["Popup data must be an object."]
    errors = []
    if not str(data.get("title") or "").strip():
        errors.append("title: Title cannot be empty.")
    buttons = data.get("buttons", [])
    if not isinstance(buttons, list):
        return errors + ["buttons: Buttons must be a list."]
    for index, button in enumerate(buttons):
        if not isinstance(button, dict) or not str(button.get("text") or "").strip():
            errors.append(f"buttons.{index}.text: Button text cannot be empty.")
            continue
        if button.get("actionType") not in POPUP_ACTION_TYPES:
            errors.append(f"buttons.{index}.actionType: Must be one of {', '.join(POPUP_ACTION_TYPES)}.")
    return errors


class ContentPostForm(forms.Form):
    type = forms.ChoiceField(choices=[(t, t) for t in ALLOWED_TYPES])
    slug = forms.CharField(
        validators=[slug_validator],
        error_messages={"required": "Slug cannot be empty."},
    )
    originalSlug = forms.CharField(required=False, validators=[slug_validator])
    data = forms.JSONField(required=False)
    content = forms.CharField(required=False, strip=False)

    def clean(self):
        cleaned_data = super().clean()
        content_type = cleaned_data.get("type")
        data = cleaned_data.get("data")

        if content_type in MARKDOWN_TYPES:
            if data is None:
                cleaned_data["data"] = data = {}
            if not isinstance(data, dict):
                self.add_error("data", "Front matter must be an object.")
            elif not str(data.get("title") or "").strip():
                self.add_error("data", "title: Title cannot be empty.")
        elif content_type == "popups":
            for error in popup_errors(data):
                self.add_error("data", error)
        elif data is None:
            # empty JSON values arrive as None
            cleaned_data["data"] = [] if content_type == "testimonials" else {}
        return cleaned_data


class SettingsPostForm(forms.Form):
    file = forms.CharField()
    data = forms.JSONField(required=False)
    robotsTxt = forms.CharField(required=False, strip=False)

    def clean_file(self):
        name = self.cleaned_data["file"]
        if not name.endswith(".json"):
            raise forms.ValidationError("Only JSON settings files can be edited.")
        return name

    def clean_data(self):
        # JSONField maps {} and [] to None
        value = self.data.get("data")
        if value is None:
            raise forms.ValidationError("This field is required.")
        return value if value in ([], {}) else self.cleaned_data["data"]


class ImageUploadForm(forms.Form):
    file = forms.ImageField()
