# billing/forms.py
from django import forms

from .flow import CANCELLATION_REASONS
from .models import Variant


# --- Wizard ---

class ReasonForm(forms.Form):
    reason = forms.ChoiceField(
        choices=[(r, r) for r in CANCELLATION_REASONS],
        widget=forms.RadioSelect,
        label="What's your main reason for canceling?",
    )


# --- JSON API payloads ---
# Field names follow the camelCase keys of the request body.

class VariantRequestForm(forms.Form):
    userId = forms.UUIDField()


class DownsellRequestForm(VariantRequestForm):
    subscriptionId = forms.CharField(max_length=64)
    variant = forms.ChoiceField(choices=Variant.choices)
    reason = forms.CharField(max_length=255)


class CancellationRequestForm(DownsellRequestForm):
    acceptedDownsell = forms.BooleanField(required=False)
