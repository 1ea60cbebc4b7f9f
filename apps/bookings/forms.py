from django import forms

from apps.doctors.models import Doctor
from apps.patients.models import Gender, Relation, normalize_mobile

from .engine import build_slot_labels
from .payload import VisitType

SLOT_CHOICES = [(label, label) for label in build_slot_labels()]


class PatientIntakeForm(forms.Form):
    name = forms.CharField(
        max_length=120,
        label='Full name',
        error_messages={'required': 'Enter patient name'},
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': 'Full name',
            'autocomplete': 'name',
        }),
    )
    age = forms.IntegerField(
        required=False,
        min_value=0,
        max_value=130,
        label='Age',
        widget=forms.NumberInput(attrs={'class': 'form-control', 'placeholder': 'Age'}),
    )
    gender = forms.ChoiceField(
        choices=Gender.choices,
        initial=Gender.MALE,
        widget=forms.Select(attrs={'class': 'form-control'}),
    )
    mobile = forms.CharField(
        max_length=20,
        label='Mobile',
        error_messages={'required': 'Enter mobile'},
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': 'Mobile',
            'autocomplete': 'tel',
            'inputmode': 'tel',
        }),
    )
    weight = forms.CharField(
        required=False,
        max_length=20,
        label='Weight (optional)',
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Weight (optional)'}),
    )
    relation = forms.ChoiceField(
        choices=Relation.choices,
        initial=Relation.SELF,
        widget=forms.Select(attrs={'class': 'form-control'}),
    )
    problem = forms.CharField(
        required=False,
        max_length=1000,
        label='Problem / Notes (optional)',
        widget=forms.Textarea(attrs={
            'class': 'form-control',
            'rows': 3,
            'placeholder': 'Problem / Notes (optional)',
        }),
    )

    def clean_mobile(self):
        raw = self.cleaned_data.get('mobile', '')
        try:
            return normalize_mobile(raw)
        except ValueError as exc:
            raise forms.ValidationError(
                "Please enter a valid mobile number (7 to 15 digits, e.g. +91 98765 43210)."
            ) from exc

    def to_snapshot(self) -> dict:
        """Patient snapshot for the booking payload. Call after is_valid()."""
        data = self.cleaned_data
        return {
            'name': data['name'],
            'age': data.get('age'),
            'gender': data['gender'],
            'mobile': data['mobile'],
            'relation': data['relation'],
            'weight': data.get('weight', ''),
            'problem': data.get('problem', ''),
        }


class VisitTypeForm(forms.Form):
    visit_type = forms.ChoiceField(
        choices=VisitType.choices,
        widget=forms.Select(attrs={'class': 'form-control', 'onchange': 'this.form.submit()'}),
    )


class SlotSelectionForm(forms.Form):
    """Landing page: pick a doctor, a day and a slot to start a booking."""
    doctor_id = forms.CharField(max_length=32)
    date = forms.DateField(widget=forms.DateInput(attrs={'type': 'date', 'class': 'form-control'}))
    slot = forms.ChoiceField(choices=SLOT_CHOICES, widget=forms.Select(attrs={'class': 'form-control'}))
    patient_id = forms.CharField(max_length=32, required=False)

    def clean_doctor_id(self):
        doctor_id = self.cleaned_data.get('doctor_id', '')
        if not Doctor.objects.active().filter(code=doctor_id).exists():
            raise forms.ValidationError('Please select a valid doctor.')
        return doctor_id
