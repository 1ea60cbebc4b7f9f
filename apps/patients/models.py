"""
Patient model — saved patient profiles a fallback appointment may point at.

Mobile normalisation accepts the common ways people type a number:
  +91 98765 43210  →  +919876543210
  (020) 7946-0958  →  02079460958
  98765-43210      →  9876543210
"""
import re
from django.db import models
from apps.core.models import ReferenceModel

MIN_MOBILE_DIGITS = 7
MAX_MOBILE_DIGITS = 15


def normalize_mobile(raw: str) -> str:
    """
    Normalise a mobile number to digits with an optional leading '+'.

    Steps:
      1. Remember whether the trimmed input starts with '+'
      2. Strip all non-digit characters (spaces, dashes, dots, parentheses)
      3. Validate the digit count is within E.164 bounds

    Raises ValueError if the result has too few or too many digits.
    """
    raw = (raw or '').strip()
    digits = re.sub(r'\D', '', raw)

    if not MIN_MOBILE_DIGITS <= len(digits) <= MAX_MOBILE_DIGITS:
        raise ValueError(
            f"Cannot normalise mobile number '{raw}' — expected "
            f"{MIN_MOBILE_DIGITS}-{MAX_MOBILE_DIGITS} digits, got {len(digits)}."
        )
    return f"+{digits}" if raw.startswith('+') else digits


class Gender(models.TextChoices):
    MALE   = 'Male',   'Male'
    FEMALE = 'Female', 'Female'
    OTHER  = 'Other',  'Other'


class Relation(models.TextChoices):
    SELF     = 'Self',     'Self'
    SON      = 'Son',      'Son'
    DAUGHTER = 'Daughter', 'Daughter'
    MOTHER   = 'Mother',   'Mother'
    FATHER   = 'Father',   'Father'
    OTHER    = 'Other',    'Other'


class Patient(ReferenceModel):
    name = models.CharField(max_length=120)
    age = models.PositiveSmallIntegerField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=Gender.choices, default=Gender.MALE)
    mobile = models.CharField(max_length=20, db_index=True)
    relation = models.CharField(max_length=10, choices=Relation.choices, default=Relation.SELF)
    weight = models.CharField(max_length=20, blank=True)
    problem = models.TextField(blank=True)

    class Meta(ReferenceModel.Meta):
        verbose_name = 'Patient'
        verbose_name_plural = 'Patients'

    def __str__(self):
        return f"{self.name} ({self.mobile})"

    def save(self, *args, **kwargs):
        self.mobile = normalize_mobile(self.mobile)
        super().save(*args, **kwargs)

    def snapshot(self) -> dict:
        return {
            'id': self.code,
            'name': self.name,
            'age': self.age,
            'gender': self.gender,
            'mobile': self.mobile,
            'relation': self.relation,
            'weight': self.weight,
            'problem': self.problem,
        }


def find_patient_snapshot(patient_id):
    """Snapshot of the patient with public id `patient_id`, or None."""
    if not patient_id:
        return None
    patient = Patient.objects.active().filter(code=patient_id).first()
    return patient.snapshot() if patient else None
