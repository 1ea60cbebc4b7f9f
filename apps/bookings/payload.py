"""
Booking payload — the record carried from the review page to the summary page.

Payload structure (JSON-serialisable; persisted as text by store.py):
{
    "appointment": {
        "doctor_id":  "d1",
        "start":      "<iso datetime>",
        "end":        "<iso datetime> | null",
        "slot":       "09:00 - 09:30",
        "patient_id": "p1",                 # optional
    },
    "doctor":     {"id", "name", "specialty", "qualification", "image", "rating"},
    "patient":    {"name", "age", "gender", "mobile", "relation", "weight", "problem"} | null,
    "token":      "#TKN-4821",
    "payment":    "not paid" | "paid",
    "status":     "upcoming" | "confirmed",
    "visit_type": "First" | "Report" | "Follow-up",
    "slot":       "09:00 - 09:30",
    "start":      "<iso datetime>",
    "end":        "<iso datetime>",
}

Enum fields hold the canonical value only. Labels are produced at the
display boundary (context.py).
"""
from django.db import models

from apps.bookings.engine import generate_token, resolve_slot
from apps.doctors.models import find_doctor_snapshot
from apps.patients.models import find_patient_snapshot


class PaymentState(models.TextChoices):
    NOT_PAID = 'not paid', 'Not paid'
    PAID     = 'paid',     'Paid'


class AppointmentStatus(models.TextChoices):
    UPCOMING  = 'upcoming',  'Upcoming'
    CONFIRMED = 'confirmed', 'Confirmed'


class VisitType(models.TextChoices):
    FIRST     = 'First',     'First'
    REPORT    = 'Report',    'Report'
    FOLLOW_UP = 'Follow-up', 'Follow-up'


# field → (choices, default)
ENUM_FIELDS = {
    'payment':    (PaymentState, PaymentState.NOT_PAID),
    'status':     (AppointmentStatus, AppointmentStatus.UPCOMING),
    'visit_type': (VisitType, VisitType.FIRST),
}


def coerce_choice(choices, value, default=None):
    """
    Canonical value of `choices` matching `value` case-insensitively,
    e.g. 'Confirmed' → 'confirmed'. Returns `default` when nothing matches.
    """
    if isinstance(value, str):
        folded = value.strip().lower()
        for canonical in choices.values:
            if canonical.lower() == folded:
                return canonical
    return default.value if isinstance(default, models.Choices) else default


def is_payload(data) -> bool:
    """
    True when `data` can stand for a booking. An empty dict, or a dict with
    neither an appointment nor a doctor, is "no booking" rather than a
    booking with empty fields.
    """
    return isinstance(data, dict) and bool(data.get('appointment') or data.get('doctor'))


def normalize_payload(payload: dict) -> dict:
    """
    Return a copy of `payload` with every field display logic reads filled in.

    - payment / status / visit_type: defaulted and folded to canonical case
    - token: minted once if the payload has none
    - slot / start / end: derived from the appointment when missing

    Idempotent: a normalized payload comes back equal to itself.
    """
    normalized = dict(payload)

    for field, (choices, default) in ENUM_FIELDS.items():
        normalized[field] = coerce_choice(choices, payload.get(field), default)

    if not normalized.get('token'):
        normalized['token'] = generate_token()

    normalized.setdefault('patient', None)

    appointment = payload.get('appointment') or {}
    if not normalized.get('slot') and appointment.get('slot'):
        normalized['slot'] = appointment['slot']

    if not normalized.get('start') and appointment.get('start'):
        if normalized.get('slot'):
            start, end = resolve_slot(appointment['start'], normalized['slot'])
            normalized['start'] = start.isoformat()
            resolved_end = end.isoformat()
        else:
            normalized['start'] = appointment['start']
            resolved_end = appointment.get('end') or appointment['start']
        if not normalized.get('end'):
            normalized['end'] = resolved_end

    return normalized


def reconstruct_from_fallback(appointment: dict) -> dict:
    """
    Best-effort payload rebuilt from the last committed appointment.
    Doctor falls back to the first doctor when the id is unknown; patient
    stays None unless the appointment names a known patient.
    """
    start = appointment.get('start')
    return {
        'appointment': dict(appointment),
        'doctor': find_doctor_snapshot(appointment.get('doctor_id')),
        'patient': find_patient_snapshot(appointment.get('patient_id')),
        'token': generate_token(),
        'payment': PaymentState.NOT_PAID.value,
        'status': AppointmentStatus.UPCOMING.value,
        'visit_type': VisitType.FIRST.value,
        'slot': appointment.get('slot'),
        'start': start,
        'end': appointment.get('end') or start,
    }
