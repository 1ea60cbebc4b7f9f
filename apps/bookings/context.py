"""
Template context for the review and summary pages.

This is the display boundary: enum values become labels and badge classes
here, and any field still missing is shown as '—'.
"""
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from apps.doctors.models import DEFAULT_DOCTOR_IMAGE
from apps.patients.models import find_patient_snapshot

from .engine import (
    PLACEHOLDER,
    build_share_text,
    format_readable,
    title_case_specialty,
    to_local_datetime,
)
from .forms import VisitTypeForm
from .payload import AppointmentStatus, PaymentState, VisitType

PATIENT_FIELDS = ('name', 'age', 'gender', 'mobile', 'relation')


def status_label(status) -> str:
    return AppointmentStatus.CONFIRMED.label if status == AppointmentStatus.CONFIRMED else AppointmentStatus.UPCOMING.label


def status_class(status) -> str:
    return 'status-confirmed' if status == AppointmentStatus.CONFIRMED else 'status-upcoming'


def payment_badge(payment) -> dict:
    if payment == PaymentState.PAID:
        return {'label': PaymentState.PAID.label, 'css': 'badge-success'}
    return {'label': PaymentState.NOT_PAID.label, 'css': 'badge-attention'}


def appointment_window(payload: dict) -> tuple:
    """
    (start, end) datetimes for display and export. Missing start means now;
    missing end means start + DEFAULT_SLOT_MINUTES.
    """
    appointment = payload.get('appointment') or {}
    start = to_local_datetime(payload.get('start') or appointment.get('start'))
    if start is None:
        start = timezone.localtime(timezone.now())
    end = to_local_datetime(payload.get('end'))
    if end is None or end <= start:
        end = start + timedelta(minutes=settings.DEFAULT_SLOT_MINUTES)
    return start, end


def _doctor_display(doctor) -> dict:
    doctor = doctor or {}
    return {
        'name': doctor.get('name') or PLACEHOLDER,
        'specialty': title_case_specialty(doctor.get('specialty')) or 'General',
        'qualification': doctor.get('qualification') or 'MBBS, MD',
        'image': doctor.get('image') or DEFAULT_DOCTOR_IMAGE,
        'rating': doctor.get('rating') or PLACEHOLDER,
    }


def _patient_display(payload: dict) -> dict:
    appointment = payload.get('appointment') or {}
    patient = payload.get('patient') or find_patient_snapshot(appointment.get('patient_id')) or {}
    display = {
        field: PLACEHOLDER if patient.get(field) in (None, '') else patient[field]
        for field in PATIENT_FIELDS
    }
    display['weight'] = patient.get('weight') or ''
    display['problem'] = patient.get('problem') or ''
    return display


def get_review_context(draft: dict, form=None) -> dict:
    start = to_local_datetime(draft.get('start'))
    return {
        'doctor': _doctor_display(draft.get('doctor')),
        'token': draft.get('token'),
        'status_label': AppointmentStatus.UPCOMING.label,
        'reporting_time': format_readable(start),
        'visit_mode': 'In-person',
        'duration': f"{settings.DEFAULT_SLOT_MINUTES}m",
        'slot': draft.get('slot') or PLACEHOLDER,
        'intake_open': bool(draft.get('intake_open')),
        'form': form,
        'has_patient': bool(draft.get('patient')),
    }


def get_summary_context(payload: dict) -> dict:
    start, _ = appointment_window(payload)
    doctor = _doctor_display(payload.get('doctor'))
    token = payload.get('token') or PLACEHOLDER
    return {
        'payload': payload,
        'patient': _patient_display(payload),
        'doctor': doctor,
        'token': token,
        'date_time': format_readable(start),
        'status': payload.get('status'),
        'status_label': status_label(payload.get('status')),
        'status_class': status_class(payload.get('status')),
        'payment_badge': payment_badge(payload.get('payment')),
        'is_paid': payload.get('payment') == PaymentState.PAID,
        'visit_type': payload.get('visit_type'),
        'visit_type_form': VisitTypeForm(initial={'visit_type': payload.get('visit_type') or VisitType.FIRST}),
        'share_text': build_share_text((payload.get('doctor') or {}).get('name'), start, token),
    }
