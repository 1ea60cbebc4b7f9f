"""
Booking flow views — review → summary, backed by the Django session.

The booking payload is owned by BookingStore (store.py); pages hand it to
each other through navigation.py. Every mutation is persisted before the
response is returned and answered with a redirect (POST/redirect/GET), so a
reload always resumes from the last write.
"""
import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from apps.doctors.models import find_doctor_snapshot

from .context import appointment_window, get_review_context, get_summary_context
from .engine import generate_token, resolve_slot, to_local_datetime
from .exceptions import CalendarExportError, InvalidVisitTypeError
from .forms import PatientIntakeForm, SlotSelectionForm, VisitTypeForm
from .ics import ics_response
from .navigation import navigate, take_navigation_state
from .payload import is_payload
from .store import BookingStore

logger = logging.getLogger(__name__)

REVIEW_DRAFT_KEY = 'review_draft'
CARRIED_FIELDS = ('payment', 'status', 'visit_type')

# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _build_review_draft(appointment, doctor=None, token=None, patient=None) -> dict:
    """
    Review state for one booking lifecycle. The token is minted here once and
    reused by every later render, export and save of the same draft.
    """
    appointment = dict(appointment or {})
    doctor = doctor or find_doctor_snapshot(appointment.get('doctor_id'))
    if doctor and not appointment.get('doctor_id'):
        appointment['doctor_id'] = doctor['id']

    selected_date = appointment.get('start') or timezone.now().isoformat()
    slot = appointment.get('slot') or settings.DEFAULT_SLOT_LABEL
    start, end = resolve_slot(selected_date, slot)

    return {
        'appointment': appointment,
        'doctor': doctor,
        'token': token or generate_token(),
        'patient': patient,
        'slot': slot,
        'start': start.isoformat(),
        'end': end.isoformat(),
        'intake_open': False,
    }


def _save_review_draft(request, draft: dict) -> None:
    request.session[REVIEW_DRAFT_KEY] = draft
    request.session.modified = True


def _current_review_draft(request, store: BookingStore) -> dict:
    """Existing draft, or one built from the last appointment (or defaults)."""
    draft = request.session.get(REVIEW_DRAFT_KEY)
    if isinstance(draft, dict) and draft.get('token'):
        return draft

    draft = _build_review_draft(store.load_last_appointment())
    _save_review_draft(request, draft)
    return draft


def _get_review_draft(request, store: BookingStore) -> dict:
    """Navigation data starts a new draft; otherwise the current one is kept."""
    state = take_navigation_state(request, 'bookings:review')
    if is_payload(state):
        draft = _build_review_draft(
            state.get('appointment'),
            doctor=state.get('doctor'),
            token=state.get('token'),
            patient=state.get('patient'),
        )
        _save_review_draft(request, draft)
        return draft
    return _current_review_draft(request, store)


def _carried_over(store: BookingStore, token) -> dict:
    """Payment/status/visit type of the stored booking with the same token."""
    current = store.load_current()
    if not current or current.get('token') != token:
        return {}
    return {field: current[field] for field in CARRIED_FIELDS if field in current}


def _payload_from_draft(draft: dict, store: BookingStore, patient=None) -> dict:
    payload = {
        'appointment': draft['appointment'],
        'doctor': draft['doctor'],
        'token': draft['token'],
        'patient': patient if patient is not None else draft.get('patient'),
        'slot': draft['slot'],
        'start': draft['start'],
        'end': draft['end'],
    }
    payload.update(_carried_over(store, draft['token']))
    return payload


def _resolve_booking(request, store: BookingStore):
    return store.resolve(take_navigation_state(request, 'bookings:summary'))


def _no_booking_response(request):
    """'No booking found' page that sends the browser to the landing page once."""
    landing_url = reverse('pages:home')
    delay = settings.NO_BOOKING_REDIRECT_SECONDS
    response = render(request, 'bookings/no_booking.html', {
        'landing_url': landing_url,
        'redirect_seconds': delay,
    })
    response['Refresh'] = f'{delay}; url={landing_url}'
    logger.info('No booking in session; redirecting to %s in %ss', landing_url, delay)
    return response


# ─────────────────────────────────────────────────────────────────────────────
# Slot Selection (landing page form)
# ─────────────────────────────────────────────────────────────────────────────

@require_POST
def select_slot(request):
    form = SlotSelectionForm(request.POST)
    if not form.is_valid():
        messages.error(request, 'Please choose a doctor, a date and a time slot.')
        return redirect('pages:home')

    data = form.cleaned_data
    today = timezone.localtime(timezone.now()).date()
    if data['date'] < today:
        messages.error(request, 'Please choose a valid future date.')
        return redirect('pages:home')

    start, end = resolve_slot(data['date'], data['slot'])
    appointment = {
        'doctor_id': data['doctor_id'],
        'start': start.isoformat(),
        'end': end.isoformat(),
        'slot': data['slot'],
    }
    if data.get('patient_id'):
        appointment['patient_id'] = data['patient_id']

    store = BookingStore(request.session)
    store.commit_last_appointment(appointment)

    return navigate(request, 'bookings:review', {
        'appointment': appointment,
        'doctor': find_doctor_snapshot(data['doctor_id']),
    })


# ─────────────────────────────────────────────────────────────────────────────
# Review (intake dialog open or closed)
# ─────────────────────────────────────────────────────────────────────────────

def review(request):
    store = BookingStore(request.session)
    draft = _get_review_draft(request, store)
    form = None

    if request.method == 'POST':
        action = request.POST.get('action')

        if action == 'open_intake':
            draft['intake_open'] = True
            _save_review_draft(request, draft)
            return redirect('bookings:review')

        if action == 'cancel_intake':
            draft['intake_open'] = False
            _save_review_draft(request, draft)
            return redirect('bookings:review')

        if action == 'continue':
            return navigate(request, 'bookings:summary', _payload_from_draft(draft, store))

        if action == 'save_patient':
            form = PatientIntakeForm(request.POST)
            if form.is_valid():
                # Last write wins: the whole patient snapshot is replaced.
                payload = store.save(_payload_from_draft(draft, store, patient=form.to_snapshot()))
                draft['patient'] = payload['patient']
                draft['intake_open'] = False
                _save_review_draft(request, draft)
                logger.info('Patient details saved for booking %s', payload['token'])
                return navigate(request, 'bookings:summary', payload)

            # Invalid: stay in the intake dialog with inline errors
            draft['intake_open'] = True
            _save_review_draft(request, draft)
        else:
            messages.error(request, 'Unknown action.')
            return redirect('bookings:review')

    if form is None and draft.get('intake_open'):
        form = PatientIntakeForm(initial=draft.get('patient') or None)

    return render(request, 'bookings/review.html', get_review_context(draft, form))


@require_GET
def review_calendar(request):
    store = BookingStore(request.session)
    draft = _current_review_draft(request, store)
    doctor = draft.get('doctor') or {}
    name = doctor.get('name') or 'Doctor'

    try:
        return ics_response(
            title=f"{name} - Appointment",
            description=(
                f"Appointment {draft['token']} with {name} ({doctor.get('specialty') or 'General'}). "
                f"Type: In-person. Duration: {settings.DEFAULT_SLOT_MINUTES}m."
            ),
            start=to_local_datetime(draft.get('start')),
            end=to_local_datetime(draft.get('end')),
            location='Hospital / Clinic',
        )
    except CalendarExportError as exc:
        logger.warning('Review calendar export failed: %s', exc)
        messages.error(request, 'Could not prepare the calendar file.')
        return redirect('bookings:review')


# ─────────────────────────────────────────────────────────────────────────────
# Summary
# ─────────────────────────────────────────────────────────────────────────────

def summary(request):
    store = BookingStore(request.session)
    resolution = _resolve_booking(request, store)
    if not resolution.found:
        return _no_booking_response(request)

    payload = resolution.payload

    if request.method == 'POST':
        action = request.POST.get('action')

        if action == 'pay':
            # Demo only: no gateway, the state flips locally.
            payload = store.mark_paid(payload)
            logger.info('Booking %s marked paid (demo)', payload['token'])
            messages.success(request, 'Payment successful (demo). Status updated to Confirmed.')

        elif action == 'visit_type':
            form = VisitTypeForm(request.POST)
            if form.is_valid():
                try:
                    store.set_visit_type(payload, form.cleaned_data['visit_type'])
                except InvalidVisitTypeError as exc:
                    messages.error(request, str(exc))
            else:
                messages.error(request, 'Please select First, Report or Follow-up.')

        elif action == 'edit':
            return navigate(request, 'bookings:review', payload)

        else:
            messages.error(request, 'Unknown action.')

        return redirect('bookings:summary')

    return render(request, 'bookings/summary.html', get_summary_context(payload))


@require_GET
def summary_calendar(request):
    store = BookingStore(request.session)
    resolution = store.resolve()
    if not resolution.found:
        return redirect('bookings:summary')

    payload = resolution.payload
    doctor_name = (payload.get('doctor') or {}).get('name') or 'Doctor'
    start, end = appointment_window(payload)

    try:
        return ics_response(
            title=f"Appointment with {doctor_name}",
            description=f"Token {payload['token']}",
            start=start,
            end=end,
            location='Clinic',
        )
    except CalendarExportError as exc:
        logger.warning('Summary calendar export failed: %s', exc)
        messages.error(request, 'Could not prepare the calendar file.')
        return redirect('bookings:summary')
