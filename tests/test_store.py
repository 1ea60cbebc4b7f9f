"""Tests for booking payload resolution, normalization and persistence."""
import json
import re

import pytest

from apps.bookings.exceptions import InvalidVisitTypeError
from apps.bookings.payload import is_payload, normalize_payload
from apps.bookings.store import (
    ABSENT,
    CURRENT_BOOKING_KEY,
    LAST_APPOINTMENT_KEY,
    SOURCE_FALLBACK,
    SOURCE_NAVIGATION,
    SOURCE_STORE,
    BookingStore,
)

pytestmark = pytest.mark.django_db

TOKEN_RE = re.compile(r'#TKN-\d{4}')


def test_empty_session_is_absent(session):
    resolution = BookingStore(session).resolve()
    assert resolution is ABSENT
    assert not resolution.found
    assert CURRENT_BOOKING_KEY not in session


def test_empty_dict_is_not_a_booking():
    assert not is_payload({})
    assert not is_payload(None)
    assert not is_payload({'appointment': None, 'doctor': None})
    assert is_payload({'doctor': {'name': 'Dr. A'}})


def test_navigation_wins_over_stored_booking(session, booking_payload):
    store = BookingStore(session)
    store.save(booking_payload)

    incoming = dict(booking_payload, token='#TKN-9999')
    resolution = store.resolve(navigation=incoming)

    assert resolution.source == SOURCE_NAVIGATION
    assert resolution.payload['token'] == '#TKN-9999'
    assert store.load_current()['token'] == '#TKN-9999'


def test_empty_navigation_falls_through_to_store(session, booking_payload):
    store = BookingStore(session)
    store.save(booking_payload)

    resolution = store.resolve(navigation={})
    assert resolution.source == SOURCE_STORE
    assert resolution.payload == booking_payload


def test_missing_fields_are_defaulted(session, doctor):
    store = BookingStore(session)
    store.save({
        'appointment': {'doctor_id': 'd1', 'start': '2024-01-10T09:00:00+00:00', 'slot': '14:30 - 15:00'},
        'doctor': doctor.snapshot(),
        'token': '#TKN-4321',
    })

    payload = store.resolve().payload
    assert payload['payment'] == 'not paid'
    assert payload['status'] == 'upcoming'
    assert payload['visit_type'] == 'First'
    assert payload['token'] == '#TKN-4321'
    assert payload['slot'] == '14:30 - 15:00'
    assert payload['start'] is not None and payload['end'] is not None
    # normalized form was written back
    assert store.load_current() == payload


def test_enum_case_is_folded_once(session, booking_payload):
    store = BookingStore(session)
    store.save(dict(booking_payload, status='Confirmed', payment='PAID', visit_type='follow-up'))

    payload = store.resolve().payload
    assert payload['status'] == 'confirmed'
    assert payload['payment'] == 'paid'
    assert payload['visit_type'] == 'Follow-up'


def test_unknown_enum_value_falls_back_to_default(booking_payload):
    payload = normalize_payload(dict(booking_payload, visit_type='Emergency'))
    assert payload['visit_type'] == 'First'


def test_normalize_is_idempotent(booking_payload):
    partial = {k: v for k, v in booking_payload.items() if k not in ('payment', 'status', 'token', 'start', 'end')}
    once = normalize_payload(partial)
    assert normalize_payload(once) == once


def test_normalized_store_is_not_rewritten(session, booking_payload, reload_session):
    BookingStore(session).save(booking_payload)
    reloaded = reload_session(session)

    resolution = BookingStore(reloaded).resolve()
    assert resolution.payload == booking_payload
    assert reloaded.modified is False


def test_round_trip_through_reload(session, booking_payload, reload_session):
    BookingStore(session).save(dict(booking_payload, patient={'name': 'Meera', 'mobile': '9876543210'}))

    resolution = BookingStore(reload_session(session)).resolve()
    assert resolution.source == SOURCE_STORE
    assert resolution.payload == dict(booking_payload, patient={'name': 'Meera', 'mobile': '9876543210'})


@pytest.mark.parametrize('raw', ['{not json', '[1, 2, 3]', '"text"', 42, '{}'])
def test_unreadable_booking_is_absent(session, raw):
    session[CURRENT_BOOKING_KEY] = raw
    assert BookingStore(session).resolve() is ABSENT


def test_unreadable_booking_uses_fallback(session, doctor):
    session[CURRENT_BOOKING_KEY] = '{broken'
    BookingStore(session).commit_last_appointment({'doctor_id': 'd1', 'start': '2024-01-10T09:00:00Z'})

    resolution = BookingStore(session).resolve()
    assert resolution.source == SOURCE_FALLBACK


def test_fallback_reconstruction(session, doctor, other_doctor):
    store = BookingStore(session)
    store.commit_last_appointment({'doctor_id': 'd1', 'start': '2024-01-10T09:00:00Z'})

    resolution = store.resolve()
    payload = resolution.payload
    assert resolution.source == SOURCE_FALLBACK
    assert payload['doctor'] == doctor.snapshot()
    assert payload['patient'] is None
    assert payload['payment'] == 'not paid'
    assert payload['status'] == 'upcoming'
    assert payload['visit_type'] == 'First'
    assert TOKEN_RE.fullmatch(payload['token'])
    assert payload['start'] == '2024-01-10T09:00:00Z'
    assert payload['end'] == '2024-01-10T09:00:00Z'


def test_fallback_token_is_stable_after_first_resolution(session, doctor):
    store = BookingStore(session)
    store.commit_last_appointment({'doctor_id': 'd1', 'start': '2024-01-10T09:00:00Z'})

    first = store.resolve()
    second = store.resolve()
    assert second.source == SOURCE_STORE
    assert second.payload['token'] == first.payload['token']


def test_fallback_unknown_doctor_uses_first_doctor(session, doctor, other_doctor):
    store = BookingStore(session)
    store.commit_last_appointment({'doctor_id': 'zz', 'start': '2024-01-10T09:00:00Z'})

    assert store.resolve().payload['doctor']['id'] == 'd1'


def test_fallback_patient_lookup(session, doctor, patient):
    store = BookingStore(session)
    store.commit_last_appointment({'doctor_id': 'd1', 'start': '2024-01-10T09:00:00Z', 'patient_id': 'p1'})

    payload = store.resolve().payload
    assert payload['patient']['name'] == 'Meera Nair'
    assert payload['patient']['mobile'] == '+919876543210'


def test_fallback_and_current_slots_are_independent(session, booking_payload):
    store = BookingStore(session)
    store.commit_last_appointment({'doctor_id': 'd2', 'start': '2024-02-01T10:00:00Z'})
    store.save(booking_payload)

    assert json.loads(session[LAST_APPOINTMENT_KEY])['doctor_id'] == 'd2'
    assert store.resolve().payload == booking_payload


def test_pay_survives_reload(session, booking_payload, reload_session):
    store = BookingStore(session)
    payload = store.resolve(navigation=booking_payload).payload

    paid = store.mark_paid(payload)
    assert paid['payment'] == 'paid'
    assert paid['status'] == 'confirmed'

    reloaded = BookingStore(reload_session(session)).resolve().payload
    assert reloaded['payment'] == 'paid'
    assert reloaded['status'] == 'confirmed'
    assert reloaded['token'] == booking_payload['token']


def test_set_visit_type(session, booking_payload):
    store = BookingStore(session)
    updated = store.set_visit_type(booking_payload, 'Report')
    assert updated['visit_type'] == 'Report'
    assert store.load_current()['visit_type'] == 'Report'


def test_set_visit_type_rejects_unknown_value(session, booking_payload):
    store = BookingStore(session)
    store.save(booking_payload)
    with pytest.raises(InvalidVisitTypeError):
        store.set_visit_type(booking_payload, 'Emergency')
    assert store.load_current()['visit_type'] == 'First'
