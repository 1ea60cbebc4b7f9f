import json
from importlib import import_module

import pytest
from django.conf import settings

from apps.doctors.models import Doctor
from apps.patients.models import Patient


def _session_store(session_key=None):
    return import_module(settings.SESSION_ENGINE).SessionStore(session_key)


@pytest.fixture
def session(db):
    return _session_store()


@pytest.fixture
def reload_session():
    """Persist a session and load it back the way the next request would."""
    def _reload(session):
        session.save()
        return _session_store(session.session_key)
    return _reload


@pytest.fixture
def doctor(db):
    return Doctor.objects.create(
        code='d1',
        name='Dr. A',
        specialty='general-physician',
        qualification='MBBS, MD',
    )


@pytest.fixture
def other_doctor(db):
    return Doctor.objects.create(
        code='d2',
        name='Dr. B',
        specialty='cardiology',
        qualification='MBBS, DM',
    )


@pytest.fixture
def patient(db):
    return Patient.objects.create(
        code='p1',
        name='Meera Nair',
        age=34,
        gender='Female',
        mobile='+91 98765 43210',
        relation='Self',
    )


@pytest.fixture
def booking_payload(doctor):
    return {
        'appointment': {
            'doctor_id': 'd1',
            'start': '2024-01-10T09:00:00+00:00',
            'end': '2024-01-10T09:30:00+00:00',
            'slot': '14:30 - 15:00',
        },
        'doctor': doctor.snapshot(),
        'patient': None,
        'token': '#TKN-1234',
        'payment': 'not paid',
        'status': 'upcoming',
        'visit_type': 'First',
        'slot': '14:30 - 15:00',
        'start': '2024-01-10T09:00:00+00:00',
        'end': '2024-01-10T09:30:00+00:00',
    }


@pytest.fixture
def seed_session(client):
    """Write keys into the test client's session."""
    def _seed(data):
        session = client.session
        session.update(data)
        session.save()
        client.cookies[settings.SESSION_COOKIE_NAME] = session.session_key
    return _seed


@pytest.fixture
def stored_booking(client):
    """The current booking as persisted in the test client's session."""
    def _stored():
        raw = client.session.get('current_booking')
        return json.loads(raw) if raw else None
    return _stored
