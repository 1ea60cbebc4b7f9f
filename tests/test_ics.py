"""Tests for the calendar export encoder."""
from datetime import datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo

import pytest

from apps.bookings.exceptions import CalendarExportError
from apps.bookings.ics import build_ics, escape_text, ics_filename, ics_response

UTC = dt_timezone.utc


def _lines(document):
    return document.split('\r\n')


def test_scenario_times_in_utc():
    doc = build_ics(
        'Dr. A - Appointment', 'Checkup',
        datetime(2024, 1, 10, 9, 0, tzinfo=UTC),
        datetime(2024, 1, 10, 9, 30, tzinfo=UTC),
    )
    assert 'DTSTART:20240110T090000Z' in _lines(doc)
    assert 'DTEND:20240110T093000Z' in _lines(doc)
    assert 'SUMMARY:Dr. A - Appointment' in _lines(doc)


def test_local_times_converted_and_seconds_truncated():
    kolkata = ZoneInfo('Asia/Kolkata')
    doc = build_ics(
        'Visit', '',
        datetime(2024, 1, 10, 14, 30, 45, tzinfo=kolkata),
        datetime(2024, 1, 10, 15, 0, 59, tzinfo=kolkata),
    )
    assert 'DTSTART:20240110T090000Z' in _lines(doc)
    assert 'DTEND:20240110T093000Z' in _lines(doc)


def test_document_structure():
    doc = build_ics(
        'Visit', 'Token #TKN-1234',
        datetime(2024, 1, 10, 9, 0, tzinfo=UTC),
        datetime(2024, 1, 10, 9, 30, tzinfo=UTC),
        location='Clinic',
    )
    lines = _lines(doc)
    assert lines[0] == 'BEGIN:VCALENDAR'
    assert 'VERSION:2.0' in lines
    assert lines.count('BEGIN:VEVENT') == 1
    assert 'LOCATION:Clinic' in lines
    assert doc.endswith('END:VEVENT\r\nEND:VCALENDAR\r\n')
    for prefix in ('UID:', 'DTSTAMP:', 'DESCRIPTION:'):
        assert any(line.startswith(prefix) for line in lines)


def test_successive_exports_have_unique_uids():
    start = datetime(2024, 1, 10, 9, 0, tzinfo=UTC)
    end = datetime(2024, 1, 10, 9, 30, tzinfo=UTC)
    uids = set()
    for _ in range(20):
        uid = next(line for line in _lines(build_ics('t', 'd', start, end)) if line.startswith('UID:'))
        assert uid.endswith('@app.demo')
        uids.add(uid)
    assert len(uids) == 20


def test_text_values_are_escaped():
    assert escape_text('a, b; c\nd\\e') == 'a\\, b\\; c\\nd\\\\e'


def test_long_lines_are_folded():
    doc = build_ics(
        'Visit', 'x' * 200,
        datetime(2024, 1, 10, 9, 0, tzinfo=UTC),
        datetime(2024, 1, 10, 9, 30, tzinfo=UTC),
    )
    lines = _lines(doc)
    assert all(len(line.encode('utf-8')) <= 75 for line in lines)
    assert any(line.startswith(' ') for line in lines)


def test_event_must_end_after_start():
    with pytest.raises(CalendarExportError):
        build_ics(
            'Visit', '',
            datetime(2024, 1, 10, 9, 30, tzinfo=UTC),
            datetime(2024, 1, 10, 9, 0, tzinfo=UTC),
        )


def test_missing_start_is_an_export_error():
    with pytest.raises(CalendarExportError):
        build_ics('Visit', '', None, datetime(2024, 1, 10, 9, 0, tzinfo=UTC))


@pytest.mark.parametrize('title, expected', [
    ('Dr. A - Appointment', 'Dr._A_-_Appointment.ics'),
    ('Appointment  with\tDr. B', 'Appointment_with_Dr._B.ics'),
    ('#TKN 12/3', 'TKN_123.ics'),
    ('', 'appointment.ics'),
])
def test_ics_filename(title, expected):
    assert ics_filename(title) == expected


def test_ics_response_is_a_download():
    response = ics_response(
        'Dr. A - Appointment', 'Checkup',
        datetime(2024, 1, 10, 9, 0, tzinfo=UTC),
        datetime(2024, 1, 10, 9, 30, tzinfo=UTC),
    )
    assert response['Content-Type'] == 'text/calendar; charset=utf-8'
    assert response['Content-Disposition'] == 'attachment; filename="Dr._A_-_Appointment.ics"'
    assert b'DTSTART:20240110T090000Z' in response.content


def test_ics_response_non_ascii_filename():
    response = ics_response(
        'Dr. Ωmega - Appointment', 'Checkup',
        datetime(2024, 1, 10, 9, 0, tzinfo=UTC),
        datetime(2024, 1, 10, 9, 30, tzinfo=UTC),
    )
    assert response['Content-Disposition'] == (
        "attachment; filename*=utf-8''Dr._%CE%A9mega_-_Appointment.ics"
    )
