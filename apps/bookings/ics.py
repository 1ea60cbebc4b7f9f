"""
Calendar export for the booking flow.

Builds a single-event iCalendar (RFC 5545) document and wraps it in a
download response. Times are written in UTC with the seconds zeroed:

  DTSTART:20240110T090000Z

UIDs are '<epoch-ms>@<ICS_UID_DOMAIN>' and strictly increase within the
process, so two exports in the same millisecond still differ.
"""
import logging
import re
import threading
import time
from datetime import datetime, timezone as dt_timezone

from django.conf import settings
from django.http import HttpResponse
from django.utils.http import content_disposition_header
from django.utils import timezone

from apps.bookings.exceptions import CalendarExportError

logger = logging.getLogger(__name__)

PRODID = '-//Medibook//Appointment//EN'
MAX_LINE_OCTETS = 75

_uid_lock = threading.Lock()
_last_uid_ms = 0


def _next_uid() -> str:
    global _last_uid_ms
    with _uid_lock:
        stamp = int(time.time() * 1000)
        if stamp <= _last_uid_ms:
            stamp = _last_uid_ms + 1
        _last_uid_ms = stamp
    return f"{stamp}@{settings.ICS_UID_DOMAIN}"


def to_ics_date(dt: datetime) -> str:
    """UTC basic format with seconds truncated, e.g. '20240110T090000Z'."""
    if not isinstance(dt, datetime):
        raise CalendarExportError(f"Expected a datetime, got {type(dt).__name__}.")
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt)
    return dt.astimezone(dt_timezone.utc).strftime('%Y%m%dT%H%M00Z')


def escape_text(value) -> str:
    """Escape a TEXT property value (backslash, semicolon, comma, newline)."""
    text = '' if value is None else str(value)
    text = text.replace('\\', '\\\\').replace(';', '\\;').replace(',', '\\,')
    return text.replace('\r\n', '\\n').replace('\n', '\\n').replace('\r', '\\n')


def _fold(line: str) -> str:
    """Fold a content line at 75 octets without splitting a UTF-8 character."""
    if len(line.encode('utf-8')) <= MAX_LINE_OCTETS:
        return line

    parts, current, size = [], '', 0
    for ch in line:
        width = len(ch.encode('utf-8'))
        # continuation lines carry a leading space
        limit = MAX_LINE_OCTETS if not parts else MAX_LINE_OCTETS - 1
        if size + width > limit:
            parts.append(current)
            current, size = '', 0
        current += ch
        size += width
    parts.append(current)
    return '\r\n '.join(parts)


def build_ics(title, description, start, end, location='', now=None) -> str:
    """
    Encode one timed appointment as an iCalendar document.

    Raises CalendarExportError if start/end are not datetimes or the event
    does not end after it starts.
    """
    dtstart = to_ics_date(start)
    dtend = to_ics_date(end)
    if end <= start:
        raise CalendarExportError('Calendar event must end after it starts.')

    lines = [
        'BEGIN:VCALENDAR',
        'VERSION:2.0',
        f'PRODID:{PRODID}',
        'CALSCALE:GREGORIAN',
        'BEGIN:VEVENT',
        f'UID:{_next_uid()}',
        f'DTSTAMP:{to_ics_date(now or timezone.now())}',
        f'DTSTART:{dtstart}',
        f'DTEND:{dtend}',
        f'SUMMARY:{escape_text(title)}',
        f'DESCRIPTION:{escape_text(description)}',
        f'LOCATION:{escape_text(location)}',
        'END:VEVENT',
        'END:VCALENDAR',
    ]
    return '\r\n'.join(_fold(line) for line in lines) + '\r\n'


def ics_filename(title) -> str:
    """'Dr. A - Appointment' → 'Dr._A_-_Appointment.ics'."""
    name = re.sub(r'\s+', '_', str(title or '').strip())
    name = re.sub(r'[^\w.\-]', '', name)
    return f"{name or 'appointment'}.ics"


def ics_response(title, description, start, end, location='') -> HttpResponse:
    """Download response for the event; see build_ics for the raised errors."""
    content = build_ics(title, description, start, end, location)
    filename = ics_filename(title)
    response = HttpResponse(content, content_type='text/calendar; charset=utf-8')
    response['Content-Disposition'] = content_disposition_header(True, filename)
    logger.info('Calendar export %s prepared', filename)
    return response
