"""
Booking engine — pure business logic, no HTTP/request awareness.

Public API:
  build_slot_labels(first, last, minutes)
  parse_slot_label(label)
  to_local_datetime(value)
  resolve_slot(reference, slot_label, now=None)
  generate_token()
  format_readable(value)
  title_case_specialty(slug)
  build_share_text(doctor_name, start, token)
"""
import logging
import random
import re
from datetime import datetime, timedelta, date as date_type, time as time_type

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from apps.bookings.exceptions import InvalidSlotError

logger = logging.getLogger(__name__)

SLOT_LABEL_RE = re.compile(r'^\s*(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})\s*$')

TOKEN_PREFIX = '#TKN-'
TOKEN_MIN = 1000
TOKEN_MAX = 9999

PLACEHOLDER = '—'


# ── Time helpers ──────────────────────────────────────────────────────────────

def _add_minutes(t: time_type, minutes: int) -> time_type:
    """Add minutes to a time object."""
    dt = datetime.combine(date_type.today(), t) + timedelta(minutes=minutes)
    return dt.time()


def _fmt_time(t) -> str:
    """
    Format time as '9:00 AM' without a leading zero on the hour.
    Cross-platform replacement for strftime('%-I:%M %p') which is Linux-only.
    """
    hour = t.hour % 12 or 12
    minute = t.strftime('%M')
    ampm = 'AM' if t.hour < 12 else 'PM'
    return f"{hour}:{minute} {ampm}"


def build_slot_labels(first: time_type = time_type(9, 0),
                      last: time_type = time_type(17, 0),
                      minutes: int = 30) -> list:
    """
    Consecutive slot labels from `first` up to `last`, e.g.
    ['09:00 - 09:30', '09:30 - 10:00', ...].
    """
    labels = []
    current = first
    while True:
        slot_end = _add_minutes(current, minutes)
        if slot_end > last or slot_end <= current:
            break
        labels.append(f"{current.strftime('%H:%M')} - {slot_end.strftime('%H:%M')}")
        current = slot_end
    return labels


def parse_slot_label(label) -> tuple:
    """
    Strictly parse 'HH:MM - HH:MM' into a (start, end) pair of times.

    Raises InvalidSlotError when the label is missing, malformed, out of
    range, or does not end after it starts.
    """
    if not isinstance(label, str):
        raise InvalidSlotError(f"Slot label must be a string, got {type(label).__name__}.")

    match = SLOT_LABEL_RE.match(label)
    if not match:
        raise InvalidSlotError(f"Slot label {label!r} is not in 'HH:MM - HH:MM' form.")

    sh, sm, eh, em = (int(g) for g in match.groups())
    try:
        start = time_type(sh, sm)
        end = time_type(eh, em)
    except ValueError as exc:
        raise InvalidSlotError(f"Slot label {label!r} is out of range.") from exc

    if end <= start:
        raise InvalidSlotError(f"Slot label {label!r} ends before it starts.")
    return start, end


def to_local_datetime(value):
    """
    Coerce a datetime, date or ISO string into an aware datetime in the
    current time zone. Naive values are taken as local wall-clock time.
    Returns None for anything unparseable.
    """
    dt = None
    try:
        if isinstance(value, datetime):
            dt = value
        elif isinstance(value, date_type):
            dt = datetime.combine(value, time_type.min)
        elif isinstance(value, str) and value.strip():
            dt = parse_datetime(value.strip())
            if dt is None:
                d = parse_date(value.strip())
                dt = datetime.combine(d, time_type.min) if d else None
    except (ValueError, OverflowError):
        return None

    if dt is None:
        return None
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt)
    return timezone.localtime(dt)


# ── Core: Slot Resolution ─────────────────────────────────────────────────────

def resolve_slot(reference, slot_label, now=None) -> tuple:
    """
    Turn a reference date plus a slot label into concrete (start, end)
    datetimes on the reference's local calendar day.

    Never raises: a missing or malformed label or reference yields
    (now, now + DEFAULT_SLOT_MINUTES) so the page can still render.
    """
    try:
        start_t, end_t = parse_slot_label(slot_label)
        anchor = to_local_datetime(reference)
        if anchor is None:
            raise InvalidSlotError(f"Reference date {reference!r} is not a date.")
        day = anchor.date()
        start = timezone.make_aware(datetime.combine(day, start_t))
        end = timezone.make_aware(datetime.combine(day, end_t))
        return start, end
    except InvalidSlotError as exc:
        logger.debug('Slot fallback to current window: %s', exc)
        start = timezone.localtime(now or timezone.now())
        return start, start + timedelta(minutes=settings.DEFAULT_SLOT_MINUTES)


# ── Core: Token ───────────────────────────────────────────────────────────────

def generate_token() -> str:
    """A fresh display token such as '#TKN-4821'. Callers cache the result."""
    return f"{TOKEN_PREFIX}{random.randint(TOKEN_MIN, TOKEN_MAX)}"


# ── Display helpers ───────────────────────────────────────────────────────────

def format_readable(value) -> str:
    """'Wed, Jan 10, 2:30 PM' in local time; the raw value if unparseable."""
    if value in (None, ''):
        return PLACEHOLDER
    dt = to_local_datetime(value)
    if dt is None:
        return str(value)
    return f"{dt.strftime('%a, %b')} {dt.day}, {_fmt_time(dt)}"


def title_case_specialty(slug) -> str:
    """'general-physician' → 'General Physician'."""
    if not slug:
        return ''
    return ' '.join(w[:1].upper() + w[1:] for w in str(slug).replace('-', ' ').split())


def build_share_text(doctor_name, start, token) -> str:
    return f"Appointment with {doctor_name or 'Doctor'} on {format_readable(start)} | Token: {token}"
