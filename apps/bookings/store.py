"""
Booking payload store — session-backed persistence for the booking flow.

Session layout:
    "current_booking":  JSON text of the latest full booking payload
    "last_appointment": JSON text of the last committed appointment (fallback)

Both slots are written independently. Use BookingStore instead of touching
these keys directly; views get one per request via BookingStore(request.session).
"""
import json
import logging
from dataclasses import dataclass

from django.core.serializers.json import DjangoJSONEncoder

from apps.bookings.exceptions import InvalidVisitTypeError
from apps.bookings.payload import (
    AppointmentStatus,
    PaymentState,
    VisitType,
    coerce_choice,
    is_payload,
    normalize_payload,
    reconstruct_from_fallback,
)

logger = logging.getLogger(__name__)

CURRENT_BOOKING_KEY = 'current_booking'
LAST_APPOINTMENT_KEY = 'last_appointment'

# Where a resolved payload came from
SOURCE_NAVIGATION = 'navigation'
SOURCE_STORE = 'store'
SOURCE_FALLBACK = 'fallback'


@dataclass(frozen=True)
class Resolved:
    payload: dict
    source: str

    found = True


class Absent:
    """No booking could be resolved from any source."""
    found = False
    payload = None
    source = None

    def __repr__(self):
        return 'ABSENT'


ABSENT = Absent()


class BookingStore:
    """
    Read/write access to the booking held in a session mapping.

    Every write replaces the whole payload; there are no partial updates.
    """

    def __init__(self, session):
        self.session = session

    # ── Raw slots ─────────────────────────────────────────────────────────────

    def _read(self, key):
        raw = self.session.get(key)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning('Discarding unreadable session slot "%s"', key)
            return None
        if not isinstance(data, dict):
            logger.warning('Discarding session slot "%s": expected an object, got %s',
                           key, type(data).__name__)
            return None
        return data

    def _write(self, key, data: dict) -> None:
        self.session[key] = json.dumps(data, cls=DjangoJSONEncoder)
        self.session.modified = True

    # ── Current booking ───────────────────────────────────────────────────────

    def load_current(self):
        """The persisted payload, or None if missing or unreadable."""
        data = self._read(CURRENT_BOOKING_KEY)
        return data if is_payload(data) else None

    def save(self, payload: dict) -> dict:
        self._write(CURRENT_BOOKING_KEY, payload)
        logger.debug('Booking %s persisted', payload.get('token'))
        return payload

    def update(self, payload: dict, **changes) -> dict:
        """Apply `changes` to a copy of `payload` and persist it in the same call."""
        updated = {**payload, **changes}
        return self.save(updated)

    def mark_paid(self, payload: dict) -> dict:
        """Demo payment: paid + confirmed, no gateway involved."""
        return self.update(
            payload,
            payment=PaymentState.PAID.value,
            status=AppointmentStatus.CONFIRMED.value,
        )

    def set_visit_type(self, payload: dict, visit_type) -> dict:
        value = coerce_choice(VisitType, visit_type)
        if value is None:
            raise InvalidVisitTypeError(f"Unknown visit type {visit_type!r}.")
        return self.update(payload, visit_type=value)

    # ── Last appointment (fallback) ───────────────────────────────────────────

    def load_last_appointment(self):
        return self._read(LAST_APPOINTMENT_KEY)

    def commit_last_appointment(self, appointment: dict) -> None:
        self._write(LAST_APPOINTMENT_KEY, appointment)

    # ── Resolution ────────────────────────────────────────────────────────────

    def resolve(self, navigation=None):
        """
        Resolve the booking for a page load, in priority order:
          1. `navigation` data handed over by the previous page
          2. the persisted current booking
          3. the last committed appointment, rebuilt into a payload
        Returns Resolved(payload, source) or ABSENT.

        The returned payload is normalized and already persisted. A stored
        payload that was normalized before is not rewritten.
        """
        if navigation is not None:
            if is_payload(navigation):
                return Resolved(self.save(normalize_payload(navigation)), SOURCE_NAVIGATION)
            logger.warning('Ignoring navigation state that is not a booking')

        stored = self.load_current()
        if stored is not None:
            payload = normalize_payload(stored)
            if payload != stored:
                self.save(payload)
            return Resolved(payload, SOURCE_STORE)

        fallback = self.load_last_appointment()
        if fallback is not None:
            payload = normalize_payload(reconstruct_from_fallback(fallback))
            logger.info('Booking %s rebuilt from last appointment', payload['token'])
            return Resolved(self.save(payload), SOURCE_FALLBACK)

        return ABSENT
