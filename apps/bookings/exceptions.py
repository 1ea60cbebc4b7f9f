"""
Custom exceptions for the booking flow.
Raised in engine.py / store.py / ics.py and caught in views.py for clean error handling.
"""


class BookingFlowError(Exception):
    """Base exception for all booking flow errors."""
    pass


class InvalidSlotError(BookingFlowError):
    """Raised when a slot label is not a valid 'HH:MM - HH:MM' range."""
    pass


class InvalidVisitTypeError(BookingFlowError):
    """Raised when a visit type outside First / Report / Follow-up is requested."""
    pass


class CalendarExportError(BookingFlowError):
    """Raised when an appointment cannot be encoded as a calendar event."""
    pass
