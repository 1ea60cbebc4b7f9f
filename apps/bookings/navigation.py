"""
Page-to-page navigation carrying an optional payload.

`navigate()` parks the payload in the session next to the destination's URL
name and redirects there. The destination calls `take_navigation_state()`
once; the entry is dropped on that read whether or not it was addressed to
the caller, so a stale hand-off never leaks into a later page.
"""
import logging

from django.shortcuts import redirect

logger = logging.getLogger(__name__)

NAVIGATION_KEY = 'navigation_state'


def navigate(request, to: str, state=None):
    """Redirect to URL name `to`, carrying `state` (any JSON-able value)."""
    if state is None:
        request.session.pop(NAVIGATION_KEY, None)
    else:
        request.session[NAVIGATION_KEY] = {'to': to, 'state': state}
    request.session.modified = True
    return redirect(to)


def take_navigation_state(request, to: str):
    """The payload handed to URL name `to`, or None."""
    entry = request.session.pop(NAVIGATION_KEY, None)
    if entry is None:
        return None
    request.session.modified = True
    if not isinstance(entry, dict) or entry.get('to') != to:
        logger.info('Dropping navigation state not addressed to %s', to)
        return None
    return entry.get('state')
