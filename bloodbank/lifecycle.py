"""Status lifecycle of a blood request"""
from enum import Enum

from bloodbank.errors import InvalidTransition, ValidationFailed


class RequestStatus(str, Enum):
    PENDING = 'Pending'
    COMPLETED = 'Completed'
    REJECTED = 'Rejected'


INITIAL_STATUS = RequestStatus.PENDING

TRANSITIONS = {
    RequestStatus.PENDING: frozenset({RequestStatus.COMPLETED, RequestStatus.REJECTED}),
    RequestStatus.COMPLETED: frozenset(),
    RequestStatus.REJECTED: frozenset(),
}


def parse_status(value):
    try:
        return RequestStatus(value)
    except ValueError:
        allowed = ', '.join(s.value for s in RequestStatus)
        raise ValidationFailed({'status': f'Status must be one of: {allowed}'}, 'Invalid request status')


def check_transition(current, requested):
    """Return the requested status if moving from ``current`` is allowed.

    Asking for Pending is never a valid transition, even from Pending.
    """
    current = RequestStatus(current)
    requested = parse_status(requested)
    if requested is INITIAL_STATUS:
        raise ValidationFailed(
            {'status': 'Pending is not a valid target status'},
            'A request cannot be moved back to Pending',
        )
    if requested not in TRANSITIONS[current]:
        raise InvalidTransition(current.value, requested.value)
    return requested
