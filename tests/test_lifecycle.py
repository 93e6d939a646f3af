import pytest

from bloodbank.errors import InvalidTransition, ValidationFailed
from bloodbank.lifecycle import TRANSITIONS, RequestStatus, check_transition, parse_status


@pytest.mark.parametrize('requested', ['Completed', 'Rejected'])
def test_pending_can_finish(requested):
    assert check_transition('Pending', requested) is RequestStatus(requested)


@pytest.mark.parametrize('current', ['Completed', 'Rejected'])
@pytest.mark.parametrize('requested', ['Completed', 'Rejected'])
def test_terminal_states_never_change(current, requested):
    with pytest.raises(InvalidTransition) as excinfo:
        check_transition(current, requested)
    assert excinfo.value.code == 409
    assert excinfo.value.current == current


@pytest.mark.parametrize('current', ['Pending', 'Completed', 'Rejected'])
def test_pending_is_never_a_target(current):
    with pytest.raises(ValidationFailed) as excinfo:
        check_transition(current, 'Pending')
    assert 'status' in excinfo.value.fields


def test_unknown_status_is_a_validation_error():
    with pytest.raises(ValidationFailed):
        parse_status('Shipped')


def test_transition_table_covers_every_status():
    assert set(TRANSITIONS) == set(RequestStatus)
    assert TRANSITIONS[RequestStatus.PENDING]
    assert not TRANSITIONS[RequestStatus.COMPLETED]
    assert not TRANSITIONS[RequestStatus.REJECTED]
