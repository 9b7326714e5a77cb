import pytest

from app.api.applications.lifecycle import (
    ApplicationAction,
    ApplicationStatus,
    TransitionError,
    can_transition,
    is_noop,
    next_status,
)

CLOSED = [
    ApplicationStatus.approved,
    ApplicationStatus.rejected,
    ApplicationStatus.cancelled,
]


@pytest.mark.parametrize(
    "action,expected",
    [
        (ApplicationAction.approve, ApplicationStatus.approved),
        (ApplicationAction.reject, ApplicationStatus.rejected),
        (ApplicationAction.cancel, ApplicationStatus.cancelled),
    ],
)
def test_pending_moves_to_each_terminal_state(action, expected):
    assert next_status(ApplicationStatus.pending, action) is expected


def test_approve_on_approved_is_a_noop():
    assert is_noop(ApplicationStatus.approved, ApplicationAction.approve)
    assert (
        next_status(ApplicationStatus.approved, ApplicationAction.approve)
        is ApplicationStatus.approved
    )


@pytest.mark.parametrize("status", CLOSED)
@pytest.mark.parametrize(
    "action", [ApplicationAction.reject, ApplicationAction.cancel]
)
def test_terminal_states_refuse_reject_and_cancel(status, action):
    assert not can_transition(status, action)
    with pytest.raises(TransitionError) as exc:
        next_status(status, action)
    assert exc.value.status is status
    assert exc.value.action is action


@pytest.mark.parametrize(
    "status", [ApplicationStatus.rejected, ApplicationStatus.cancelled]
)
def test_closed_applications_cannot_be_approved(status):
    with pytest.raises(TransitionError, match="Cannot approve"):
        next_status(status, ApplicationAction.approve)


def test_only_pending_applications_can_move():
    movable = {
        status
        for status in ApplicationStatus
        for action in (ApplicationAction.reject, ApplicationAction.cancel)
        if can_transition(status, action)
    }
    assert movable == {ApplicationStatus.pending}
