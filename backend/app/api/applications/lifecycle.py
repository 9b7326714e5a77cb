"""
Status lifecycle of a volunteer application.

``pending`` is the only non-terminal state. Every move out of it is recorded
in ``TRANSITIONS``; anything not listed there is refused, except approving an
application that is already approved, which is accepted as a no-op.
"""

import enum


class ApplicationStatus(enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    cancelled = "cancelled"


class ApplicationAction(enum.Enum):
    approve = "approve"
    reject = "reject"
    cancel = "cancel"


TRANSITIONS = {
    (ApplicationStatus.pending, ApplicationAction.approve): ApplicationStatus.approved,
    (ApplicationStatus.pending, ApplicationAction.reject): ApplicationStatus.rejected,
    (ApplicationStatus.pending, ApplicationAction.cancel): ApplicationStatus.cancelled,
}

IDEMPOTENT = frozenset({(ApplicationStatus.approved, ApplicationAction.approve)})


class TransitionError(Exception):
    def __init__(self, status: ApplicationStatus, action: ApplicationAction):
        self.status = status
        self.action = action
        super().__init__(
            f"Cannot {action.value} an application that is {status.value}."
        )


def is_noop(status: ApplicationStatus, action: ApplicationAction) -> bool:
    return (status, action) in IDEMPOTENT


def next_status(
    status: ApplicationStatus, action: ApplicationAction
) -> ApplicationStatus:
    """Return the status ``action`` leads to, or raise ``TransitionError``."""
    if is_noop(status, action):
        return status
    try:
        return TRANSITIONS[(status, action)]
    except KeyError:
        raise TransitionError(status, action)


def can_transition(status: ApplicationStatus, action: ApplicationAction) -> bool:
    return (status, action) in TRANSITIONS or is_noop(status, action)
