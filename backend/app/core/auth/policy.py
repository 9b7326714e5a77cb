"""
Who may do what.

Each rule is a plain predicate over an ``Actor`` and the ownership facts of a
resource. Rules are not ordered: any rule that allows grants access. A
superuser is allowed everywhere; an NGO account without a profile owns
nothing.
"""

from dataclasses import dataclass
from typing import Optional

from app.api.users.models import UserRoles


@dataclass(frozen=True)
class Actor:
    user_id: int
    role: UserRoles
    ngo_profile_id: Optional[int] = None

    @classmethod
    def from_user(cls, user) -> "Actor":
        profile = user.ngo_profile
        return cls(
            user_id=user.id,
            role=user.role,
            ngo_profile_id=profile.id if profile is not None else None,
        )

    @property
    def is_superuser(self) -> bool:
        return self.role is UserRoles.superuser

    @property
    def is_ngo(self) -> bool:
        return self.role is UserRoles.ngo

    @property
    def is_volunteer(self) -> bool:
        return self.role is UserRoles.volunteer


def owns_ngo(actor: Actor, ngo_id: Optional[int]) -> bool:
    return (
        actor.is_ngo
        and actor.ngo_profile_id is not None
        and ngo_id is not None
        and actor.ngo_profile_id == ngo_id
    )


def can_manage_event(actor: Actor, event_ngo_id: int) -> bool:
    """Edit, delete and decide on applications of an event."""
    return actor.is_superuser or owns_ngo(actor, event_ngo_id)


def can_create_event(actor: Actor) -> bool:
    return actor.is_superuser or (actor.is_ngo and actor.ngo_profile_id is not None)


def can_view_event(actor: Optional[Actor], event) -> bool:
    if event.is_active and event.is_public:
        return True
    return actor is not None and can_manage_event(actor, event.ngo_id)


def can_apply(actor: Actor, event) -> bool:
    return actor.is_volunteer and event.is_active and event.is_public


def can_view_application(actor: Actor, application_user_id: int, event_ngo_id: int) -> bool:
    return actor.user_id == application_user_id or can_manage_event(actor, event_ngo_id)


def can_cancel_application(actor: Actor, application_user_id: int) -> bool:
    return actor.user_id == application_user_id


def can_manage_ngo_profile(actor: Actor, profile_user_id: int) -> bool:
    return actor.is_superuser or (actor.is_ngo and actor.user_id == profile_user_id)
