import logging
from fastapi import status
from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from app.api.applications.models import VolunteerApplications
from app.api.events import capacity
from app.api.events.models import Events
from app.api.events.schemas import EventCreate, EventPublic, EventUpdate
from app.api.ngos.models import NGOProfiles
from app.api.ngos.schemas import NGOProfileMin
from app.core.auth.policy import (
    Actor,
    can_create_event,
    can_manage_event,
    can_view_event,
)
from app.core.validations.exceptions import FieldValidationError
from app.core.validations.schema import validate_relations
from app.response import (
    ConflictError,
    CustomHTTPException,
    ForbiddenError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

EVENT_NOT_FOUND = "Event not found."

EVENT_FIELDS = (
    "id",
    "ngo_id",
    "title",
    "description",
    "category",
    "start_at",
    "end_at",
    "venue",
    "capacity",
    "is_public",
    "is_active",
    "contact_person",
    "contact_phone",
    "contact_email",
    "created_at",
    "updated_at",
)


def event_response(
    event: Events, approved: int, has_applied: bool | None = None
) -> EventPublic:
    data = {field: getattr(event, field) for field in EVENT_FIELDS}
    data.update(capacity.describe(event, approved))
    data["ngo"] = NGOProfileMin.model_validate(event.ngo)
    data["has_applied"] = has_applied
    return EventPublic.model_validate(data)


def events_with_counts():
    return select(Events, capacity.approved_count_subquery().label("approved")).options(
        selectinload(Events.ngo)
    )


async def applied_event_ids(session: AsyncSession, user_id: int) -> set[int]:
    result = await session.scalars(
        select(VolunteerApplications.event_id).where(
            VolunteerApplications.user_id == user_id
        )
    )
    return set(result)


def visible_events_filter(actor: Actor | None):
    """Which events a listing shows, by role."""
    if actor is not None and actor.is_superuser:
        return None
    if actor is not None and actor.is_ngo:
        if actor.ngo_profile_id is None:
            return False
        return (Events.ngo_id == actor.ngo_profile_id) & Events.active()
    return Events.active() & Events.is_public.is_(True)


async def list_events(
    session: AsyncSession,
    actor: Actor | None,
    limit: int = 10,
    offset: int = 0,
    public_only: bool = False,
) -> tuple[list[EventPublic], int]:
    condition = (
        Events.active() & Events.is_public.is_(True)
        if public_only
        else visible_events_filter(actor)
    )
    if condition is False:
        return [], 0

    query = events_with_counts()
    count_query = select(func.count(Events.id))
    if condition is not None:
        query = query.where(condition)
        count_query = count_query.where(condition)

    total = await session.scalar(count_query)
    rows = await session.execute(
        query.order_by(Events.start_at, Events.id).limit(limit).offset(offset)
    )

    applied = None
    if actor is not None and actor.is_volunteer:
        applied = await applied_event_ids(session, actor.user_id)

    events = [
        event_response(
            event,
            approved,
            has_applied=(event.id in applied) if applied is not None else None,
        )
        for event, approved in rows.all()
    ]
    return events, total


async def get_event(session: AsyncSession, event_id: int) -> tuple[Events, int]:
    row = (
        await session.execute(
            events_with_counts()
            .where(Events.id == event_id)
            .execution_options(populate_existing=True)
        )
    ).first()
    if row is None:
        raise NotFoundError(EVENT_NOT_FOUND)
    return row[0], row[1]


async def event_details(
    session: AsyncSession, actor: Actor | None, event_id: int
) -> EventPublic:
    event, approved = await get_event(session, event_id)
    if not can_view_event(actor, event):
        raise NotFoundError(EVENT_NOT_FOUND)

    has_applied = None
    if actor is not None and actor.is_volunteer:
        has_applied = await session.scalar(
            select(
                exists().where(
                    VolunteerApplications.event_id == event.id,
                    VolunteerApplications.user_id == actor.user_id,
                )
            )
        )
    return event_response(event, approved, has_applied=has_applied)


async def get_managed_event(
    session: AsyncSession, actor: Actor, event_id: int
) -> tuple[Events, int]:
    """Load an event the actor is about to change."""
    event, approved = await get_event(session, event_id)
    if not can_manage_event(actor, event.ngo_id):
        logger.info("User %s may not manage event %s", actor.user_id, event.id)
        raise ForbiddenError("You don't have permission to edit this event.")
    return event, approved


async def resolve_owner_ngo(session: AsyncSession, actor: Actor, ngo_id: int | None):
    """Profile a new event is published under."""
    if actor.is_superuser and ngo_id is not None:
        await validate_relations(session, {"ngo_id": (NGOProfiles, ngo_id)})
        profile = await session.get(NGOProfiles, ngo_id)
    elif can_create_event(actor) and actor.ngo_profile_id is not None:
        profile = await session.get(NGOProfiles, actor.ngo_profile_id)
    else:
        profile = None

    if profile is None or not profile.is_active:
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            message="NGO profile not found. Please contact administrator.",
            error_code="NGO_PROFILE_NOT_FOUND",
        )
    return profile


def check_schedule(data: EventCreate | EventUpdate):
    errors = capacity.validate_event_window(data.start_at, data.end_at, data.capacity)
    if errors:
        raise FieldValidationError(**errors)


async def create_event(
    session: AsyncSession, actor: Actor, data: EventCreate
) -> EventPublic:
    profile = await resolve_owner_ngo(session, actor, data.ngo_id)
    check_schedule(data)

    event = Events(
        ngo_id=profile.id,
        is_public=True,
        **data.model_dump(exclude={"ngo_id"}),
    )
    session.add(event)
    await session.commit()
    logger.info("User %s created event %s for NGO %s", actor.user_id, event.id, profile.id)

    event, approved = await get_event(session, event.id)
    return event_response(event, approved)


async def commit_event_change(session: AsyncSession, event_id: int):
    """Commit, turning a lost concurrent-edit race into a 404 or 409."""
    try:
        await session.commit()
    except StaleDataError:
        await session.rollback()
        still_there = await session.scalar(
            select(exists().where(Events.id == event_id))
        )
        if not still_there:
            raise NotFoundError(EVENT_NOT_FOUND)
        raise ConflictError(
            "The event was changed by someone else. Reload it and try again."
        )


async def update_event(
    session: AsyncSession, actor: Actor, event_id: int, data: EventUpdate
) -> EventPublic:
    event, _ = await get_managed_event(session, actor, event_id)
    check_schedule(data)

    for key, value in data.model_dump().items():
        setattr(event, key, value)
    await commit_event_change(session, event_id)
    logger.info("User %s updated event %s", actor.user_id, event_id)

    event, approved = await get_event(session, event_id)
    return event_response(event, approved)


async def delete_event(session: AsyncSession, actor: Actor, event_id: int) -> EventPublic:
    event, _ = await get_managed_event(session, actor, event_id)
    if event.is_active:
        event.soft_delete()
        await commit_event_change(session, event_id)
        logger.info("User %s deactivated event %s", actor.user_id, event_id)

    event, approved = await get_event(session, event_id)
    return event_response(event, approved)
