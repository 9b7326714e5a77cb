import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.applications.lifecycle import (
    ApplicationAction,
    ApplicationStatus,
    TransitionError,
    can_transition,
    is_noop,
    next_status,
)
from app.api.applications.models import VolunteerApplications
from app.api.applications.schemas import (
    ApplicationCreate,
    ApplicationPublic,
    ApplicationStats,
    EventApplications,
    ManagedApplications,
    TransitionResult,
)
from app.api.events import capacity
from app.api.events.models import Events
from app.api.events.service import EVENT_NOT_FOUND, event_response, get_event
from app.core.auth.policy import (
    Actor,
    can_apply,
    can_cancel_application,
    can_manage_event,
    can_view_application,
)
from app.response import ConflictError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

APPLICATION_NOT_FOUND = "Application not found."
ALREADY_APPLIED = "You have already applied for this event."
EVENT_FULL = "This event is full."
APPROVE_WHEN_FULL = "Cannot approve application. Event is full."
CANCEL_NOT_PENDING = "Cannot cancel application. Status is not pending."

DECISION_MESSAGES = {
    ApplicationAction.approve: "Application approved successfully!",
    ApplicationAction.reject: "Application rejected.",
    ApplicationAction.cancel: "Application cancelled successfully.",
}


def applications_query():
    return select(VolunteerApplications).options(
        selectinload(VolunteerApplications.event),
        selectinload(VolunteerApplications.user),
        selectinload(VolunteerApplications.responded_by),
    )


async def get_application(
    session: AsyncSession, application_id: int
) -> VolunteerApplications:
    application = await session.scalar(
        applications_query()
        .where(VolunteerApplications.id == application_id)
        .execution_options(populate_existing=True)
    )
    if application is None:
        raise NotFoundError(APPLICATION_NOT_FOUND)
    return application


def transition_result(
    application: VolunteerApplications, message: str, changed: bool = True
) -> TransitionResult:
    return TransitionResult(
        changed=changed,
        message=message,
        application=ApplicationPublic.model_validate(application),
    )


async def apply(
    session: AsyncSession, actor: Actor, event_id: int, data: ApplicationCreate
) -> TransitionResult:
    event, approved = await get_event(session, event_id)
    if not can_apply(actor, event):
        raise NotFoundError(EVENT_NOT_FOUND)

    existing = await session.scalar(
        select(VolunteerApplications.id).where(
            VolunteerApplications.event_id == event_id,
            VolunteerApplications.user_id == actor.user_id,
        )
    )
    if existing:
        raise ConflictError(ALREADY_APPLIED, error_code="ALREADY_APPLIED")
    if capacity.is_full(event.capacity, approved):
        raise ConflictError(EVENT_FULL, error_code="EVENT_FULL")

    application = VolunteerApplications(
        event_id=event_id,
        user_id=actor.user_id,
        status=ApplicationStatus.pending,
        applied_at=datetime.now(timezone.utc),
        **data.model_dump(),
    )
    session.add(application)
    try:
        await session.commit()
    except IntegrityError:
        # Lost a race with a concurrent apply for the same (event, user)
        await session.rollback()
        raise ConflictError(ALREADY_APPLIED, error_code="ALREADY_APPLIED")

    logger.info(
        "User %s applied to event %s (application %s)",
        actor.user_id,
        event_id,
        application.id,
    )
    application = await get_application(session, application.id)
    return transition_result(
        application, "Your application has been submitted successfully!"
    )


async def lock_event(session: AsyncSession, event_id: int) -> Events:
    """Take a row lock on the event so approvals of it are serialized."""
    return await session.scalar(
        select(Events)
        .where(Events.id == event_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


async def lock_application(
    session: AsyncSession, application_id: int
) -> VolunteerApplications:
    """Re-read the application under a row lock, dropping any cached state."""
    return await session.scalar(
        select(VolunteerApplications)
        .where(VolunteerApplications.id == application_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


async def decide(
    session: AsyncSession,
    actor: Actor,
    application_id: int,
    action: ApplicationAction,
    response_message: str | None = None,
) -> TransitionResult:
    """
    Approve or reject an application on behalf of the event's NGO.

    Approvals lock the event first and the application second; the status and
    the approved head-count are both read again inside that lock scope.
    """
    application = await get_application(session, application_id)
    if not can_manage_event(actor, application.event.ngo_id):
        logger.info(
            "User %s may not %s application %s",
            actor.user_id,
            action.value,
            application.id,
        )
        raise ForbiddenError()

    if action is ApplicationAction.approve:
        event = await lock_event(session, application.event_id)
    application = await lock_application(session, application_id)

    if is_noop(application.status, action):
        await session.rollback()
        application = await get_application(session, application_id)
        return transition_result(
            application, f"Application is already {application.status.value}.", False
        )

    try:
        new_status = next_status(application.status, action)
    except TransitionError as e:
        await session.rollback()
        raise ConflictError(str(e), error_code="INVALID_TRANSITION")

    if new_status is ApplicationStatus.approved:
        approved = await session.scalar(capacity.approved_count_query(event.id))
        if capacity.is_full(event.capacity, approved):
            await session.rollback()
            raise ConflictError(APPROVE_WHEN_FULL, error_code="EVENT_FULL")

    previous = application.status
    application.status = new_status
    application.responded_at = datetime.now(timezone.utc)
    application.response_message = response_message
    application.responded_by_id = actor.user_id
    await session.commit()

    logger.info(
        "Application %s moved %s -> %s by user %s",
        application.id,
        previous.value,
        new_status.value,
        actor.user_id,
    )
    application = await get_application(session, application_id)
    return transition_result(application, DECISION_MESSAGES[action])


async def cancel(
    session: AsyncSession, actor: Actor, application_id: int
) -> TransitionResult:
    application = await get_application(session, application_id)
    if not can_cancel_application(actor, application.user_id):
        raise ForbiddenError()

    application = await lock_application(session, application_id)
    if not can_transition(application.status, ApplicationAction.cancel):
        await session.rollback()
        application = await get_application(session, application_id)
        return transition_result(application, CANCEL_NOT_PENDING, changed=False)

    application.status = next_status(application.status, ApplicationAction.cancel)
    application.responded_at = datetime.now(timezone.utc)
    await session.commit()

    logger.info("Application %s cancelled by user %s", application_id, actor.user_id)
    application = await get_application(session, application_id)
    return transition_result(application, DECISION_MESSAGES[ApplicationAction.cancel])


async def my_applications(
    session: AsyncSession, user_id: int, limit: int = 10, offset: int = 0
) -> tuple[list[ApplicationPublic], int]:
    condition = VolunteerApplications.user_id == user_id
    total = await session.scalar(
        select(func.count(VolunteerApplications.id)).where(condition)
    )
    result = await session.scalars(
        applications_query()
        .where(condition)
        .order_by(VolunteerApplications.applied_at.desc(), VolunteerApplications.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return [ApplicationPublic.model_validate(item) for item in result], total


async def application_details(
    session: AsyncSession, actor: Actor, application_id: int
) -> ApplicationPublic:
    application = await get_application(session, application_id)
    if not can_view_application(
        actor, application.user_id, application.event.ngo_id
    ):
        raise NotFoundError(APPLICATION_NOT_FOUND)
    return ApplicationPublic.model_validate(application)


async def event_applications(
    session: AsyncSession, actor: Actor, event_id: int
) -> EventApplications:
    event, approved = await get_event(session, event_id)
    if not can_manage_event(actor, event.ngo_id):
        raise NotFoundError(EVENT_NOT_FOUND)

    result = await session.scalars(
        applications_query()
        .where(VolunteerApplications.event_id == event_id)
        .order_by(VolunteerApplications.applied_at.desc(), VolunteerApplications.id.desc())
    )
    return EventApplications(
        event=event_response(event, approved),
        applications=[ApplicationPublic.model_validate(item) for item in result],
    )


def managed_scope(actor: Actor):
    """Applications an NGO (or the superuser) oversees."""
    if actor.is_superuser:
        return None
    if actor.ngo_profile_id is None:
        raise ForbiddenError("NGO profile not found. Please contact administrator.")
    return VolunteerApplications.event_id.in_(
        select(Events.id).where(Events.ngo_id == actor.ngo_profile_id)
    )


async def status_counts(session: AsyncSession, condition=None) -> ApplicationStats:
    query = select(
        VolunteerApplications.status, func.count(VolunteerApplications.id)
    ).group_by(VolunteerApplications.status)
    if condition is not None:
        query = query.where(condition)
    counts = {status.value: count for status, count in await session.execute(query)}
    return ApplicationStats(total=sum(counts.values()), **counts)


async def managed_applications(
    session: AsyncSession, actor: Actor
) -> ManagedApplications:
    condition = managed_scope(actor)
    query = applications_query().order_by(
        VolunteerApplications.applied_at.desc(), VolunteerApplications.id.desc()
    )
    if condition is not None:
        query = query.where(condition)
    result = await session.scalars(query)
    return ManagedApplications(
        stats=await status_counts(session, condition),
        applications=[ApplicationPublic.model_validate(item) for item in result],
    )
