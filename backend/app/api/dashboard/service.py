from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.applications.lifecycle import ApplicationStatus
from app.api.applications.models import VolunteerApplications
from app.api.applications.schemas import ApplicationPublic
from app.api.applications.service import applications_query, status_counts
from app.api.dashboard.schemas import (
    EventDashboard,
    SuperuserDashboard,
    SystemStats,
    VolunteerDashboard,
    VolunteerStats,
)
from app.api.events.models import Events
from app.api.events.service import (
    EVENT_NOT_FOUND,
    event_response,
    events_with_counts,
    get_event,
)
from app.api.ngos.models import NGOProfiles
from app.api.users.models import Users
from app.core.auth.policy import Actor, can_manage_event
from app.response import NotFoundError

RECENT_LIMIT = 10
UPCOMING_LIMIT = 5


async def count(session: AsyncSession, column, *conditions) -> int:
    query = select(func.count(column))
    if conditions:
        query = query.where(*conditions)
    return await session.scalar(query)


async def superuser_dashboard(session: AsyncSession) -> SuperuserDashboard:
    now = datetime.now(timezone.utc)
    stats = SystemStats(
        total_users=await count(session, Users.id),
        total_ngos=await count(session, NGOProfiles.id),
        total_events=await count(session, Events.id),
        total_applications=await count(session, VolunteerApplications.id),
        pending_applications=await count(
            session,
            VolunteerApplications.id,
            VolunteerApplications.status == ApplicationStatus.pending,
        ),
        active_events=await count(
            session, Events.id, Events.active(), Events.start_at > now
        ),
    )

    recent_events = await session.execute(
        events_with_counts()
        .where(Events.active())
        .order_by(Events.created_at.desc(), Events.id.desc())
        .limit(RECENT_LIMIT)
    )
    recent_applications = await session.scalars(
        applications_query()
        .order_by(VolunteerApplications.applied_at.desc(), VolunteerApplications.id.desc())
        .limit(RECENT_LIMIT)
    )
    return SuperuserDashboard(
        stats=stats,
        recent_events=[
            event_response(event, approved) for event, approved in recent_events.all()
        ],
        recent_applications=[
            ApplicationPublic.model_validate(item) for item in recent_applications
        ],
    )


async def volunteer_dashboard(session: AsyncSession, user_id: int) -> VolunteerDashboard:
    mine = VolunteerApplications.user_id == user_id
    stats = VolunteerStats(
        total_applications=await count(session, VolunteerApplications.id, mine),
        pending_applications=await count(
            session,
            VolunteerApplications.id,
            mine,
            VolunteerApplications.status == ApplicationStatus.pending,
        ),
        approved_applications=await count(
            session,
            VolunteerApplications.id,
            mine,
            VolunteerApplications.status == ApplicationStatus.approved,
        ),
    )

    my_applications = await session.scalars(
        applications_query()
        .where(mine)
        .order_by(VolunteerApplications.applied_at.desc(), VolunteerApplications.id.desc())
        .limit(RECENT_LIMIT)
    )
    upcoming = await session.scalars(
        applications_query()
        .join(Events, Events.id == VolunteerApplications.event_id)
        .where(
            mine,
            VolunteerApplications.status == ApplicationStatus.approved,
            Events.start_at > datetime.now(timezone.utc),
        )
        .order_by(Events.start_at)
        .limit(UPCOMING_LIMIT)
    )
    return VolunteerDashboard(
        stats=stats,
        my_applications=[ApplicationPublic.model_validate(i) for i in my_applications],
        upcoming_events=[ApplicationPublic.model_validate(i) for i in upcoming],
    )


async def event_dashboard(
    session: AsyncSession, actor: Actor, event_id: int
) -> EventDashboard:
    event, approved = await get_event(session, event_id)
    if not can_manage_event(actor, event.ngo_id):
        raise NotFoundError(EVENT_NOT_FOUND)

    condition = VolunteerApplications.event_id == event.id
    applications = await session.scalars(
        applications_query()
        .where(condition)
        .order_by(VolunteerApplications.applied_at.desc(), VolunteerApplications.id.desc())
    )
    return EventDashboard(
        event=event_response(event, approved),
        stats=await status_counts(session, condition),
        applications=[ApplicationPublic.model_validate(i) for i in applications],
    )
