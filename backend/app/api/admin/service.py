"""
Superuser administration of accounts.

Deleting an account removes what hangs off it in explicit steps inside one
transaction instead of relying on ORM or database cascades:

* volunteer: applications, then the account
* NGO: applications to its events, the events, the profile, then the account
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.admin.schemas import (
    DeleteResult,
    NGODetails,
    NGOSummary,
    VolunteerDetails,
    VolunteerSummary,
)
from app.api.applications.models import VolunteerApplications
from app.api.applications.schemas import ApplicationPublic
from app.api.applications.service import applications_query
from app.api.events.models import Events
from app.api.events.service import event_response, events_with_counts
from app.api.ngos.models import NGOProfiles
from app.api.users.models import UserRoles, Users
from app.response import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def application_count_subquery():
    return (
        select(func.count(VolunteerApplications.id))
        .where(VolunteerApplications.user_id == Users.id)
        .correlate(Users)
        .scalar_subquery()
    )


def event_count_subquery():
    return (
        select(func.count(Events.id))
        .where(Events.ngo_id == NGOProfiles.id)
        .correlate(NGOProfiles)
        .scalar_subquery()
    )


def volunteer_summary(user: Users, application_count: int) -> dict:
    return {
        "id": user.id,
        "full_name": user.full_name,
        "email": user.email,
        "phone": user.phone,
        "is_active": user.is_active,
        "created_at": user.created_at,
        "last_login_at": user.last_login_at,
        "application_count": application_count,
    }


async def list_volunteers(
    session: AsyncSession, limit: int = 10, offset: int = 0
) -> tuple[list[VolunteerSummary], int]:
    condition = Users.role == UserRoles.volunteer
    total = await session.scalar(select(func.count(Users.id)).where(condition))
    rows = await session.execute(
        select(Users, application_count_subquery().label("application_count"))
        .where(condition)
        .order_by(Users.created_at.desc(), Users.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return [
        VolunteerSummary.model_validate(volunteer_summary(user, count))
        for user, count in rows.all()
    ], total


async def get_volunteer(session: AsyncSession, user_id: int) -> Users:
    user = await session.scalar(
        select(Users).where(Users.id == user_id, Users.role == UserRoles.volunteer)
    )
    if user is None:
        raise NotFoundError("Volunteer not found.")
    return user


async def volunteer_details(session: AsyncSession, user_id: int) -> VolunteerDetails:
    user = await get_volunteer(session, user_id)
    applications = list(
        await session.scalars(
            applications_query()
            .where(VolunteerApplications.user_id == user.id)
            .order_by(VolunteerApplications.applied_at.desc())
        )
    )
    data = volunteer_summary(user, len(applications))
    data["applications"] = [
        ApplicationPublic.model_validate(item) for item in applications
    ]
    return VolunteerDetails.model_validate(data)


async def delete_volunteer(session: AsyncSession, user_id: int) -> DeleteResult:
    user = await get_volunteer(session, user_id)

    applications = await session.execute(
        delete(VolunteerApplications).where(VolunteerApplications.user_id == user.id)
    )
    await session.delete(user)
    await session.commit()

    logger.info(
        "Deleted volunteer %s and %s applications", user_id, applications.rowcount
    )
    return DeleteResult(
        message="Volunteer deleted successfully!",
        deleted={"applications": applications.rowcount, "users": 1},
    )


def ngo_summary(profile: NGOProfiles, event_count: int) -> dict:
    data = {
        field: getattr(profile, field)
        for field in NGOSummary.model_fields
        if field not in ("owner", "event_count")
    }
    data["owner"] = profile.user
    data["event_count"] = event_count
    return data


async def list_ngos(
    session: AsyncSession, limit: int = 10, offset: int = 0
) -> tuple[list[NGOSummary], int]:
    total = await session.scalar(select(func.count(NGOProfiles.id)))
    rows = await session.execute(
        select(NGOProfiles, event_count_subquery().label("event_count"))
        .options(selectinload(NGOProfiles.user))
        .order_by(NGOProfiles.name, NGOProfiles.id)
        .limit(limit)
        .offset(offset)
    )
    return [
        NGOSummary.model_validate(ngo_summary(profile, count))
        for profile, count in rows.all()
    ], total


async def get_ngo(session: AsyncSession, profile_id: int) -> NGOProfiles:
    profile = await session.scalar(
        select(NGOProfiles)
        .where(NGOProfiles.id == profile_id)
        .options(selectinload(NGOProfiles.user))
        .execution_options(populate_existing=True)
    )
    if profile is None:
        raise NotFoundError("NGO not found.")
    return profile


async def ngo_details(session: AsyncSession, profile_id: int) -> NGODetails:
    profile = await get_ngo(session, profile_id)
    rows = await session.execute(
        events_with_counts()
        .where(Events.ngo_id == profile.id)
        .order_by(Events.created_at.desc(), Events.id.desc())
    )
    events = [event_response(event, approved) for event, approved in rows.all()]
    data = ngo_summary(profile, len(events))
    data["events"] = events
    return NGODetails.model_validate(data)


async def delete_ngo(session: AsyncSession, profile_id: int) -> DeleteResult:
    profile = await get_ngo(session, profile_id)
    owner = profile.user
    logo = profile.logo
    event_ids = select(Events.id).where(Events.ngo_id == profile.id)

    # A responder stays while any decision outside its own events points at it
    referenced = await session.scalar(
        select(func.count(VolunteerApplications.id)).where(
            VolunteerApplications.responded_by_id == owner.id,
            VolunteerApplications.event_id.not_in(event_ids),
        )
    )
    if referenced:
        raise ConflictError(
            "This NGO account is still recorded as the responder on other "
            "applications.",
            error_code="RESPONDER_REFERENCED",
        )

    applications = await session.execute(
        delete(VolunteerApplications)
        .where(VolunteerApplications.event_id.in_(event_ids))
        .execution_options(synchronize_session=False)
    )
    events = await session.execute(
        delete(Events)
        .where(Events.ngo_id == profile.id)
        .execution_options(synchronize_session=False)
    )
    await session.delete(profile)
    await session.flush()
    await session.delete(owner)
    await session.commit()

    if logo:
        logo.delete()

    logger.info(
        "Deleted NGO %s (user %s): %s events, %s applications",
        profile_id,
        owner.id,
        events.rowcount,
        applications.rowcount,
    )
    return DeleteResult(
        message="NGO deleted successfully!",
        deleted={
            "applications": applications.rowcount,
            "events": events.rowcount,
            "ngo_profiles": 1,
            "users": 1,
        },
    )
