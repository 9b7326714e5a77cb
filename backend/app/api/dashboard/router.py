from fastapi import APIRouter

from app.api.dashboard import service
from app.api.dashboard.schemas import (
    EventDashboard,
    SuperuserDashboard,
    VolunteerDashboard,
)
from app.core.auth.dependencies import NGOAuth, SuperuserAuth, VolunteerAuth
from app.core.auth.policy import Actor
from app.db.core import SessionDep

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/superuser", summary="System overview")
async def superuser_dashboard(
    session: SessionDep, user: SuperuserAuth
) -> SuperuserDashboard:
    return await service.superuser_dashboard(session)


@router.get("/volunteer", summary="Own applications and upcoming approved events")
async def volunteer_dashboard(
    session: SessionDep, user: VolunteerAuth
) -> VolunteerDashboard:
    return await service.volunteer_dashboard(session, user.id)


@router.get("/events/{event_id}", summary="Event overview with its applications")
async def event_dashboard(
    event_id: int, session: SessionDep, user: NGOAuth
) -> EventDashboard:
    return await service.event_dashboard(session, Actor.from_user(user), event_id)
