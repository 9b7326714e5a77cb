from fastapi import APIRouter, Request

from app.api.events import service
from app.api.events.schemas import EventCreate, EventPublic, EventPublicMin, EventUpdate
from app.core.auth.dependencies import NGOAuth, OptionalAuth, VolunteerAuth
from app.core.auth.policy import Actor
from app.core.response.pagination import (
    PaginatedResponse,
    PaginationParams,
    paginated_response,
)
from app.db.core import SessionDep

router = APIRouter(prefix="/events")


@router.get("", summary="List events visible to the caller")
async def list_events(
    request: Request,
    session: SessionDep,
    pagination: PaginationParams,
    user: OptionalAuth,
) -> PaginatedResponse[EventPublicMin]:
    actor = Actor.from_user(user) if user else None
    events, total = await service.list_events(
        session, actor, limit=pagination.limit, offset=pagination.offset
    )
    return paginated_response(events, request, schema=EventPublicMin, total=total)


@router.get("/browse", summary="Browse public events")
async def browse_events(
    request: Request,
    session: SessionDep,
    pagination: PaginationParams,
    user: VolunteerAuth,
) -> PaginatedResponse[EventPublicMin]:
    events, total = await service.list_events(
        session,
        Actor.from_user(user),
        limit=pagination.limit,
        offset=pagination.offset,
        public_only=True,
    )
    return paginated_response(events, request, schema=EventPublicMin, total=total)


@router.get("/info/{event_id}", summary="Event details")
async def event_info(
    event_id: int, session: SessionDep, user: OptionalAuth
) -> EventPublic:
    actor = Actor.from_user(user) if user else None
    return await service.event_details(session, actor, event_id)


@router.post("/create", summary="Create an event")
async def create_event(
    data: EventCreate, session: SessionDep, user: NGOAuth
) -> EventPublic:
    return await service.create_event(session, Actor.from_user(user), data)


@router.post("/edit/{event_id}", summary="Edit an event")
async def edit_event(
    event_id: int, data: EventUpdate, session: SessionDep, user: NGOAuth
) -> EventPublic:
    return await service.update_event(session, Actor.from_user(user), event_id, data)


@router.post("/delete/{event_id}", summary="Deactivate an event")
async def delete_event(
    event_id: int, session: SessionDep, user: NGOAuth
) -> EventPublic:
    return await service.delete_event(session, Actor.from_user(user), event_id)
