from fastapi import APIRouter, Query, Request

from app.api.applications import service
from app.api.applications.lifecycle import ApplicationAction
from app.api.applications.schemas import (
    ApplicationCreate,
    ApplicationDecision,
    ApplicationPublic,
    EventApplications,
    ManagedApplications,
    TransitionResult,
)
from app.core.auth.dependencies import DependsAuth, NGOAuth, VolunteerAuth
from app.core.auth.policy import Actor
from app.core.response.pagination import (
    PaginatedResponse,
    PaginationParams,
    paginated_response,
)
from app.db.core import SessionDep

router = APIRouter(prefix="/applications")


@router.post("/apply", status_code=201, summary="Apply to volunteer for an event")
async def apply(
    data: ApplicationCreate,
    session: SessionDep,
    user: VolunteerAuth,
    event_id: int = Query(...),
) -> TransitionResult:
    return await service.apply(session, Actor.from_user(user), event_id, data)


@router.get("/mine", summary="Applications of the signed-in user")
async def my_applications(
    request: Request,
    session: SessionDep,
    pagination: PaginationParams,
    user: DependsAuth,
) -> PaginatedResponse[ApplicationPublic]:
    items, total = await service.my_applications(
        session, user.id, limit=pagination.limit, offset=pagination.offset
    )
    return paginated_response(items, request, schema=ApplicationPublic, total=total)


@router.get("/info/{application_id}", summary="Application details")
async def application_info(
    application_id: int, session: SessionDep, user: DependsAuth
) -> ApplicationPublic:
    return await service.application_details(
        session, Actor.from_user(user), application_id
    )


@router.get("/manage/{event_id}", summary="Applications for one event")
async def manage_event_applications(
    event_id: int, session: SessionDep, user: NGOAuth
) -> EventApplications:
    return await service.event_applications(session, Actor.from_user(user), event_id)


@router.get("/manage-all", summary="All applications across the NGO's events")
async def manage_all_applications(
    session: SessionDep, user: NGOAuth
) -> ManagedApplications:
    return await service.managed_applications(session, Actor.from_user(user))


@router.post("/approve/{application_id}", summary="Approve a pending application")
async def approve(
    application_id: int,
    session: SessionDep,
    user: NGOAuth,
    data: ApplicationDecision | None = None,
) -> TransitionResult:
    return await service.decide(
        session,
        Actor.from_user(user),
        application_id,
        ApplicationAction.approve,
        data.response_message if data else None,
    )


@router.post("/reject/{application_id}", summary="Reject a pending application")
async def reject(
    application_id: int,
    session: SessionDep,
    user: NGOAuth,
    data: ApplicationDecision | None = None,
) -> TransitionResult:
    return await service.decide(
        session,
        Actor.from_user(user),
        application_id,
        ApplicationAction.reject,
        data.response_message if data else None,
    )


@router.post("/cancel/{application_id}", summary="Cancel own pending application")
async def cancel(
    application_id: int, session: SessionDep, user: DependsAuth
) -> TransitionResult:
    return await service.cancel(session, Actor.from_user(user), application_id)
