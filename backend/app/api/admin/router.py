from fastapi import APIRouter, Request

from app.api.admin import service
from app.api.admin.schemas import (
    DeleteResult,
    NGODetails,
    NGOSummary,
    VolunteerDetails,
    VolunteerSummary,
)
from app.core.auth.dependencies import SuperuserAuth
from app.core.response.pagination import (
    PaginatedResponse,
    PaginationParams,
    paginated_response,
)
from app.db.core import SessionDep

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/volunteers", summary="List volunteers with application counts")
async def list_volunteers(
    request: Request,
    session: SessionDep,
    pagination: PaginationParams,
    user: SuperuserAuth,
) -> PaginatedResponse[VolunteerSummary]:
    items, total = await service.list_volunteers(
        session, limit=pagination.limit, offset=pagination.offset
    )
    return paginated_response(items, request, schema=VolunteerSummary, total=total)


@router.get("/volunteers/{user_id}", summary="Volunteer details and applications")
async def volunteer_details(
    user_id: int, session: SessionDep, user: SuperuserAuth
) -> VolunteerDetails:
    return await service.volunteer_details(session, user_id)


@router.post("/volunteers/delete/{user_id}", summary="Delete a volunteer account")
async def delete_volunteer(
    user_id: int, session: SessionDep, user: SuperuserAuth
) -> DeleteResult:
    return await service.delete_volunteer(session, user_id)


@router.get("/ngos", summary="List NGOs with event counts")
async def list_ngos(
    request: Request,
    session: SessionDep,
    pagination: PaginationParams,
    user: SuperuserAuth,
) -> PaginatedResponse[NGOSummary]:
    items, total = await service.list_ngos(
        session, limit=pagination.limit, offset=pagination.offset
    )
    return paginated_response(items, request, schema=NGOSummary, total=total)


@router.get("/ngos/{profile_id}", summary="NGO details and events")
async def ngo_details(
    profile_id: int, session: SessionDep, user: SuperuserAuth
) -> NGODetails:
    return await service.ngo_details(session, profile_id)


@router.post("/ngos/delete/{profile_id}", summary="Delete an NGO and everything it owns")
async def delete_ngo(
    profile_id: int, session: SessionDep, user: SuperuserAuth
) -> DeleteResult:
    return await service.delete_ngo(session, profile_id)
