from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.ngos import service
from app.api.ngos.schemas import NGOProfileForm, NGOProfilePublic
from app.core.auth.dependencies import DependsAuth, NGOAuth, SuperuserAuth
from app.core.auth.policy import Actor
from app.db.core import SessionDep

router = APIRouter(prefix="/ngos")

ProfileForm = Annotated[NGOProfileForm, Depends()]


@router.post("/create", summary="Create the signed-in NGO's profile")
async def create_profile(
    session: SessionDep, user: NGOAuth, form: ProfileForm
) -> NGOProfilePublic:
    return await service.create_profile(session, user, form)


@router.get("/info/{profile_id}", summary="NGO profile details")
async def profile_info(
    profile_id: int, session: SessionDep, user: DependsAuth
) -> NGOProfilePublic:
    return await service.view_profile(session, Actor.from_user(user), profile_id)


@router.post("/edit/{profile_id}", summary="Edit an NGO profile")
async def edit_profile(
    profile_id: int, session: SessionDep, user: NGOAuth, form: ProfileForm
) -> NGOProfilePublic:
    return await service.update_profile(
        session, Actor.from_user(user), profile_id, form
    )


@router.post("/delete/{profile_id}", summary="Deactivate an NGO profile")
async def delete_profile(
    profile_id: int, session: SessionDep, user: SuperuserAuth
) -> NGOProfilePublic:
    return await service.deactivate_profile(session, profile_id)
