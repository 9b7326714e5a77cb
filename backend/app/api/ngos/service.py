import logging
from datetime import datetime, timezone

from fastapi import UploadFile
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.events.models import Events
from app.api.ngos.models import NGOProfiles
from app.api.ngos.schemas import NGOProfileForm
from app.api.users.models import Users
from app.core.auth.policy import Actor, can_manage_ngo_profile
from app.core.validations.exceptions import FieldValidationError
from app.response import ConflictError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

NGO_NOT_FOUND = "NGO profile not found."


async def store_logo(upload: UploadFile | None) -> str | None:
    """Validate and store an uploaded logo, returning its storage key."""
    if upload is None:
        return None
    data = await upload.read()
    if not data:
        return None
    try:
        return NGOProfiles.logo.type.store(data)
    except ValueError as e:
        raise FieldValidationError(logo=str(e))


async def get_profile(session: AsyncSession, profile_id: int) -> NGOProfiles:
    profile = await session.get(NGOProfiles, profile_id, populate_existing=True)
    if profile is None:
        raise NotFoundError(NGO_NOT_FOUND)
    return profile


async def create_profile(
    session: AsyncSession, user: Users, form: NGOProfileForm
) -> NGOProfiles:
    existing = await session.scalar(
        select(NGOProfiles.id).where(NGOProfiles.user_id == user.id)
    )
    if existing:
        raise ConflictError("You already have an NGO profile.")

    profile = NGOProfiles(user_id=user.id, **form.values())
    profile.logo = await store_logo(form.logo)
    session.add(profile)
    await session.commit()
    logger.info("User %s created NGO profile %s", user.id, profile.id)
    return await get_profile(session, profile.id)


async def view_profile(
    session: AsyncSession, actor: Actor, profile_id: int
) -> NGOProfiles:
    profile = await get_profile(session, profile_id)
    # Profiles the actor may not manage are reported as missing
    if not can_manage_ngo_profile(actor, profile.user_id):
        raise NotFoundError(NGO_NOT_FOUND)
    return profile


async def update_profile(
    session: AsyncSession, actor: Actor, profile_id: int, form: NGOProfileForm
) -> NGOProfiles:
    profile = await get_profile(session, profile_id)
    if not can_manage_ngo_profile(actor, profile.user_id):
        raise ForbiddenError()

    for key, value in form.values().items():
        setattr(profile, key, value)

    old_logo = None
    new_logo = await store_logo(form.logo)
    if new_logo:
        old_logo = profile.logo
        profile.logo = new_logo

    await session.commit()
    if old_logo:
        old_logo.delete()
    return await get_profile(session, profile.id)


async def deactivate_profile(session: AsyncSession, profile_id: int) -> NGOProfiles:
    """Soft-delete a profile and hide every event it published."""
    profile = await get_profile(session, profile_id)
    profile.soft_delete()
    await session.execute(
        update(Events)
        .where(Events.ngo_id == profile.id, Events.active())
        .values(
            is_active=False,
            deactivated_at=datetime.now(timezone.utc),
            version_id=Events.version_id + 1,
        )
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    logger.info("NGO profile %s deactivated", profile.id)
    return profile
