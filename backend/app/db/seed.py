"""
Initial accounts.

Superusers cannot sign up through the API, so the first one is created here
from settings. Sample NGO and volunteer accounts are only created on request.
Every step is skipped when its account already exists.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.ngos.models import NGOProfiles
from app.api.users.models import UserRoles, Users
from app.config import settings
from app.core.auth.authentication import get_password_hash

logger = logging.getLogger(__name__)

SAMPLE_NGO = {
    "email": "ngo@example.com",
    "password": "Ngo12345!",
    "full_name": "Community Helpers",
    "profile": {
        "name": "Community Helpers Foundation",
        "mission": "To serve the community through volunteer work and social initiatives",
        "contact_phone": "5550123000",
        "address": "123 Community Street, City, State 12345",
        "description": (
            "A non-profit organization dedicated to making a positive impact in "
            "our community through volunteer programs and social initiatives."
        ),
    },
}

SAMPLE_VOLUNTEER = {
    "email": "volunteer@example.com",
    "password": "Volunteer123!",
    "full_name": "John Doe",
}


async def ensure_user(
    session: AsyncSession,
    email: str,
    password: str,
    full_name: str,
    role: UserRoles,
) -> tuple[Users, bool]:
    user = await session.scalar(
        select(Users).where(func.lower(Users.email) == email.lower())
    )
    if user is not None:
        return user, False
    user = Users(
        email=email.lower(),
        full_name=full_name,
        password=get_password_hash(password),
        role=role,
    )
    session.add(user)
    await session.flush()
    logger.info("Seeded %s account %s", role.value, email)
    return user, True


async def seed_initial_data(
    session: AsyncSession,
    superuser_email: str | None = None,
    superuser_password: str | None = None,
    with_samples: bool = False,
) -> dict[str, bool]:
    """Create the missing seed accounts; returns which ones were created."""
    created = {}
    superuser_email = superuser_email or settings.SEED_SUPERUSER_EMAIL
    superuser_password = superuser_password or settings.SEED_SUPERUSER_PASSWORD

    if superuser_email and superuser_password:
        _, created["superuser"] = await ensure_user(
            session,
            superuser_email,
            superuser_password,
            "System Administrator",
            UserRoles.superuser,
        )
    else:
        logger.warning("No superuser credentials configured, skipping superuser seed")

    if with_samples:
        ngo_user, created["ngo"] = await ensure_user(
            session,
            SAMPLE_NGO["email"],
            SAMPLE_NGO["password"],
            SAMPLE_NGO["full_name"],
            UserRoles.ngo,
        )
        if created["ngo"]:
            session.add(
                NGOProfiles(
                    user_id=ngo_user.id,
                    contact_email=ngo_user.email,
                    **SAMPLE_NGO["profile"],
                )
            )
        _, created["volunteer"] = await ensure_user(
            session,
            SAMPLE_VOLUNTEER["email"],
            SAMPLE_VOLUNTEER["password"],
            SAMPLE_VOLUNTEER["full_name"],
            UserRoles.volunteer,
        )

    await session.commit()
    return created
