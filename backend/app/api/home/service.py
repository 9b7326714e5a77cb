from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.events.models import Events
from app.api.home.schemas import HomeStats
from app.api.ngos.models import NGOProfiles
from app.api.users.models import UserRoles, Users


async def landing_stats(session: AsyncSession) -> HomeStats:
    """Public counters shown on the landing page."""
    total_events = await session.scalar(
        select(func.count(Events.id)).where(
            Events.active(), Events.is_public.is_(True)
        )
    )
    total_ngos = await session.scalar(
        select(func.count(NGOProfiles.id)).where(NGOProfiles.active())
    )
    total_volunteers = await session.scalar(
        select(func.count(Users.id)).where(
            Users.active(), Users.role == UserRoles.volunteer
        )
    )
    return HomeStats(
        total_events=total_events,
        total_ngos=total_ngos,
        total_volunteers=total_volunteers,
    )
