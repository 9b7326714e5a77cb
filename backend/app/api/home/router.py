from fastapi import APIRouter

from app.api.home.schemas import HomeStats
from app.db.core import SessionDep
from . import service

router = APIRouter(prefix="/home", tags=["home"])


@router.get("/stats", summary="Landing page counters")
async def get_stats(session: SessionDep) -> HomeStats:
    return await service.landing_stats(session)
