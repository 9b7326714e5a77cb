from fastapi import APIRouter
from app.api.users.router import router as account_router
from app.api.ngos.router import router as ngos_router
from app.api.events.router import router as events_router
from app.api.applications.router import router as applications_router
from app.api.admin.router import router as admin_router
from app.api.dashboard.router import router as dashboard_router
from app.api.home.router import router as home_router

api_router = APIRouter(
    prefix="/api/v1",
    responses={404: {"description": "Not found"}},
)

api_router.include_router(router=account_router, tags=["account"])
api_router.include_router(router=ngos_router, tags=["ngos"])
api_router.include_router(router=events_router, tags=["events"])
api_router.include_router(router=applications_router, tags=["applications"])
api_router.include_router(router=admin_router)
api_router.include_router(router=dashboard_router)
api_router.include_router(router=home_router)
