import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import HTMLResponse
from starlette import status
from sqlalchemy.exc import StatementError

from app.api.router import api_router
from app.config import settings
from app.db.core import AsyncSessionLocal
from app.db.seed import seed_initial_data
from app.response import ErrorResponse, CustomHTTPException
from app.core.utils.discord import notify_error
from app.core.middlewares.authentication_guard import AuthenticationGuardMiddleware
from app.core.middlewares.request_context_middleware import RequestContextMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.SEED_SUPERUSER_EMAIL:
        async with AsyncSessionLocal() as session:
            await seed_initial_data(session)
    yield


application = FastAPI(
    default_response_class=ORJSONResponse,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

application.include_router(router=api_router)

if settings.STORAGE_BACKEND == "local":
    application.mount(
        settings.MEDIA_URL.rstrip("/"),
        StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False),
        name="media",
    )

# Added innermost first: CORS wraps the request context, which wraps the guard.
application.add_middleware(AuthenticationGuardMiddleware)
application.add_middleware(RequestContextMiddleware)
application.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@application.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    track_id = getattr(request.state, "request_id", None)
    logger.exception(
        "Unhandled error on %s %s (track id %s)",
        request.method,
        request.url.path,
        track_id,
    )
    try:
        await notify_error(request, exc, track_id)
    except Exception:
        logger.exception("Error while sending error notification")
    return ErrorResponse(
        message="Internal Server Error",
        errors={"error": "An error occurred while processing the request"},
        track_id=track_id,
    ).get_response(status.HTTP_500_INTERNAL_SERVER_ERROR)


@application.exception_handler(StatementError)
async def statement_error_handler(request: Request, exc: StatementError):
    if isinstance(exc.orig, CustomHTTPException):
        return await http_exception_handler(request, exc.orig)
    raise exc


@application.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    errors = {}

    for error in exc.errors():
        current = errors

        if len(error["loc"]) <= 1:
            current[error["loc"][0]] = error["msg"]
            continue

        keys = error["loc"][1:]
        for loc in keys[:-1]:
            current = current.setdefault(loc, {})
        current[keys[-1]] = error["msg"]

    return ErrorResponse(
        message="Invalid request",
        errors=errors,
        track_id=getattr(request.state, "request_id", None),
    ).get_response(status.HTTP_422_UNPROCESSABLE_ENTITY)


@application.exception_handler(CustomHTTPException)
async def http_exception_handler(request: Request, exc: CustomHTTPException):
    if exc.track_id is None:
        exc.track_id = getattr(request.state, "request_id", None)
    return exc.get_response(exc.status_code, headers=exc.headers)


@application.head("/ping")
async def ping():
    return HTMLResponse(content=None, status_code=status.HTTP_204_NO_CONTENT)
