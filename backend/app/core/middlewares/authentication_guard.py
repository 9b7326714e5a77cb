import re
from dataclasses import dataclass

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.config import settings
from app.response import ErrorResponse


@dataclass(frozen=True)
class RouteDescriptor:
    method: str
    pattern: str

    def matches(self, method: str, path: str) -> bool:
        if self.method != "*" and self.method != method:
            return False
        return re.fullmatch(self.pattern, path) is not None


API = "/api/v1"

# Every other route requires a token; adding a public route means listing it here.
ANONYMOUS_ROUTES = (
    RouteDescriptor("POST", rf"{API}/account/register"),
    RouteDescriptor("POST", rf"{API}/account/login"),
    RouteDescriptor("POST", rf"{API}/account/refresh"),
    RouteDescriptor("GET", rf"{API}/events"),
    RouteDescriptor("GET", rf"{API}/events/info/\d+"),
    RouteDescriptor("GET", rf"{API}/home/stats"),
    RouteDescriptor("HEAD", r"/ping"),
    RouteDescriptor("GET", r"/docs.*"),
    RouteDescriptor("GET", r"/redoc"),
    RouteDescriptor("GET", r"/openapi\.json"),
    RouteDescriptor("GET", r"/media/.+"),
    RouteDescriptor("OPTIONS", r".*"),
)


def is_anonymous_allowed(method: str, path: str, routes=ANONYMOUS_ROUTES) -> bool:
    return any(route.matches(method, path) for route in routes)


def has_credentials(request: Request) -> bool:
    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer ") and authorization[7:].strip():
        return True
    return bool(request.cookies.get(settings.SESSION_COOKIE_NAME))


class AuthenticationGuardMiddleware(BaseHTTPMiddleware):
    """
    Rejects requests without credentials unless the route is on the anonymous
    allow-list. Token validity and roles are checked later by the route's
    dependencies.
    """

    def __init__(self, app: ASGIApp, routes=ANONYMOUS_ROUTES):
        super().__init__(app)
        self.routes = routes

    async def dispatch(self, request: Request, call_next):
        if has_credentials(request) or is_anonymous_allowed(
            request.method, request.url.path, self.routes
        ):
            return await call_next(request)

        return ErrorResponse(
            message="Authentication required",
            error_code="NOT_AUTHENTICATED",
            track_id=getattr(request.state, "request_id", None),
        ).get_response(
            status.HTTP_401_UNAUTHORIZED, headers={"WWW-Authenticate": "Bearer"}
        )
