import logging
from typing import Annotated, List, Optional, Union

import jwt
from fastapi import Depends, Request, status

from app.api.users.models import UserRoles, Users
from app.config import settings
from app.core.auth.authentication import get_user, oauth2_scheme
from app.core.auth.jwt import ACCESS_TOKEN, decode_jwt_token
from app.db.core import SessionDep
from app.response import CustomHTTPException

logger = logging.getLogger(__name__)


def _credentials_exception(message="Could not validate credentials", error_code=None):
    return CustomHTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        message=message,
        error_code=error_code,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_request_token(request: Request, bearer: Optional[str]) -> Optional[str]:
    """Bearer header first, then the session cookie set at login."""
    return bearer or request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_current_user(
    request: Request,
    session: SessionDep,
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
) -> Optional[Users]:
    token = get_request_token(request, token)
    if not token:
        return None
    try:
        payload = decode_jwt_token(token, expected_type=ACCESS_TOKEN)
        user_id = payload.get("user_id")
        if not user_id:
            raise _credentials_exception()
    except jwt.ExpiredSignatureError:
        raise _credentials_exception("Token has expired", error_code="TOKEN_EXPIRED")
    except jwt.InvalidTokenError:
        raise _credentials_exception()
    user = await get_user(session, int(user_id))
    if user is None or not user.is_active:
        raise _credentials_exception()
    request.state.user_id = user.id
    return user


def check_user_role(required_roles: Union[UserRoles, List[UserRoles]], optional=False):
    """
    Creates a dependency that checks if the current user has one of the roles.

    Args:
        required_roles: Single role or list of roles that are allowed
        optional: Let anonymous requests through with ``None`` as the user

    Returns:
        Dependency function that validates user roles
    """
    if isinstance(required_roles, UserRoles):
        required_roles = [required_roles]

    async def role_checker(
        current_user: Annotated[Optional[Users], Depends(get_current_user)],
    ) -> Optional[Users]:
        if not current_user:
            if optional:
                return None
            raise _credentials_exception()
        if current_user.role not in required_roles:
            logger.info(
                "User %s with role %s denied, needs one of %s",
                current_user.id,
                current_user.role.value,
                [role.value for role in required_roles],
            )
            raise CustomHTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                message="Not Authorized",
                error_code="INSUFFICIENT_PERMISSIONS",
            )
        return current_user

    return role_checker


ALL_ROLES = [UserRoles.volunteer, UserRoles.ngo, UserRoles.superuser]

DependsAuth = Annotated[Users, Depends(check_user_role(ALL_ROLES))]
OptionalAuth = Annotated[
    Optional[Users], Depends(check_user_role(ALL_ROLES, optional=True))
]
VolunteerAuth = Annotated[Users, Depends(check_user_role(UserRoles.volunteer))]
NGOAuth = Annotated[
    Users, Depends(check_user_role([UserRoles.ngo, UserRoles.superuser]))
]
SuperuserAuth = Annotated[Users, Depends(check_user_role(UserRoles.superuser))]
