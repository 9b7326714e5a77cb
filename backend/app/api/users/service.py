import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import status
from sqlalchemy import exists, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.ngos.models import NGOProfiles
from app.api.users.models import SELF_REGISTER_ROLES, UserRoles, Users
from app.api.users.schemas import Token, UserProfileUpdate, UserRegister
from app.config import settings
from app.core.auth.authentication import authenticate_user, get_password_hash, get_user
from app.core.auth.jwt import ACCESS_TOKEN, REFRESH_TOKEN, create_token, decode_jwt_token
from app.core.validations.exceptions import FieldValidationError
from app.core.validations.schema import password_policy_errors
from app.response import CustomHTTPException

logger = logging.getLogger(__name__)

ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS


def create_access_refresh_tokens(user: Users) -> Token:
    access_token = create_token(
        user.id, ACCESS_TOKEN, timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    refresh_token = create_token(
        user.id, REFRESH_TOKEN, timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    )
    return Token(
        access_token=access_token, refresh_token=refresh_token, token_type="Bearer"
    )


def landing_page(user: Users) -> str:
    """Where a client should send the user after signing in."""
    if user.role is UserRoles.ngo:
        return "/dashboard"
    return "/events"


async def email_taken(session: AsyncSession, email: str) -> bool:
    return await session.scalar(
        select(exists().where(func.lower(Users.email) == email.strip().lower()))
    )


async def register_user(session: AsyncSession, data: UserRegister) -> Users:
    """
    Create an account and, for NGOs, its organization profile.

    Every check runs before anything is written, and both rows are committed
    together, so a rejected registration never leaves an account behind.
    """
    errors = {}
    role = next((r for r in SELF_REGISTER_ROLES if r.value == data.role), None)
    if role is None:
        errors["role"] = "Please select a valid role."

    problems = password_policy_errors(data.password)
    if problems:
        errors["password"] = " ".join(problems)

    if role is UserRoles.ngo and not (data.organization_name or "").strip():
        errors["organization_name"] = (
            "Organization name is required for NGO registration."
        )

    if await email_taken(session, data.email):
        errors["email"] = "An account with this email already exists."

    if errors:
        raise FieldValidationError(**errors)

    user = Users(
        email=data.email.strip().lower(),
        full_name=data.full_name.strip(),
        phone=data.phone,
        password=get_password_hash(data.password),
        role=role,
    )
    session.add(user)

    if role is UserRoles.ngo:
        user.ngo_profile = NGOProfiles(
            name=data.organization_name.strip(),
            mission=data.organization_mission or "",
            contact_email=data.organization_contact_email or user.email,
            contact_phone=data.organization_contact_phone,
            address=data.organization_address,
            description=data.organization_description,
        )

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise FieldValidationError(email="An account with this email already exists.")

    logger.info("Registered %s account %s", role.value, user.id)
    return await get_user(session, user.id)


async def login_user(session: AsyncSession, email: str, password: str) -> Users:
    user = await authenticate_user(session, email, password)
    if not user:
        logger.info("Failed login for %s", email)
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="Invalid login attempt.",
            error_code="INVALID_CREDENTIALS",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user.last_login_at = datetime.now(timezone.utc)
    await session.commit()
    return user


async def refresh_tokens(session: AsyncSession, refresh_token: str) -> Token:
    try:
        payload = decode_jwt_token(refresh_token, expected_type=REFRESH_TOKEN)
    except jwt.ExpiredSignatureError:
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="Token has expired",
            error_code="TOKEN_EXPIRED",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError:
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await get_user(session, int(payload["user_id"]))
    if not user or not user.is_active:
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_token(
        user.id, ACCESS_TOKEN, timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return Token(
        access_token=access_token, refresh_token=refresh_token, token_type="Bearer"
    )


async def update_profile(
    session: AsyncSession, user: Users, data: UserProfileUpdate
) -> Users:
    user.full_name = data.full_name.strip()
    user.phone = data.phone
    await session.commit()
    return await get_user(session, user.id)
