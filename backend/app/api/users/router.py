from typing import Annotated

from fastapi import APIRouter, Depends, Response
from fastapi.security import OAuth2PasswordRequestForm

from app.api.users import service
from app.api.users.schemas import (
    AuthResponse,
    LogoutResponse,
    RefreshRequest,
    Token,
    UserProfileUpdate,
    UserPublic,
    UserRegister,
)
from app.config import settings
from app.core.auth.dependencies import DependsAuth
from app.db.core import SessionDep

router = APIRouter(prefix="/account")


def set_session_cookie(response: Response, token: Token):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
    )


@router.post("/register", summary="Register a volunteer or NGO account")
async def register(
    data: UserRegister, session: SessionDep, response: Response
) -> AuthResponse:
    user = await service.register_user(session, data)
    token = service.create_access_refresh_tokens(user)
    set_session_cookie(response, token)
    return AuthResponse(
        user=UserPublic.model_validate(user),
        token=token,
        redirect_to=service.landing_page(user),
    )


@router.post("/login", summary="Sign in with email and password")
async def login(
    session: SessionDep,
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
) -> AuthResponse:
    user = await service.login_user(session, form_data.username, form_data.password)
    token = service.create_access_refresh_tokens(user)
    set_session_cookie(response, token)
    return AuthResponse(
        user=UserPublic.model_validate(user),
        token=token,
        redirect_to=service.landing_page(user),
    )


@router.post("/refresh", summary="Exchange a refresh token for a new access token")
async def refresh(data: RefreshRequest, session: SessionDep) -> Token:
    return await service.refresh_tokens(session, data.refresh_token)


@router.post("/logout", summary="Clear the session cookie")
async def logout(user: DependsAuth, response: Response) -> LogoutResponse:
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return LogoutResponse(message="You have been logged out successfully.")


@router.get("/me", summary="Get the signed-in account")
async def me(user: DependsAuth) -> UserPublic:
    return user


@router.post("/profile", summary="Edit own name and phone")
async def edit_profile(
    data: UserProfileUpdate, session: SessionDep, user: DependsAuth
) -> UserPublic:
    return await service.update_profile(session, user, data)
