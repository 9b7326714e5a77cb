from passlib.context import CryptContext
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.users.models import Users

ALGORITHM = "HS256"


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/account/login", auto_error=False)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


async def get_user(session: AsyncSession, email_or_id: str | int):
    query = (
        select(Users)
        .options(selectinload(Users.ngo_profile))
        .execution_options(populate_existing=True)
    )
    if isinstance(email_or_id, int):
        query = query.where(Users.id == email_or_id)
    else:
        query = query.where(func.lower(Users.email) == email_or_id.strip().lower())
    return await session.scalar(query)


async def authenticate_user(session: AsyncSession, email: str, password: str):
    user = await get_user(session, email)
    if not user or not user.is_active:
        return False
    if not verify_password(password, user.password):
        return False
    return user
