import re

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.validations.exceptions import FieldValidationError


async def validate_relations(session: AsyncSession, validation: dict[str, tuple]):
    errors = {}
    for key, (schema, value) in validation.items():
        if value is None:
            continue
        if not await session.scalar(select(exists().where(schema.id == value))):
            errors[key] = f"invalid {key}"
    if errors:
        raise FieldValidationError(**errors)
    return True


def password_policy_errors(password: str) -> list[str]:
    """Return the password policy rules the given password breaks."""
    problems = []
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        problems.append(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long."
        )
    if settings.PASSWORD_REQUIRE_DIGIT and not re.search(r"\d", password):
        problems.append("Password must contain at least one digit.")
    if settings.PASSWORD_REQUIRE_LOWERCASE and not re.search(r"[a-z]", password):
        problems.append("Password must contain at least one lowercase letter.")
    if settings.PASSWORD_REQUIRE_UPPERCASE and not re.search(r"[A-Z]", password):
        problems.append("Password must contain at least one uppercase letter.")
    if settings.PASSWORD_REQUIRE_NON_ALPHANUMERIC and not re.search(
        r"[^a-zA-Z0-9]", password
    ):
        problems.append("Password must contain at least one symbol.")
    return problems
