from datetime import datetime, timedelta, timezone

import jwt

from app.config import settings
from app.core.auth.authentication import ALGORITHM

ACCESS_TOKEN = "access_token"
REFRESH_TOKEN = "refresh_token"


def create_token(user_id: int, token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "user_id": user_id,
        "token_type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_jwt_token(token: str, expected_type: str | None = None) -> dict:
    """Decode and verify a token; raises ``jwt.InvalidTokenError`` on any problem."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    if expected_type and payload.get("token_type") != expected_type:
        raise jwt.InvalidTokenError(f"Expected a {expected_type}")
    return payload
