from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

ALGORITHM = "HS256"


def create_access_token(user_id: str, signing_key: str, ttl: timedelta = timedelta(minutes=15)) -> str:
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": user_id,
        "type": "access",
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, signing_key, algorithm=ALGORITHM)


def decode_access_token(token: str, signing_key: str) -> dict[str, Any]:
    return jwt.decode(token, signing_key, algorithms=[ALGORITHM], options={"require": ["sub", "exp"]})


def resolve_user_id(token: str, signing_key: str) -> str:
    """Return the ``sub`` claim of a valid access token, or raise ``ValueError``."""
    if not signing_key:
        raise ValueError("auth signing key is not configured")
    try:
        payload = decode_access_token(token, signing_key)
    except jwt.PyJWTError as exc:
        raise ValueError(str(exc)) from exc
    if payload.get("type", "access") != "access":
        raise ValueError("invalid token type")
    user_id = str(payload.get("sub") or "").strip()
    if not user_id:
        raise ValueError("token has no subject")
    return user_id
