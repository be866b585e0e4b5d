import os
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt
from passlib.context import CryptContext

SECRET_KEY = os.environ.get("FIN_SECRET_KEY", "dev-secret-unsafe")
REFRESH_SECRET_KEY = os.environ.get("FIN_REFRESH_SECRET_KEY", "dev-refresh-secret-unsafe")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60
REFRESH_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    result: bool = pwd_context.verify(plain_password, hashed_password)
    return result


def get_password_hash(password: str) -> str:
    result: str = pwd_context.hash(password)
    return result


def _encode(
    data: dict[str, Any],
    secret: str,
    expires_delta: timedelta,
    now_utc: datetime | None,
) -> str:
    to_encode = data.copy()
    current_time = now_utc if now_utc is not None else datetime.now(UTC)
    to_encode.update({"exp": current_time + expires_delta})
    encoded_jwt: str = jwt.encode(to_encode, secret, algorithm=ALGORITHM)
    return encoded_jwt


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode in the token
        expires_delta: Optional custom expiration delta
        now_utc: Current UTC time (for testing/determinism). Defaults to datetime.now(UTC).
    """
    delta = expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(data, SECRET_KEY, delta, now_utc)


def create_refresh_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    """Create a long-lived refresh token signed with the refresh secret."""
    delta = expires_delta or timedelta(minutes=REFRESH_TOKEN_EXPIRE_MINUTES)
    return _encode(data, REFRESH_SECRET_KEY, delta, now_utc)


def decode_access_token(token: str) -> dict[str, Any] | None:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return cast(dict[str, Any], payload)
    except JWTError:
        return None
