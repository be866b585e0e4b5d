from datetime import timedelta
from typing import Any

from src.api.auth_utils import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


class JWTAuthAdapter:
    """Auth adapter that uses JWT tokens and passlib (argon2) for password hashing."""

    def __init__(self, access_ttl_minutes: int = 60, refresh_ttl_minutes: int = 60 * 24 * 7):
        self.access_ttl = timedelta(minutes=access_ttl_minutes)
        self.refresh_ttl = timedelta(minutes=refresh_ttl_minutes)

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)

    def create_access_token(self, claims: dict[str, Any]) -> str:
        return create_access_token(claims, expires_delta=self.access_ttl)

    def create_refresh_token(self, claims: dict[str, Any]) -> str:
        return create_refresh_token(claims, expires_delta=self.refresh_ttl)

    def decode_access_token(self, token: str) -> dict[str, Any] | None:
        return decode_access_token(token)
