from typing import Any, Protocol


class AuthPort(Protocol):
    def hash_password(self, password: str) -> str: ...

    def verify_password(self, plain: str, hashed: str) -> bool: ...

    def create_access_token(self, claims: dict[str, Any]) -> str: ...

    def create_refresh_token(self, claims: dict[str, Any]) -> str: ...

    def decode_access_token(self, token: str) -> dict[str, Any] | None:
        """Return the claims, or None if the token is invalid or expired."""
        ...
