from dataclasses import dataclass

from src.domain.user import UserEntity


@dataclass(frozen=True)
class RegisterInput:
    email: str
    password: str
    first_name: str
    last_name: str
    role: str | None = None


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str


@dataclass(frozen=True)
class AuthOutput:
    """Tokens issued on register or login, plus the authenticated user."""

    user: UserEntity
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
