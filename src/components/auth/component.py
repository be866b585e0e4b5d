"""
Auth component - registration, login and token identity.

Login failures never say which check failed: unknown email, inactive
account and wrong password all raise the same AuthenticationError.
"""

from __future__ import annotations

import logging
from typing import Any

from src.domain.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from src.domain.user import UserEntity
from src.domain.value_objects import UserRole

from .models import AuthOutput, LoginInput, RegisterInput
from .ports import AuthPort, ClockPort, UserRepoPort

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8


def token_claims(user: UserEntity) -> dict[str, Any]:
    return {"sub": user.id, "email": user.email, "role": user.role.value}


def _issue_tokens(user: UserEntity, auth: AuthPort) -> AuthOutput:
    claims = token_claims(user)
    return AuthOutput(
        user=user,
        access_token=auth.create_access_token(claims),
        refresh_token=auth.create_refresh_token(claims),
    )


def _may_grant(actor: UserEntity | None, user_repo: UserRepoPort) -> bool:
    if actor is not None:
        return actor.can_perform_admin_actions()
    return user_repo.count() == 0


def run_register(
    inp: RegisterInput,
    user_repo: UserRepoPort,
    auth: AuthPort,
    clock: ClockPort,
    password_min_length: int = PASSWORD_MIN_LENGTH,
    actor: UserEntity | None = None,
) -> AuthOutput:
    """
    Create an account and issue tokens.

    Self-registration yields an AUTHOR. Other roles need an admin `actor`,
    except for the very first account, which bootstraps the desk.
    """
    if user_repo.exists_by_email(inp.email):
        raise ConflictError(f"User with email {inp.email.strip().lower()} already exists")
    if len(inp.password or "") < password_min_length:
        raise ValidationError(f"Password must be at least {password_min_length} characters")

    role = UserRole.from_string(inp.role) if inp.role else UserRole.AUTHOR
    if role is not UserRole.AUTHOR and not _may_grant(actor, user_repo):
        raise PermissionDeniedError(f"Only admins can register {role.value} accounts")

    user = UserEntity.create(
        email=inp.email,
        password_hash=auth.hash_password(inp.password),
        first_name=inp.first_name,
        last_name=inp.last_name,
        role=role,
        now=clock.now(),
    )
    user_repo.save(user)
    logger.info("User registered: %s (%s)", user.email, user.role.value)
    return _issue_tokens(user, auth)


def run_login(
    inp: LoginInput, user_repo: UserRepoPort, auth: AuthPort, clock: ClockPort
) -> AuthOutput:
    user = user_repo.find_by_email(inp.email)
    if not user or not user.is_active:
        raise AuthenticationError("Invalid credentials")

    if not auth.verify_password(inp.password, user.password_hash):
        logger.warning("Failed login for %s", user.email)
        raise AuthenticationError("Invalid credentials")

    user.record_login(now=clock.now())
    user_repo.save(user)
    return _issue_tokens(user, auth)


def run_get_current_user(user_id: str, user_repo: UserRepoPort) -> UserEntity:
    user = user_repo.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def run_authenticate_token(token: str, user_repo: UserRepoPort, auth: AuthPort) -> UserEntity:
    """Resolve a bearer token to an active user."""
    payload = auth.decode_access_token(token)
    if not payload:
        raise AuthenticationError("Invalid token")

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise AuthenticationError("Invalid token payload")

    user = user_repo.find_by_id(user_id)
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    return user
