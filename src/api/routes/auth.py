from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response
from fastapi import status as http_status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.deps import (
    get_api_version,
    get_auth_adapter,
    get_clock,
    get_current_user,
    get_optional_user,
    get_rules,
    get_user_repo,
)
from src.api.schemas import (
    ApiResponse,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
    envelope,
)
from src.components.auth import AuthOutput, LoginInput, RegisterInput, run_login, run_register
from src.domain.user import UserEntity
from src.rules.models import Rules

router = APIRouter()


class Token(BaseModel):
    access_token: str
    token_type: str


def _set_auth_cookie(response: Response, token: str, ttl_minutes: int) -> None:
    response.set_cookie(
        key="access_token",
        value=f"Bearer {token}",
        httponly=True,
        max_age=ttl_minutes * 60,
        expires=ttl_minutes * 60,
        samesite="lax",
        secure=False,  # Set to True for HTTPS prod
    )


def _auth_response(result: AuthOutput) -> AuthResponse:
    return AuthResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        token_type=result.token_type,
        user=UserResponse.from_entity(result.user),
    )


@router.post(
    "/register", response_model=ApiResponse[AuthResponse], status_code=http_status.HTTP_201_CREATED
)
def register(
    req: RegisterRequest,
    actor: UserEntity | None = Depends(get_optional_user),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
    version: str = Depends(get_api_version),
) -> dict[str, Any]:
    inp = RegisterInput(
        email=req.email,
        password=req.password,
        first_name=req.first_name,
        last_name=req.last_name,
        role=req.role,
    )
    result = run_register(
        inp,
        user_repo,
        auth,
        clock,
        password_min_length=rules.auth.password_min_length,
        actor=actor,
    )
    return envelope(_auth_response(result), version)


@router.post("/login", response_model=ApiResponse[AuthResponse])
def login(
    req: LoginRequest,
    response: Response,
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
    version: str = Depends(get_api_version),
) -> dict[str, Any]:
    """Authenticate with email and password; also sets the HttpOnly cookie."""
    result = run_login(LoginInput(email=req.email, password=req.password), user_repo, auth, clock)
    _set_auth_cookie(response, result.access_token, rules.auth.tokens.access_ttl_minutes)
    return envelope(_auth_response(result), version)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
    clock: SystemClock = Depends(get_clock),
) -> Token:
    """OAuth2 password flow for the interactive docs; username is the email."""
    result = run_login(
        LoginInput(email=form_data.username, password=form_data.password), user_repo, auth, clock
    )
    return Token(access_token=result.access_token, token_type=result.token_type)


@router.post("/logout")
def logout(response: Response, version: str = Depends(get_api_version)) -> dict[str, Any]:
    """Log out user by clearing cookie."""
    response.delete_cookie(key="access_token")
    return envelope({"status": "success"}, version)


@router.get("/me", response_model=ApiResponse[UserResponse])
def read_users_me(
    current_user: UserEntity = Depends(get_current_user),
    version: str = Depends(get_api_version),
) -> dict[str, Any]:
    return envelope(UserResponse.from_entity(current_user), version)
