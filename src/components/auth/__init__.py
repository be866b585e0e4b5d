"""
Auth component - Authentication for editorial staff.

Handles registration, login and bearer token resolution.
"""

from .component import (
    run_authenticate_token,
    run_get_current_user,
    run_login,
    run_register,
    token_claims,
)
from .models import AuthOutput, LoginInput, RegisterInput
from .ports import AuthPort, ClockPort, UserRepoPort

__all__ = [
    # Entry points
    "run_authenticate_token",
    "run_get_current_user",
    "run_login",
    "run_register",
    "token_claims",
    # Models
    "AuthOutput",
    "LoginInput",
    "RegisterInput",
    # Ports
    "AuthPort",
    "ClockPort",
    "UserRepoPort",
]
