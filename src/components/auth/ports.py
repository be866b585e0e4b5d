from src.ports.auth import AuthPort
from src.ports.clock import ClockPort
from src.ports.repo import UserRepoPort

__all__ = ["AuthPort", "ClockPort", "UserRepoPort"]
