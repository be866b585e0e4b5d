"""Category component port definitions."""

from src.ports.clock import ClockPort
from src.ports.repo import CategoryRepoPort

__all__ = ["CategoryRepoPort", "ClockPort"]
