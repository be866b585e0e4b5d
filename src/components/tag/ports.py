"""Tag component port definitions."""

from src.ports.clock import ClockPort
from src.ports.repo import TagRepoPort, TagUsage

__all__ = ["ClockPort", "TagRepoPort", "TagUsage"]
