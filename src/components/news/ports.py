"""News component port definitions."""

from src.ports.clock import ClockPort
from src.ports.repo import CategoryRepoPort, ContentQuery, NewsRepoPort, TagRepoPort

__all__ = ["CategoryRepoPort", "ClockPort", "ContentQuery", "NewsRepoPort", "TagRepoPort"]
