"""Analysis component port definitions."""

from src.ports.clock import ClockPort
from src.ports.repo import AnalysisRepoPort, CategoryRepoPort, ContentQuery, TagRepoPort

__all__ = ["AnalysisRepoPort", "CategoryRepoPort", "ClockPort", "ContentQuery", "TagRepoPort"]
