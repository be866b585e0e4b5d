"""
Content component port definitions.

News and analysis share one repository contract; see src.ports.repo.
"""

from src.ports.clock import ClockPort
from src.ports.repo import CategoryRepoPort, ContentQuery, ContentRepoPort, TagRepoPort

__all__ = [
    "CategoryRepoPort",
    "ClockPort",
    "ContentQuery",
    "ContentRepoPort",
    "TagRepoPort",
]
