"""
News component - news article lifecycle.

DRAFT -> REVIEW -> PUBLISHED, with unpublish back to DRAFT and archive.
"""

from .component import NewsComponent
from .models import CreateNewsInput, ListNewsInput, PublishNewsInput, UpdateNewsInput
from .ports import CategoryRepoPort, ClockPort, NewsRepoPort, TagRepoPort

__all__ = [
    # Entry point
    "NewsComponent",
    # Input models
    "CreateNewsInput",
    "ListNewsInput",
    "PublishNewsInput",
    "UpdateNewsInput",
    # Ports
    "CategoryRepoPort",
    "ClockPort",
    "NewsRepoPort",
    "TagRepoPort",
]
