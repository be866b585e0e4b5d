"""
Content component - shared lifecycle plumbing for news and analysis.
"""

from .component import (
    apply_tags,
    build_page,
    check_category,
    check_tag_names,
    clamp_limit,
    load_detail,
    require_item,
    require_item_by_slug,
    reserve_slug,
)
from .models import ContentDetail, ContentPage, PageInfo
from .ports import CategoryRepoPort, ClockPort, ContentQuery, ContentRepoPort, TagRepoPort

__all__ = [
    # Helpers
    "apply_tags",
    "build_page",
    "check_category",
    "check_tag_names",
    "clamp_limit",
    "load_detail",
    "require_item",
    "require_item_by_slug",
    "reserve_slug",
    # Output models
    "ContentDetail",
    "ContentPage",
    "PageInfo",
    # Ports
    "CategoryRepoPort",
    "ClockPort",
    "ContentQuery",
    "ContentRepoPort",
    "TagRepoPort",
]
