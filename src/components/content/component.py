"""
Content component - helpers shared by the news and analysis use cases.

Covers the parts of each use case that do not depend on the content kind:
slug reservation, existence checks, tag resolution, category checks,
response enrichment and pagination.
"""

from __future__ import annotations

import logging
from typing import TypeVar

from src.domain.content import ContentEntity
from src.domain.errors import ConflictError, NotFoundError
from src.domain.taxonomy import TagEntity
from src.domain.value_objects import Slug

from .models import ContentDetail, ContentPage, PageInfo
from .ports import CategoryRepoPort, ContentQuery, ContentRepoPort, TagRepoPort

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=ContentEntity)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def reserve_slug(repo: ContentRepoPort[E], title: str) -> Slug:
    """Derive a slug from the title; ConflictError if a live item already uses it."""
    slug = Slug.from_title(title)
    if repo.exists_by_slug(slug.value):
        raise ConflictError(f"Slug already exists: {slug.value}")
    return slug


def require_item(repo: ContentRepoPort[E], item_id: str, label: str) -> E:
    item = repo.find_by_id(item_id)
    if item is None:
        raise NotFoundError(label, item_id)
    return item


def require_item_by_slug(repo: ContentRepoPort[E], slug: str, label: str) -> E:
    item = repo.find_by_slug(slug)
    if item is None:
        raise NotFoundError(label, slug)
    return item


def check_category(category_repo: CategoryRepoPort, category_id: str | None) -> None:
    if category_id and category_repo.find_by_id(category_id) is None:
        raise NotFoundError("Category", category_id)


def check_tag_names(tag_names: list[str] | None) -> None:
    """ValidationError if any non-blank name could not become a tag."""
    for raw in tag_names or []:
        name = raw.strip()
        if name:
            TagEntity.create(slug=Slug.from_title(name), name=name)


def apply_tags(
    repo: ContentRepoPort[E],
    tag_repo: TagRepoPort,
    item_id: str,
    tag_names: list[str] | None,
) -> None:
    """Replace the item's tags when names are given. None leaves tags untouched."""
    if tag_names is None:
        return
    tags = tag_repo.find_or_create_by_names(tag_names)
    repo.replace_tags(item_id, [t.id for t in tags])


def load_detail(
    item: E,
    repo: ContentRepoPort[E],
    category_repo: CategoryRepoPort,
    tag_repo: TagRepoPort,
) -> ContentDetail[E]:
    category = category_repo.find_by_id(item.category_id) if item.category_id else None
    tags = tag_repo.find_by_ids(repo.get_tag_ids(item.id))
    return ContentDetail(item=item, category=category, tags=tuple(tags))


def clamp_limit(limit: int | None, max_limit: int = MAX_PAGE_SIZE) -> int:
    if not limit or limit < 1:
        return DEFAULT_PAGE_SIZE
    return min(limit, max_limit)


def build_page(repo: ContentRepoPort[E], query: ContentQuery) -> ContentPage[E]:
    items = repo.find_many(query)
    total = repo.count(query)
    return ContentPage(
        items=tuple(items),
        pagination=PageInfo.build(query.page, query.limit, total),
    )
