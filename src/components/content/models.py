"""
Content component - shared output models for news and analysis.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from src.domain.content import ContentEntity
from src.domain.taxonomy import CategoryEntity, TagEntity

E = TypeVar("E", bound=ContentEntity)


@dataclass(frozen=True)
class ContentDetail(Generic[E]):
    """A content item enriched with its category and tags."""

    item: E
    category: CategoryEntity | None
    tags: tuple[TagEntity, ...]


@dataclass(frozen=True)
class PageInfo:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> PageInfo:
        total_pages = math.ceil(total / limit) if limit > 0 else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


@dataclass(frozen=True)
class ContentPage(Generic[E]):
    """One page of a filtered content listing."""

    items: tuple[E, ...]
    pagination: PageInfo
