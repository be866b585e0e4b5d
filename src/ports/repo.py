"""
Repository contracts for the editorial core.

Content repositories persist the full entity state on every save (upsert by
id, guarded by the entity version). Deletes are soft unless `hard_delete`
is called; soft-deleted rows are excluded from finds unless
`include_deleted` is set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Protocol, TypeVar

from src.domain.content import AnalysisEntity, ContentEntity, NewsEntity
from src.domain.taxonomy import CategoryEntity, TagEntity
from src.domain.user import UserEntity

SortField = Literal["created_at", "published_at", "updated_at", "view_count", "title"]
SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class ContentQuery:
    """Filter, sort and page for content searches. Unset filters match everything."""

    page: int = 1
    limit: int = 10
    status: str | None = None
    author_id: str | None = None
    category_id: str | None = None
    tag_id: str | None = None
    search_term: str | None = None
    is_featured: bool | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    sort_by: SortField = "created_at"
    sort_order: SortOrder = "desc"
    include_deleted: bool = False
    # Analysis only
    stock_ticker: str | None = None
    stock_tickers: list[str] = field(default_factory=list)
    analysis_type: str | None = None

    @property
    def offset(self) -> int:
        return (max(self.page, 1) - 1) * self.limit


@dataclass(frozen=True)
class TagUsage:
    tag: TagEntity
    count: int


E = TypeVar("E", bound=ContentEntity)


class ContentRepoPort(Protocol[E]):
    def save(self, entity: E) -> None:
        """Upsert the complete entity state. Raises ConflictError on a stale version."""
        ...

    def find_by_id(self, entity_id: str, include_deleted: bool = False) -> E | None: ...

    def find_by_slug(self, slug: str, include_deleted: bool = False) -> E | None: ...

    def find_many(self, query: ContentQuery) -> list[E]: ...

    def count(self, query: ContentQuery) -> int:
        """Count matches for the query's filters, ignoring paging and sort."""
        ...

    def exists_by_slug(self, slug: str) -> bool: ...

    def delete(self, entity_id: str) -> None:
        """Soft delete: stamp deleted_at."""
        ...

    def hard_delete(self, entity_id: str) -> None: ...

    def replace_tags(self, entity_id: str, tag_ids: list[str]) -> None:
        """Replace the whole tag association set atomically."""
        ...

    def get_tag_ids(self, entity_id: str) -> list[str]: ...


NewsRepoPort = ContentRepoPort[NewsEntity]
AnalysisRepoPort = ContentRepoPort[AnalysisEntity]


class CategoryRepoPort(Protocol):
    def save(self, category: CategoryEntity) -> None: ...

    def find_by_id(self, category_id: str) -> CategoryEntity | None: ...

    def find_by_slug(self, slug: str) -> CategoryEntity | None: ...

    def find_all(self) -> list[CategoryEntity]: ...

    def exists_by_name(self, name: str) -> bool: ...

    def delete(self, category_id: str) -> None: ...


class TagRepoPort(Protocol):
    def save(self, tag: TagEntity) -> None: ...

    def find_by_id(self, tag_id: str) -> TagEntity | None: ...

    def find_by_slug(self, slug: str) -> TagEntity | None: ...

    def find_by_ids(self, tag_ids: list[str]) -> list[TagEntity]: ...

    def find_all(self) -> list[TagEntity]: ...

    def exists_by_name(self, name: str) -> bool: ...

    def delete(self, tag_id: str) -> None: ...

    def find_or_create_by_names(self, names: list[str]) -> list[TagEntity]:
        """Case-insensitive lookup; missing names are created."""
        ...

    def get_popular_tags(self, limit: int) -> list[TagUsage]: ...


class UserRepoPort(Protocol):
    def save(self, user: UserEntity) -> None: ...

    def find_by_id(self, user_id: str) -> UserEntity | None: ...

    def find_by_email(self, email: str) -> UserEntity | None: ...

    def exists_by_email(self, email: str) -> bool: ...

    def count(self) -> int: ...
