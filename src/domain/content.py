"""
Editorial content aggregates: NewsEntity and AnalysisEntity.

Both share one lifecycle (ContentEntity) and differ only in their field
rule set and the extra analysis fields.

State machine:
- DRAFT -> REVIEW          submit_for_review()
- REVIEW -> PUBLISHED      publish(editor_id)
- PUBLISHED -> DRAFT       unpublish()     (news only)
- PUBLISHED -> ARCHIVED    archive()       (news only)

Guards:
- update() only while DRAFT
- set_featured(True) only while PUBLISHED
- increment_views() counts only while PUBLISHED, otherwise no-op

Entities validate on construction and on every mutation. A failed update
leaves the entity untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, ClassVar
from uuid import uuid4

from src.domain.errors import IllegalTransitionError, ValidationError
from src.domain.value_objects import AnalysisType, ContentStatus, Slug, StockTicker


def utcnow() -> datetime:
    return datetime.now(UTC)


# --- Field rules ---


@dataclass(frozen=True)
class ContentRules:
    """Field limits for one kind of content."""

    title_min: int
    title_min_message: str
    content_min: int
    content_min_message: str
    title_max: int = 500
    subtitle_max: int = 1000
    excerpt_max: int = 500
    meta_title_max: int = 255
    meta_description_max: int = 500


# News only requires non-empty title and body; analysis is stricter.
# The difference is kept as-is pending product confirmation.
NEWS_RULES = ContentRules(
    title_min=1,
    title_min_message="Title is required",
    content_min=1,
    content_min_message="Content is required",
)

ANALYSIS_RULES = ContentRules(
    title_min=10,
    title_min_message="Title must be at least 10 characters",
    content_min=50,
    content_min_message="Content must be at least 50 characters",
)


# Operation -> status the entity must currently be in.
LIFECYCLE_GUARDS: dict[str, ContentStatus] = {
    "update": ContentStatus.DRAFT,
    "submit_for_review": ContentStatus.DRAFT,
    "publish": ContentStatus.REVIEW,
    "unpublish": ContentStatus.PUBLISHED,
    "archive": ContentStatus.PUBLISHED,
    "feature": ContentStatus.PUBLISHED,
}


def _optional_str(value: Any) -> str | None:
    # Empty strings are stored as None on create and update.
    return value if value else None


def _parse_dt(value: datetime | str | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


# --- Aggregate base ---


class ContentEntity:
    """Lifecycle shared by every editorial aggregate."""

    rules: ClassVar[ContentRules]
    guard_messages: ClassVar[dict[str, str]]
    updatable_fields: ClassVar[frozenset[str]] = frozenset(
        {
            "title",
            "subtitle",
            "content",
            "excerpt",
            "category_id",
            "featured_image_url",
            "featured_image_alt",
            "meta_title",
            "meta_description",
            "meta_keywords",
        }
    )
    optional_fields: ClassVar[frozenset[str]] = frozenset(
        {
            "subtitle",
            "excerpt",
            "category_id",
            "featured_image_url",
            "featured_image_alt",
            "meta_title",
            "meta_description",
            "meta_keywords",
        }
    )

    def __init__(
        self,
        *,
        id: str,
        slug: Slug,
        title: str,
        content: str,
        status: ContentStatus,
        created_at: datetime,
        updated_at: datetime,
        subtitle: str | None = None,
        excerpt: str | None = None,
        is_featured: bool = False,
        category_id: str | None = None,
        featured_image_url: str | None = None,
        featured_image_alt: str | None = None,
        meta_title: str | None = None,
        meta_description: str | None = None,
        meta_keywords: str | None = None,
        author_id: str | None = None,
        editor_id: str | None = None,
        published_at: datetime | None = None,
        archived_at: datetime | None = None,
        view_count: int = 0,
        version: int = 0,
    ) -> None:
        if not id:
            raise ValidationError("Id is required")
        if view_count < 0:
            raise ValidationError("View count cannot be negative")

        self._id = id
        self._slug = slug
        self._title = title
        self._subtitle = subtitle
        self._content = content
        self._excerpt = excerpt
        self._status = status
        self._is_featured = is_featured
        self._category_id = category_id
        self._featured_image_url = featured_image_url
        self._featured_image_alt = featured_image_alt
        self._meta_title = meta_title
        self._meta_description = meta_description
        self._meta_keywords = meta_keywords
        self._author_id = author_id
        self._editor_id = editor_id
        self._created_at = created_at
        self._updated_at = updated_at
        self._published_at = published_at
        self._archived_at = archived_at
        self._view_count = view_count
        self._version = version

        self._validate(self._editable_values())

    # --- Identity & read access ---

    @property
    def id(self) -> str:
        return self._id

    @property
    def slug(self) -> Slug:
        return self._slug

    @property
    def title(self) -> str:
        return self._title

    @property
    def subtitle(self) -> str | None:
        return self._subtitle

    @property
    def content(self) -> str:
        return self._content

    @property
    def excerpt(self) -> str | None:
        return self._excerpt

    @property
    def status(self) -> ContentStatus:
        return self._status

    @property
    def is_featured(self) -> bool:
        return self._is_featured

    @property
    def category_id(self) -> str | None:
        return self._category_id

    @property
    def featured_image_url(self) -> str | None:
        return self._featured_image_url

    @property
    def featured_image_alt(self) -> str | None:
        return self._featured_image_alt

    @property
    def meta_title(self) -> str | None:
        return self._meta_title

    @property
    def meta_description(self) -> str | None:
        return self._meta_description

    @property
    def meta_keywords(self) -> str | None:
        return self._meta_keywords

    @property
    def author_id(self) -> str | None:
        return self._author_id

    @property
    def editor_id(self) -> str | None:
        return self._editor_id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def published_at(self) -> datetime | None:
        return self._published_at

    @property
    def archived_at(self) -> datetime | None:
        return self._archived_at

    @property
    def view_count(self) -> int:
        return self._view_count

    @property
    def version(self) -> int:
        """Persisted row version the entity was loaded at (0 = never saved)."""
        return self._version

    def is_draft(self) -> bool:
        return self._status.is_draft

    def is_review(self) -> bool:
        return self._status.is_review

    def is_published(self) -> bool:
        return self._status.is_published

    def is_archived(self) -> bool:
        return self._status.is_archived

    # --- Lifecycle ---

    def update(self, changes: Mapping[str, Any], now: datetime | None = None) -> None:
        """
        Apply a partial update (PATCH semantics).

        Keys absent from `changes` are left alone; a key present with None
        clears an optional field. Only allowed while DRAFT.
        """
        self._require("update")

        unknown = set(changes) - self.updatable_fields
        if unknown:
            raise ValidationError(f"Unknown or read-only fields: {', '.join(sorted(unknown))}")

        values = self._editable_values()
        values.update(self._coerce_changes(changes))
        self._validate(values)

        for name, value in values.items():
            setattr(self, f"_{name}", value)
        self._touch(now)

    def submit_for_review(self, now: datetime | None = None) -> None:
        self._require("submit_for_review")
        self._status = ContentStatus.REVIEW
        self._touch(now)

    def publish(self, editor_id: str, now: datetime | None = None) -> None:
        self._require("publish")
        stamp = now or utcnow()
        self._status = ContentStatus.PUBLISHED
        self._editor_id = editor_id
        self._published_at = stamp
        self._updated_at = stamp

    def set_featured(self, featured: bool, now: datetime | None = None) -> None:
        if featured:
            self._require("feature")
        self._is_featured = featured
        self._touch(now)

    def increment_views(self) -> None:
        """Count a view; silently ignored unless PUBLISHED."""
        if self._status.is_published:
            self._view_count += 1

    def mark_persisted(self, version: int) -> None:
        """Called by repositories after a successful save."""
        self._version = version

    # --- Internals ---

    def _require(self, operation: str) -> None:
        if self._status is not LIFECYCLE_GUARDS[operation]:
            raise IllegalTransitionError(self.guard_messages[operation])

    def _touch(self, now: datetime | None) -> None:
        self._updated_at = now or utcnow()

    def _editable_values(self) -> dict[str, Any]:
        return {name: getattr(self, f"_{name}") for name in self.updatable_fields}

    def _coerce_changes(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        return {
            name: _optional_str(value) if name in self.optional_fields else value
            for name, value in changes.items()
        }

    def _validate(self, values: Mapping[str, Any]) -> None:
        rules = self.rules
        title = values["title"]
        content = values["content"]

        if not title or len(title.strip()) < rules.title_min:
            raise ValidationError(rules.title_min_message)
        if len(title) > rules.title_max:
            raise ValidationError(f"Title must be {rules.title_max} characters or less")

        if not content or len(content.strip()) < rules.content_min:
            raise ValidationError(rules.content_min_message)

        _check_max(values["subtitle"], rules.subtitle_max, "Subtitle")
        _check_max(values["excerpt"], rules.excerpt_max, "Excerpt")
        _check_max(values["meta_title"], rules.meta_title_max, "Meta title")
        _check_max(values["meta_description"], rules.meta_description_max, "Meta description")

    @staticmethod
    def _common_from_record(record: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "id": record["id"],
            "slug": Slug.create(record["slug"]),
            "title": record["title"],
            "subtitle": record.get("subtitle"),
            "content": record["content"],
            "excerpt": record.get("excerpt"),
            "status": ContentStatus.parse(record["status"]),
            "is_featured": bool(record.get("is_featured", False)),
            "category_id": record.get("category_id"),
            "featured_image_url": record.get("featured_image_url"),
            "featured_image_alt": record.get("featured_image_alt"),
            "meta_title": record.get("meta_title"),
            "meta_description": record.get("meta_description"),
            "meta_keywords": record.get("meta_keywords"),
            "author_id": record.get("author_id"),
            "editor_id": record.get("editor_id"),
            "created_at": _parse_dt(record["created_at"]),
            "updated_at": _parse_dt(record["updated_at"]),
            "published_at": _parse_dt(record.get("published_at")),
            "archived_at": _parse_dt(record.get("archived_at")),
            "view_count": int(record.get("view_count") or 0),
            "version": int(record.get("version") or 0),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentEntity):
            return NotImplemented
        return type(self) is type(other) and self._id == other._id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._id))

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}(id={self._id!r}, slug={self._slug.value!r}, status={self._status.value})"


def _check_max(value: str | None, limit: int, label: str) -> None:
    if value and len(value) > limit:
        raise ValidationError(f"{label} must be {limit} characters or less")


# --- News ---


class NewsEntity(ContentEntity):
    rules = NEWS_RULES
    guard_messages = {
        "update": "Can only edit news in DRAFT status",
        "submit_for_review": "Can only submit DRAFT news for review",
        "publish": "Can only publish news in REVIEW status",
        "unpublish": "Can only unpublish PUBLISHED news",
        "archive": "Can only archive PUBLISHED news",
        "feature": "Only published news can be featured",
    }

    @classmethod
    def create(
        cls,
        *,
        slug: Slug,
        title: str,
        content: str,
        author_id: str,
        id: str | None = None,
        subtitle: str | None = None,
        excerpt: str | None = None,
        is_featured: bool = False,
        category_id: str | None = None,
        featured_image_url: str | None = None,
        featured_image_alt: str | None = None,
        meta_title: str | None = None,
        meta_description: str | None = None,
        meta_keywords: str | None = None,
        now: datetime | None = None,
    ) -> NewsEntity:
        """New news item in DRAFT with zero views."""
        stamp = now or utcnow()
        return cls(
            id=id or str(uuid4()),
            slug=slug,
            title=title,
            subtitle=_optional_str(subtitle),
            content=content,
            excerpt=_optional_str(excerpt),
            status=ContentStatus.DRAFT,
            is_featured=bool(is_featured),
            category_id=_optional_str(category_id),
            featured_image_url=_optional_str(featured_image_url),
            featured_image_alt=_optional_str(featured_image_alt),
            meta_title=_optional_str(meta_title),
            meta_description=_optional_str(meta_description),
            meta_keywords=_optional_str(meta_keywords),
            author_id=author_id,
            created_at=stamp,
            updated_at=stamp,
        )

    @classmethod
    def reconstitute(cls, record: Mapping[str, Any]) -> NewsEntity:
        """Rebuild from stored values. Corrupt rows fail validation."""
        return cls(**cls._common_from_record(record))

    def unpublish(self, now: datetime | None = None) -> None:
        self._require("unpublish")
        self._status = ContentStatus.DRAFT
        self._published_at = None
        self._touch(now)

    def archive(self, now: datetime | None = None) -> None:
        self._require("archive")
        stamp = now or utcnow()
        self._status = ContentStatus.ARCHIVED
        self._archived_at = stamp
        self._updated_at = stamp


# --- Analysis ---


class AnalysisEntity(ContentEntity):
    rules = ANALYSIS_RULES
    guard_messages = {
        "update": "Can only update analysis in DRAFT status",
        "submit_for_review": "Can only submit DRAFT analysis for review",
        "publish": "Can only publish analysis in REVIEW status",
        "feature": "Only published analysis can be featured",
    }
    updatable_fields = ContentEntity.updatable_fields | {
        "stock_ticker",
        "analysis_type",
        "target_price",
    }

    def __init__(
        self,
        *,
        stock_ticker: StockTicker,
        analysis_type: AnalysisType,
        target_price: float | None = None,
        **kwargs: Any,
    ) -> None:
        # Set before the base constructor validates.
        self._stock_ticker = stock_ticker
        self._analysis_type = analysis_type
        self._target_price = target_price
        super().__init__(**kwargs)

    @classmethod
    def create(
        cls,
        *,
        slug: Slug,
        title: str,
        content: str,
        author_id: str,
        stock_ticker: StockTicker,
        analysis_type: AnalysisType,
        target_price: float | None = None,
        id: str | None = None,
        subtitle: str | None = None,
        excerpt: str | None = None,
        is_featured: bool = False,
        category_id: str | None = None,
        featured_image_url: str | None = None,
        featured_image_alt: str | None = None,
        meta_title: str | None = None,
        meta_description: str | None = None,
        meta_keywords: str | None = None,
        now: datetime | None = None,
    ) -> AnalysisEntity:
        """New stock analysis in DRAFT with zero views."""
        stamp = now or utcnow()
        return cls(
            id=id or str(uuid4()),
            slug=slug,
            title=title,
            subtitle=_optional_str(subtitle),
            content=content,
            excerpt=_optional_str(excerpt),
            status=ContentStatus.DRAFT,
            is_featured=bool(is_featured),
            stock_ticker=stock_ticker,
            analysis_type=analysis_type,
            target_price=target_price,
            category_id=_optional_str(category_id),
            featured_image_url=_optional_str(featured_image_url),
            featured_image_alt=_optional_str(featured_image_alt),
            meta_title=_optional_str(meta_title),
            meta_description=_optional_str(meta_description),
            meta_keywords=_optional_str(meta_keywords),
            author_id=author_id,
            created_at=stamp,
            updated_at=stamp,
        )

    @classmethod
    def reconstitute(cls, record: Mapping[str, Any]) -> AnalysisEntity:
        target_price = record.get("target_price")
        return cls(
            stock_ticker=StockTicker.create(record["stock_ticker"]),
            analysis_type=AnalysisType.from_string(record["analysis_type"]),
            target_price=float(target_price) if target_price is not None else None,
            **cls._common_from_record(record),
        )

    @property
    def stock_ticker(self) -> StockTicker:
        return self._stock_ticker

    @property
    def analysis_type(self) -> AnalysisType:
        return self._analysis_type

    @property
    def target_price(self) -> float | None:
        return self._target_price

    def _coerce_changes(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        coerced = super()._coerce_changes(changes)
        if isinstance(coerced.get("stock_ticker"), str):
            coerced["stock_ticker"] = StockTicker.create(coerced["stock_ticker"])
        if isinstance(coerced.get("analysis_type"), str):
            coerced["analysis_type"] = AnalysisType.from_string(coerced["analysis_type"])
        if coerced.get("stock_ticker", self._stock_ticker) is None:
            raise ValidationError("Stock ticker is required")
        if coerced.get("analysis_type", self._analysis_type) is None:
            raise ValidationError("Analysis type is required")
        return coerced

    def _validate(self, values: Mapping[str, Any]) -> None:
        super()._validate(values)
        target_price = values["target_price"]
        if target_price is not None and target_price < 0:
            raise ValidationError("Target price must be positive")
