"""
Value objects for the editorial domain.

Slug, ContentStatus, StockTicker, AnalysisType and UserRole are immutable
and compare by value. Every constructor validates its input and raises
ValidationError on failure.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from src.domain.errors import ValidationError

# --- Slug ---

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
SLUG_MAX_LENGTH = 255


@dataclass(frozen=True)
class Slug:
    """URL-safe identifier: lowercase alphanumeric segments joined by single hyphens."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValidationError("Slug cannot be empty")
        if len(self.value) > SLUG_MAX_LENGTH:
            raise ValidationError(f"Slug must be {SLUG_MAX_LENGTH} characters or less")
        if not SLUG_PATTERN.match(self.value):
            raise ValidationError(
                "Slug must contain only lowercase letters, numbers, and hyphens "
                "(no leading/trailing hyphens)"
            )

    @classmethod
    def create(cls, raw: str) -> Slug:
        """Validate raw as given."""
        return cls(raw)

    @classmethod
    def from_title(cls, title: str) -> Slug:
        """
        Derive a slug from free text.

        lowercase -> whitespace runs to '-' -> drop disallowed chars ->
        collapse '-' runs -> trim edge '-' -> truncate.
        """
        slug = title.lower().strip()
        slug = re.sub(r"\s+", "-", slug)
        slug = re.sub(r"[^a-z0-9-]", "", slug)
        slug = re.sub(r"-+", "-", slug)
        slug = slug.strip("-")
        # Truncation can expose a hyphen at the cut point.
        slug = slug[:SLUG_MAX_LENGTH].rstrip("-")
        return cls(slug)

    @staticmethod
    def is_valid(raw: str) -> bool:
        try:
            Slug(raw)
        except ValidationError:
            return False
        return True

    def __str__(self) -> str:
        return self.value


# --- Content status ---


class ContentStatus(str, Enum):
    DRAFT = "DRAFT"
    REVIEW = "REVIEW"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"

    @classmethod
    def parse(cls, raw: str) -> ContentStatus:
        """Case-insensitive parse; unknown values raise ValidationError."""
        try:
            return cls(raw.strip().upper())
        except (ValueError, AttributeError):
            raise ValidationError(f"Invalid content status: {raw}") from None

    def can_transition_to(self, target: ContentStatus) -> bool:
        return target in STATUS_TRANSITIONS[self]

    @property
    def is_draft(self) -> bool:
        return self is ContentStatus.DRAFT

    @property
    def is_review(self) -> bool:
        return self is ContentStatus.REVIEW

    @property
    def is_published(self) -> bool:
        return self is ContentStatus.PUBLISHED

    @property
    def is_archived(self) -> bool:
        return self is ContentStatus.ARCHIVED


STATUS_TRANSITIONS: dict[ContentStatus, frozenset[ContentStatus]] = {
    ContentStatus.DRAFT: frozenset({ContentStatus.REVIEW}),
    ContentStatus.REVIEW: frozenset({ContentStatus.PUBLISHED, ContentStatus.DRAFT}),
    ContentStatus.PUBLISHED: frozenset({ContentStatus.ARCHIVED, ContentStatus.DRAFT}),
    ContentStatus.ARCHIVED: frozenset(),
}


# --- Analysis specific ---

TICKER_PATTERN = re.compile(r"^[A-Z0-9]+$")
TICKER_MAX_LENGTH = 20


@dataclass(frozen=True)
class StockTicker:
    """Exchange ticker symbol, e.g. BBRI, TLKM."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValidationError("Stock ticker is required")
        if len(self.value) > TICKER_MAX_LENGTH:
            raise ValidationError(
                f"Stock ticker must be {TICKER_MAX_LENGTH} characters or less"
            )
        if not TICKER_PATTERN.match(self.value):
            raise ValidationError("Stock ticker must contain only alphanumeric characters")

    @classmethod
    def create(cls, raw: str) -> StockTicker:
        return cls(raw.strip().upper())

    def __str__(self) -> str:
        return self.value


class AnalysisType(str, Enum):
    TECHNICAL = "TECHNICAL"
    FUNDAMENTAL = "FUNDAMENTAL"
    SENTIMENT = "SENTIMENT"
    MARKET_UPDATE = "MARKET_UPDATE"

    @classmethod
    def from_string(cls, raw: str) -> AnalysisType:
        try:
            return cls(raw.upper())
        except (ValueError, AttributeError):
            allowed = ", ".join(member.value for member in cls)
            raise ValidationError(
                f"Invalid analysis type: {raw}. Must be one of: {allowed}"
            ) from None


# --- Users ---


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    AUTHOR = "AUTHOR"

    @classmethod
    def from_string(cls, raw: str) -> UserRole:
        try:
            return cls(raw.upper())
        except (ValueError, AttributeError):
            raise ValidationError(f"Invalid user role: {raw}") from None

    @property
    def can_publish(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.EDITOR)

    @property
    def is_admin(self) -> bool:
        return self is UserRole.ADMIN
